"""Typer CLI root application with the serve command."""

import typer

from community_api.core.config import get_settings
from community_api.core.logging import setup_logging

app = typer.Typer(name="community-api", help="Community admin backend CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "community_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    from community_api.cli.contributors_cmd import contributors_app
    from community_api.cli.db_cmd import db_app
    from community_api.cli.techs_cmd import techs_app
    from community_api.cli.user_cmd import user_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(user_app, name="user", help="Member management commands")
    app.add_typer(techs_app, name="techs", help="Tech stack catalogue commands")
    app.add_typer(contributors_app, name="contributors", help="GitHub contributor commands")


_register_subcommands()
