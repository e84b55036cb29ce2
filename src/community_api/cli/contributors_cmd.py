"""GitHub contributor CLI commands."""

import asyncio

import typer

contributors_app = typer.Typer()


@contributors_app.command("sync")
def sync() -> None:
    """Mirror the platform repository's contributors from GitHub."""
    asyncio.run(_sync())


async def _sync() -> None:
    from community_api.core.config import get_settings
    from community_api.core.database import session_scope
    from community_api.lib.github import GitHubClient, GitHubClientError
    from community_api.services.contributor_service import sync_contributors

    settings = get_settings()
    client = GitHubClient(settings.github_repo, token=settings.github_token, timeout=settings.github_timeout)
    try:
        async with session_scope(settings.database_url, schema=settings.database_schema) as session:
            processed = await sync_contributors(session, client)
    except GitHubClientError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await client.close()
    typer.echo(f"Synced {processed} contributors from {settings.github_repo}")
