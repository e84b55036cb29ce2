"""Tech stack catalogue CLI commands."""

import asyncio
from pathlib import Path

import typer

techs_app = typer.Typer()


def _print_records(records) -> None:
    typer.echo(f"{'Status':<10} {'Label':<24} {'Slug':<24} Messages")
    typer.echo("-" * 80)
    for record in records:
        messages = "; ".join([*record.errors, *(f"warning: {w}" for w in record.warnings)])
        typer.echo(f"{record.status.value:<10} {record.label[:24]:<24} {record.slug[:24]:<24} {messages}")


def _print_counts(counts) -> None:
    typer.echo(
        f"\nTotal: {counts.total}  valid: {counts.valid} ({counts.valid_with_warnings} with warnings)  "
        f"invalid: {counts.invalid}  duplicate: {counts.duplicate}  "
        f"success: {counts.success}  error: {counts.error}"
    )


@techs_app.command("import")
def import_techs(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="CSV or JSON file"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Validate and print the batch without writing"),
) -> None:
    """Bulk import tech stacks from a CSV or JSON file."""
    asyncio.run(_import_techs(file, dry_run=dry_run))


async def _import_techs(file: Path, *, dry_run: bool) -> None:
    from community_api.core.config import get_settings
    from community_api.core.database import session_scope
    from community_api.lib.tech_import import ImportParseError
    from community_api.services.tech_import_service import commit_import, preview_import

    content = file.read_text(encoding="utf-8-sig")
    settings = get_settings()
    async with session_scope(settings.database_url, schema=settings.database_schema) as session:
        try:
            preview = await preview_import(session, filename=file.name, content=content)
        except ImportParseError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1) from e

        _print_records(preview.records)
        _print_counts(preview.counts())
        if dry_run:
            typer.echo("\nDry run: nothing imported")
            return

        result = await commit_import(session, preview.records)

    typer.echo("\nImport results:")
    _print_records(result.records)
    counts = result.counts()
    _print_counts(counts)
    if counts.error:
        raise typer.Exit(code=1)


@techs_app.command("list")
def list_techs(
    search: str | None = typer.Option(None, "--search", "-s", help="Filter by label or slug"),
) -> None:
    """List catalogue techs with usage counts."""
    asyncio.run(_list_techs(search))


async def _list_techs(search: str | None) -> None:
    from community_api.core.config import get_settings
    from community_api.core.database import session_scope
    from community_api.services.tech_service import list_techs

    settings = get_settings()
    async with session_scope(settings.database_url, schema=settings.database_schema) as session:
        rows = await list_techs(session, search=search)
    typer.echo(f"{'Label':<24} {'Slug':<24} {'Used':<6} Image")
    typer.echo("-" * 80)
    for tech, usage in rows:
        typer.echo(f"{tech.label[:24]:<24} {tech.slug[:24]:<24} {usage:<6} {tech.img_url}")
    typer.echo(f"\nTotal: {len(rows)}")
