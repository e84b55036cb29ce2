"""Member management CLI commands."""

import asyncio
import uuid

import typer

user_app = typer.Typer()


@user_app.command("create")
def create_user(
    username: str = typer.Option(..., prompt=True, help="Username"),
    email: str = typer.Option(..., prompt=True, help="Email address"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password"),
    role: str = typer.Option("user", prompt=True, help="Role (user/mod/admin)"),
    if_not_exists: bool = typer.Option(
        False,
        "--if-not-exists",
        help="Exit successfully if the user already exists",
    ),
) -> None:
    """Create a member account."""
    asyncio.run(_create_user(username, email, password, role, if_not_exists=if_not_exists))


async def _create_user(
    username: str,
    email: str,
    password: str,
    role: str,
    *,
    if_not_exists: bool = False,
) -> None:
    from pydantic import ValidationError

    from community_api.core.config import get_settings
    from community_api.core.database import session_scope
    from community_api.schemas.auth import UserCreateRequest
    from community_api.services.auth_service import create_user

    try:
        request = UserCreateRequest(username=username, email=email, password=password, role=role)
    except ValidationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    settings = get_settings()
    async with session_scope(settings.database_url, schema=settings.database_schema) as session:
        try:
            user = await create_user(session, request)
        except ValueError as e:
            if if_not_exists and "already exists" in str(e):
                typer.echo(f"User '{username}' already exists, skipping (--if-not-exists)")
                return
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1) from e
    typer.echo(f"User '{user.username}' created with role '{user.role}'")


@user_app.command("list")
def list_users(
    page: int = typer.Option(1, "--page", min=1, help="Page number"),
    page_size: int = typer.Option(50, "--page-size", min=1, max=500, help="Users per page"),
) -> None:
    """List members."""
    asyncio.run(_list_users(page, page_size))


async def _list_users(page: int, page_size: int) -> None:
    from community_api.core.config import get_settings
    from community_api.core.database import session_scope
    from community_api.services.auth_service import list_users

    settings = get_settings()
    async with session_scope(settings.database_url, schema=settings.database_schema) as session:
        users, total = await list_users(session, page, page_size)
    typer.echo(f"{'Username':<20} {'Email':<30} {'Role':<8} {'Active':<8}")
    typer.echo("-" * 66)
    for user in users:
        typer.echo(f"{user.username:<20} {user.email:<30} {user.role:<8} {user.is_active!s:<8}")
    typer.echo(f"\nTotal: {total}")


@user_app.command("set-role")
def set_role(
    user_id: str = typer.Argument(..., help="User UUID"),
    role: str = typer.Argument(..., help="New role (user/mod/admin)"),
) -> None:
    """Change a member's role."""
    try:
        parsed_id = uuid.UUID(user_id)
    except ValueError as e:
        typer.echo(f"Error: '{user_id}' is not a valid UUID", err=True)
        raise typer.Exit(code=1) from e
    asyncio.run(_set_role(parsed_id, role))


async def _set_role(user_id: uuid.UUID, role: str) -> None:
    from community_api.core.config import get_settings
    from community_api.core.database import session_scope
    from community_api.services.auth_service import update_role

    settings = get_settings()
    async with session_scope(settings.database_url, schema=settings.database_schema) as session:
        try:
            user = await update_role(session, user_id, role)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1) from e
    typer.echo(f"User '{user.username}' now has role '{user.role}'")
