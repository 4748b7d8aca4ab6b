"""LabHub operator CLI — run the server and manage accounts directly.

Usage:
    labhub serve                      # Run the API with uvicorn
    labhub init-db                    # Create tables from the models (dev)
    labhub promote ada@lab.edu        # Grant the admin flag
    labhub demote ada@lab.edu         # Revoke the admin flag
    labhub users                      # List accounts, admin flag, roster
    labhub routes                     # Access table: route → capabilities

The admin flag has no HTTP route; promote/demote are the only way to
change it. These commands talk to the database, not to a running server.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys
from typing import Optional

import click
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from labhub import __version__
from labhub.config import settings
from labhub.db.engine import build_engine
from labhub.db.models import Base, TeamMember, User
from labhub.services.user_service import UserService

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "-"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _engine(ctx: click.Context) -> AsyncEngine:
    return build_engine(ctx.obj["database_url"])


async def _set_admin(url: str, email: str, flag: bool) -> bool:
    engine = build_engine(url)
    try:
        sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with sessions() as db:
            user = await UserService(db).set_admin(email, flag)
            return user is not None
    finally:
        await engine.dispose()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="labhub")
@click.option(
    "--database-url",
    envvar="LABHUB_DATABASE_URL",
    default=None,
    help="Override the configured database URL.",
)
@click.pass_context
def main(ctx: click.Context, database_url: Optional[str]):
    """LabHub — membership and content backend for a lab website."""
    ctx.ensure_object(dict)
    ctx.obj["database_url"] = database_url or settings.database_url


@main.command()
@click.option("--host", default=None, help="Bind address (default from settings).")
@click.option("--port", default=None, type=int, help="Port (default from settings).")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes.")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "labhub.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
@click.pass_context
def init_db(ctx: click.Context):
    """Create every table from the models. Use Alembic in production."""

    async def _impl():
        engine = _engine(ctx)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        finally:
            await engine.dispose()

    _run(_impl())
    click.secho("Tables created.", fg="green")


@main.command()
@click.argument("email")
@click.pass_context
def promote(ctx: click.Context, email: str):
    """Grant the admin flag to the account with EMAIL."""
    if not _run(_set_admin(ctx.obj["database_url"], email, True)):
        click.secho(f"No user with email {email}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"{email} is now an admin", fg="green")


@main.command()
@click.argument("email")
@click.pass_context
def demote(ctx: click.Context, email: str):
    """Revoke the admin flag from the account with EMAIL."""
    if not _run(_set_admin(ctx.obj["database_url"], email, False)):
        click.secho(f"No user with email {email}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"{email} is no longer an admin", fg="green")


@main.command()
@click.pass_context
def users(ctx: click.Context):
    """List accounts with their admin flag and roster status."""

    async def _impl():
        engine = _engine(ctx)
        try:
            async with engine.connect() as conn:
                result = await conn.execute(
                    select(User.email, User.name, User.is_admin, TeamMember.is_alumni)
                    .outerjoin(TeamMember, TeamMember.user_id == User.id)
                    .order_by(User.created_at)
                )
                return result.all()
        finally:
            await engine.dispose()

    rows = _run(_impl())
    if not rows:
        click.echo("No users.")
        return

    def _team(is_alumni):
        if is_alumni is None:
            return "-"
        return "alumni" if is_alumni else "member"

    _print_table(
        [
            {
                "email": r.email,
                "name": r.name,
                "admin": "yes" if r.is_admin else "no",
                "team": _team(r.is_alumni),
            }
            for r in rows
        ],
        [("EMAIL", "email", 32), ("NAME", "name", 24), ("ADMIN", "admin", 5), ("TEAM", "team", 7)],
    )


@main.command()
def routes():
    """Print every API route with the capabilities it requires."""
    from labhub.auth.capabilities import route_capabilities
    from labhub.main import app

    table = route_capabilities(app)
    rows = []
    for (method, path), caps in sorted(table.items(), key=lambda kv: (kv[0][1], kv[0][0])):
        if caps is None:
            required = "UNDECLARED"
        else:
            required = ", ".join(sorted(caps)) or "public"
        rows.append({"method": method, "path": path, "caps": required})
    _print_table(rows, [("METHOD", "method", 6), ("PATH", "path", 36), ("REQUIRES", "caps", 40)])


if __name__ == "__main__":
    main()
