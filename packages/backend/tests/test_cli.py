"""CLI tests — init-db, promote/demote, users, routes.

Learn: The CLI talks to the database directly, so these tests point it
at a SQLite file under tmp_path via --database-url and run each command
through click's CliRunner.
"""

import asyncio

import pytest
from click.testing import CliRunner
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from labhub.auth.password import hash_password
from labhub.cli.main import main
from labhub.db.engine import build_engine
from labhub.db.models import TeamMember, User


async def _seed(url: str, email: str, on_team: bool = False) -> None:
    engine = build_engine(url)
    try:
        sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        async with sessions() as db:
            user = User(name="Grace", email=email, password_hash=hash_password("pw"), role="PI")
            db.add(user)
            await db.flush()
            if on_team:
                db.add(TeamMember(user_id=user.id, added_by=user.id))
            await db.commit()
    finally:
        await engine.dispose()


async def _is_admin(url: str, email: str) -> bool:
    engine = build_engine(url)
    try:
        async with engine.connect() as conn:
            result = await conn.execute(select(User.is_admin).where(User.email == email))
            return result.scalar_one()
    finally:
        await engine.dispose()


@pytest.fixture()
def db_url(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    result = CliRunner().invoke(main, ["--database-url", url, "init-db"])
    assert result.exit_code == 0, result.output
    return url


def test_promote_and_demote(db_url):
    asyncio.run(_seed(db_url, "grace@lab.example.edu"))
    runner = CliRunner()

    result = runner.invoke(main, ["--database-url", db_url, "promote", "grace@lab.example.edu"])
    assert result.exit_code == 0, result.output
    assert "is now an admin" in result.output
    assert asyncio.run(_is_admin(db_url, "grace@lab.example.edu")) is True

    result = runner.invoke(main, ["--database-url", db_url, "demote", "grace@lab.example.edu"])
    assert result.exit_code == 0, result.output
    assert asyncio.run(_is_admin(db_url, "grace@lab.example.edu")) is False


def test_promote_unknown_email_fails(db_url):
    result = CliRunner().invoke(main, ["--database-url", db_url, "promote", "ghost@lab.example.edu"])
    assert result.exit_code == 1


def test_users_table(db_url):
    asyncio.run(_seed(db_url, "member@lab.example.edu", on_team=True))
    asyncio.run(_seed(db_url, "visitor@lab.example.edu"))

    result = CliRunner().invoke(main, ["--database-url", db_url, "users"])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].split() == ["EMAIL", "NAME", "ADMIN", "TEAM"]
    member_line = next(line for line in lines if line.startswith("member@"))
    visitor_line = next(line for line in lines if line.startswith("visitor@"))
    assert member_line.split()[-1] == "member"
    assert visitor_line.split()[-1] == "-"


def test_users_empty(db_url):
    result = CliRunner().invoke(main, ["--database-url", db_url, "users"])
    assert result.exit_code == 0
    assert "No users." in result.output


def test_routes_lists_capabilities():
    result = CliRunner().invoke(main, ["routes"])
    assert result.exit_code == 0, result.output
    assert "UNDECLARED" not in result.output
    team_post = next(
        line for line in result.output.splitlines()
        if line.split()[:2] == ["POST", "/api/team"]
    )
    assert "admin" in team_post
