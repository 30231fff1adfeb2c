"""
Tests for the seeding CLI, pointed at the in-memory SQLite database.
"""

from unittest.mock import AsyncMock

import pytest

from scripts import seed_relationships as seed

ANDY = "andy@example.com"
JOHN = "john@example.com"
LISA = "lisa@example.com"
SEAN = "sean@example.com"


def stats_table(output):
    rows = {}
    for line in output.splitlines():
        if "|" in line and not line.startswith("STATUS"):
            status, count = (part.strip() for part in line.split("|"))
            rows[status] = int(count)
    return rows


@pytest.fixture
def closed(monkeypatch, session_factory):
    monkeypatch.setattr(seed, "get_session_factory", lambda: session_factory)
    close = AsyncMock()
    monkeypatch.setattr(seed, "close_db_connection", close)
    return close


@pytest.fixture
def cli(closed):
    async def _run(*argv):
        return await seed.run(seed.build_parser().parse_args(list(argv)))

    return _run


class TestSeedScript:

    @pytest.mark.asyncio
    async def test_block_prevents_friendship(self, cli, capsys):
        assert await cli("block", JOHN, ANDY) == 0
        assert f"{JOHN} has blocked {ANDY}" in capsys.readouterr().out

        assert await cli("friend", ANDY, JOHN) == 1
        assert "Error [RELATIONSHIP_BLOCKED]" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_block_rejects_invalid_email(self, cli, capsys):
        assert await cli("block", "andy", JOHN) == 2
        assert "Invalid email: andy" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_stats_counts_edges_per_status(self, cli, capsys):
        await cli("friend", ANDY, LISA)
        await cli("block", SEAN, ANDY)
        capsys.readouterr()

        assert await cli("stats") == 0
        assert stats_table(capsys.readouterr().out) == {"friend": 2, "blocked": 1}

    @pytest.mark.asyncio
    async def test_reset_empties_the_table(self, cli, capsys):
        await cli("friend", ANDY, LISA)
        capsys.readouterr()

        assert await cli("reset") == 0
        assert "Deleted 2 edges" in capsys.readouterr().out

        await cli("stats")
        assert stats_table(capsys.readouterr().out) == {}

    @pytest.mark.asyncio
    async def test_connection_is_closed_after_every_command(self, cli, closed):
        await cli("stats")
        await cli("friend", ANDY, ANDY)

        assert closed.await_count == 2
