import asyncio
import json
import logging

import pytest

import cli
from database import engine
from links.models import metadata as links_metadata


async def _drop_tables():
    async with engine.begin() as conn:
        await conn.run_sync(links_metadata.drop_all)
    await engine.dispose()


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def cli_database(capsys):
    assert cli.main(["init-db"]) == 0
    capsys.readouterr()
    yield
    asyncio.run(_drop_tables())


def run_json(capsys, *argv):
    assert cli.main(list(argv)) == 0
    return json.loads(capsys.readouterr().out)


def test_shorten_stats_and_list(cli_database, capsys):
    created = run_json(capsys, "shorten", "http://example.com/cli")
    assert created["created"] is True
    assert created["short_url"] == f"http://sho.rt/{created['code']}"

    again = run_json(capsys, "shorten", "http://example.com/cli")
    assert again["created"] is False
    assert again["code"] == created["code"]

    stats = run_json(capsys, "stats", created["code"])
    assert stats["original_url"] == "http://example.com/cli"
    assert stats["visits"] == 0

    records = run_json(capsys, "list", "--limit", "5")
    assert [r["code"] for r in records] == [created["code"]]


def test_shorten_reads_url_from_stdin(cli_database, capsys, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt="": "https://example.com/typed\n")

    created = run_json(capsys, "shorten")

    assert created["original_url"] == "https://example.com/typed"


def test_errors_exit_non_zero(cli_database, capsys):
    assert cli.main(["shorten", "not-a-url"]) == 1
    assert "invalid url" in capsys.readouterr().err

    assert cli.main(["stats", "doesnotexist"]) == 1
    assert "code not found" in capsys.readouterr().err


def test_serve_runs_uvicorn(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    assert cli.main(["serve", "--port", "9999"]) == 0

    assert calls[0][0] == "main:app"
    assert calls[0][1]["port"] == 9999


def test_shorten_with_empty_stdin_exits_non_zero(capsys, monkeypatch):
    def closed_stdin(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", closed_stdin)

    assert cli.main(["shorten"]) == 1
    assert "invalid url" in capsys.readouterr().err


def test_list_limit_defaults_to_configured_limit():
    args = cli.build_parser().parse_args(["list"])
    assert args.limit == cli.LIST_LIMIT
