"""
Tests for the management CLI.
"""

from contextlib import contextmanager

import pytest
from typer.testing import CliRunner

import cli
from crud_api.models import ChatGroup, ChatMessage
from crud_api.services.repository import EntityRepository

runner = CliRunner()


@pytest.fixture
def cli_db(db_session, monkeypatch):
    """Point the CLI at the test session."""

    @contextmanager
    def context():
        yield db_session

    monkeypatch.setattr(cli, "get_db_context", context)
    return db_session


def test_registry_check():
    result = runner.invoke(cli.app, ["registry", "--check"])

    assert result.exit_code == 0
    assert "Registry matches the models" in result.output


def test_unknown_entity(cli_db):
    result = runner.invoke(cli.app, ["count", "Invoice", "--id", "1"])

    assert result.exit_code == 1
    assert "Unknown entity" in result.output


def test_count(cli_db, seed_chat):
    result = runner.invoke(cli.app, ["count", "Chat_group", "--id", str(seed_chat["group"])])

    assert result.exit_code == 0
    assert "Chat_message" in result.output
    assert EntityRepository(ChatMessage, cli_db).count() == 3


def test_count_not_found(cli_db):
    result = runner.invoke(cli.app, ["count", "Chat_group", "--id", "999"])

    assert result.exit_code == 1
    assert "No Chat_group found." in result.output


def test_delete_aborted(cli_db, seed_chat):
    result = runner.invoke(
        cli.app, ["delete", "Chat_group", "--id", str(seed_chat["group"])], input="n\n"
    )

    assert result.exit_code == 1
    assert "Aborted" in result.output
    assert EntityRepository(ChatGroup, cli_db).count() == 2


def test_delete_confirmed(cli_db, seed_chat):
    result = runner.invoke(
        cli.app, ["delete", "Chat_group", "--id", str(seed_chat["group"]), "--yes"]
    )

    assert result.exit_code == 0
    assert "Deleted 3 record(s)." in result.output
    assert EntityRepository(ChatMessage, cli_db).count() == 1


def test_soft_delete(cli_db, seed_chat):
    result = runner.invoke(
        cli.app,
        ["soft-delete", "Chat_group", "--id", str(seed_chat["group"]), "--actor", "5"],
    )

    assert result.exit_code == 0
    repo = EntityRepository(ChatMessage, cli_db)
    assert repo.count({"is_deleted": True, "updated_by": 5}) == 2
