"""Tests for CLI commands.

Tests the item commands against a service backed by an in-memory store.
"""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from imladris import cli
from imladris.cli import app
from imladris.service import ImladrisService
from imladris.store.memory import InMemoryRowStore

runner = CliRunner()


@pytest.fixture
def store(sample_rows) -> InMemoryRowStore:
    return InMemoryRowStore(sample_rows)


@pytest.fixture
def service(store):
    """Patch the CLI to use a service over the in-memory store."""
    service = ImladrisService(store, id_factory=lambda: "new-id")
    with patch("imladris.cli.get_service", return_value=service):
        yield service


class TestHelpOutput:
    """Test help output for commands."""

    def test_main_help(self):
        """Test main help output."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("info", "show", "get", "tag", "add", "add-image", "rename", "delete"):
            assert command in result.output

    def test_add_help(self):
        """Test add command help."""
        result = runner.invoke(app, ["add", "--help"])

        assert result.exit_code == 0
        assert "--kind" in result.output
        assert "--tag" in result.output


class TestInfoCommand:
    """Test info command."""

    def test_info_displays_status(self, service):
        """Test info shows settings and the collection size."""
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "Imladris Configuration" in result.output
        assert "Items: 3" in result.output


class TestReadCommands:
    """Test show, get and tag."""

    def test_show(self, service):
        """Test show lists every decodable item."""
        result = runner.invoke(app, ["show"])

        assert result.exit_code == 0
        assert "3 items" in result.output

    def test_get_missing(self, service):
        """Test get exits with an error for an unknown id."""
        result = runner.invoke(app, ["get", "nope"])

        assert result.exit_code == 1
        assert "No item with id nope" in result.output

    def test_get_existing(self, service):
        """Test get renders the item."""
        result = runner.invoke(app, ["get", "id-3"])

        assert result.exit_code == 0
        assert "Python" in result.output

    def test_tag_without_matches(self, service):
        """Test tag reports when nothing carries the tag."""
        result = runner.invoke(app, ["tag", "Missing"])

        assert result.exit_code == 0
        assert "No items tagged 'missing'" in result.output


class TestWriteCommands:
    """Test add, rename and delete."""

    def test_add(self, service, store):
        """Test add appends a row with lowercase tags."""
        result = runner.invoke(
            app, ["add", "https://docs.python.org", "-n", "Docs", "-t", "Python", "-t", "Reference"]
        )

        assert result.exit_code == 0
        assert "Added link new-id" in result.output
        assert store.rows[-1] == [
            "new-id",
            "https://docs.python.org",
            "link",
            "Docs",
            "python,reference",
            "",
        ]

    def test_add_invalid_kind(self, service, store):
        """Test add fails for an unsupported kind."""
        result = runner.invoke(app, ["add", "https://youtube.com", "--kind", "video"])

        assert result.exit_code == 1
        assert len(store.rows) == 5

    def test_add_image_requires_client_id(self, service, monkeypatch):
        """Test add-image refuses to run without an Imgur client id."""
        monkeypatch.setattr(cli.settings, "imgur_client_id", "")

        result = runner.invoke(app, ["add-image", "https://picsum.photos/200"])

        assert result.exit_code == 1
        assert "IMGUR_CLIENT_ID not set" in result.output

    def test_rename(self, service, store):
        """Test rename changes the name of the matching row."""
        result = runner.invoke(app, ["rename", "id-2", "Kitten"])

        assert result.exit_code == 0
        assert "Renamed row 3" in result.output
        assert store.rows[1][3] == "Kitten"

    def test_rename_short_row(self, service, store):
        """Test rename pads a short row to full width."""
        result = runner.invoke(app, ["rename", "id-4", "Short"])

        assert result.exit_code == 0
        assert store.rows[4] == ["id-4", "https://short.com", "link", "Short", "", ""]

    def test_delete(self, service, store):
        """Test delete removes the row."""
        result = runner.invoke(app, ["delete", "id-1"])

        assert result.exit_code == 0
        assert "Deleted rows 2" in result.output
        assert store.rows[0][0] == "id-2"

    def test_delete_missing(self, service):
        """Test delete exits with an error when nothing matches."""
        result = runner.invoke(app, ["delete", "nope"])

        assert result.exit_code == 1


class TestVerboseFlag:
    """Test verbose flag on main command."""

    def test_verbose_flag(self, service):
        """Test that -v runs commands with debug logging."""
        result = runner.invoke(app, ["-v", "show"])

        assert result.exit_code == 0
