"""
Tests for the keysmith command-line interface.
"""

import asyncio
import logging
import os
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from typer.testing import CliRunner

from keysmith.apikeys.models import ApiScope
from keysmith.cli.main import app
from keysmith.permissions.models import PermissionType

runner = CliRunner()


@pytest.fixture
def cli_keysmith(keysmith):
    """Make the CLI use the in-memory Keysmith instance."""
    with patch("keysmith.client.Keysmith.create", AsyncMock(return_value=keysmith)):
        yield keysmith


@pytest.fixture
def seeded(cli_keysmith, make_user, make_repository):
    """A user owning one repository."""

    async def _seed():
        owner = await make_user("ben@example.com")
        repo = await make_repository("Mobile app", created_by=owner)
        return owner, repo

    return asyncio.run(_seed())


class TestApiKeysCommands:
    """Tests for `keysmith api-keys`."""

    def test_create(self, cli_keysmith, seeded, fake_supabase):
        owner, repo = seeded

        result = runner.invoke(app, [
            "api-keys", "create",
            "--owner", "ben@example.com",
            "--repository", str(repo.id),
            "--scopes", "translations.view,keys.edit",
        ])

        assert result.exit_code == 0, result.output
        assert "API key created" in result.output
        rows = fake_supabase.rows("keysmith_api_keys")
        assert len(rows) == 1
        assert rows[0]["key"] in result.output
        assert rows[0]["scopes"] == ["keys.edit", "translations.view"]

    def test_create_unknown_scope(self, cli_keysmith, seeded, fake_supabase):
        """Test unknown scope names are rejected before connecting."""
        _, repo = seeded

        result = runner.invoke(app, [
            "api-keys", "create",
            "--owner", "ben@example.com",
            "--repository", str(repo.id),
            "--scopes", "admin",
        ])

        assert result.exit_code != 0
        assert fake_supabase.rows("keysmith_api_keys") == []

    def test_create_empty_scopes(self, cli_keysmith, seeded):
        """Test an empty scope list reports the validation error."""
        _, repo = seeded

        result = runner.invoke(app, [
            "api-keys", "create",
            "--owner", "ben@example.com",
            "--repository", str(repo.id),
            "--scopes", ",",
        ])

        assert result.exit_code == 1
        assert "scopes: must not be empty" in result.output

    def test_create_unknown_owner(self, cli_keysmith, seeded):
        _, repo = seeded

        result = runner.invoke(app, [
            "api-keys", "create",
            "--owner", "nobody@example.com",
            "--repository", str(repo.id),
            "--scopes", "keys.edit",
        ])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_list_by_owner(self, cli_keysmith, seeded):
        owner, repo = seeded
        asyncio.run(cli_keysmith.api_keys.create(owner, {ApiScope.KEYS_EDIT}, repo))

        result = runner.invoke(app, ["api-keys", "list", "--owner", "ben@example.com"])

        assert result.exit_code == 0, result.output
        assert "keys.edit" in result.output

    def test_list_by_repository_empty(self, cli_keysmith, seeded):
        _, repo = seeded

        result = runner.invoke(app, ["api-keys", "list", "--repository", str(repo.id)])

        assert result.exit_code == 0
        assert "No API keys found" in result.output

    def test_list_requires_one_filter(self, cli_keysmith):
        result = runner.invoke(app, ["api-keys", "list"])

        assert result.exit_code == 1

    def test_edit(self, cli_keysmith, seeded):
        owner, repo = seeded
        key = asyncio.run(
            cli_keysmith.api_keys.create(owner, {ApiScope.TRANSLATIONS_VIEW}, repo)
        )

        result = runner.invoke(app, [
            "api-keys", "edit", str(key.id), "--scopes", "translations.edit",
            "--as", "ben@example.com",
        ])

        assert result.exit_code == 0, result.output
        stored = asyncio.run(cli_keysmith.api_keys.get(key.id))
        assert stored.scopes == {ApiScope.TRANSLATIONS_EDIT}

    def test_edit_unknown_key(self, cli_keysmith, seeded):
        result = runner.invoke(app, [
            "api-keys", "edit", str(uuid4()), "--scopes", "translations.edit",
            "--as", "ben@example.com",
        ])

        assert result.exit_code == 1
        assert "API key not found" in result.output

    def test_edit_someone_elses_key(self, cli_keysmith, seeded, make_user):
        """Test editing another user's key needs full access to the repository."""
        owner, repo = seeded
        asyncio.run(make_user("alice@example.com"))
        key = asyncio.run(
            cli_keysmith.api_keys.create(owner, {ApiScope.KEYS_EDIT}, repo)
        )

        result = runner.invoke(app, [
            "api-keys", "edit", str(key.id), "--scopes", "translations.view",
            "--as", "alice@example.com",
        ])

        assert result.exit_code == 1
        assert "Operation not permitted" in result.output
        stored = asyncio.run(cli_keysmith.api_keys.get(key.id))
        assert stored.scopes == {ApiScope.KEYS_EDIT}

    def test_delete(self, cli_keysmith, seeded):
        owner, repo = seeded
        key = asyncio.run(
            cli_keysmith.api_keys.create(owner, {ApiScope.TRANSLATIONS_VIEW}, repo)
        )

        result = runner.invoke(app, [
            "api-keys", "delete", str(key.id), "--as", "ben@example.com", "--force",
        ])

        assert result.exit_code == 0, result.output
        assert asyncio.run(cli_keysmith.api_keys.get(key.id)) is None

    def test_delete_aborted(self, cli_keysmith, seeded):
        owner, repo = seeded
        key = asyncio.run(
            cli_keysmith.api_keys.create(owner, {ApiScope.TRANSLATIONS_VIEW}, repo)
        )

        result = runner.invoke(
            app, ["api-keys", "delete", str(key.id), "--as", "ben@example.com"], input="n\n"
        )

        assert result.exit_code != 0
        assert asyncio.run(cli_keysmith.api_keys.get(key.id)) is not None

    def test_scopes(self):
        result = runner.invoke(app, ["api-keys", "scopes"])

        assert result.exit_code == 0
        for permission in PermissionType:
            assert permission.value in result.output


class TestPermissionsCommands:
    """Tests for `keysmith permissions`."""

    def test_grant_and_revoke(self, cli_keysmith, seeded, make_user):
        _, repo = seeded
        alice = asyncio.run(make_user("alice@example.com"))

        result = runner.invoke(app, [
            "permissions", "grant", "alice@example.com",
            "--repository", str(repo.id), "--type", "translate",
        ])

        assert result.exit_code == 0, result.output
        permission = asyncio.run(cli_keysmith.permissions.get(alice.id, repo.id))
        assert permission.type is PermissionType.TRANSLATE

        result = runner.invoke(app, [
            "permissions", "revoke", "alice@example.com", "--repository", str(repo.id),
        ])

        assert result.exit_code == 0, result.output
        assert asyncio.run(cli_keysmith.permissions.get(alice.id, repo.id)) is None

    def test_grant_unknown_repository(self, cli_keysmith, seeded):
        result = runner.invoke(app, [
            "permissions", "grant", "ben@example.com", "--repository", str(uuid4()),
        ])

        assert result.exit_code == 1
        assert "not found" in result.output


class TestLoggingSettings:
    """Tests for log configuration from the environment."""

    @pytest.fixture(autouse=True)
    def restore_root_level(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)

    def test_log_level_from_environment(self, cli_keysmith, seeded):
        """Test KEYSMITH_LOG_LEVEL keeps info events out of command output."""
        _, repo = seeded

        with patch.dict(os.environ, {"KEYSMITH_LOG_LEVEL": "ERROR"}):
            result = runner.invoke(app, [
                "api-keys", "create",
                "--owner", "ben@example.com",
                "--repository", str(repo.id),
                "--scopes", "translations.view",
            ])

        assert result.exit_code == 0, result.output
        assert "api_key_created" not in result.output
        assert logging.getLogger().level == logging.ERROR

    def test_invalid_log_level(self):
        with patch.dict(os.environ, {"KEYSMITH_LOG_LEVEL": "LOUD"}):
            result = runner.invoke(app, ["api-keys", "scopes"])

        assert result.exit_code != 0
