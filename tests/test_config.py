from pathlib import Path

import pytest

from nola_buddy.config import DEFAULT_TIMEZONE, ConfigError, load_settings
from nola_buddy.schema import SchemaError, load_workspace_schema

ENV_VARS = (
    "NOTION_SECRET",
    "NOTION_VERSION",
    "NOTION_ACTION_BASE_DB_ID",
    "SPREADSHEET_ID",
    "GOOGLE_CLIENT_EMAIL",
    "GOOGLE_PRIVATE_KEY",
    "NOLA_API_KEY",
    "NOLA_TIMEZONE",
    "TZ",
    "NOLA_ENV",
    "NOLA_SCHEMA_PATH",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults_when_nothing_is_set(clean_env, caplog):
    settings = load_settings(use_dotenv=False)

    assert settings.notion_secret is None
    assert settings.timezone == DEFAULT_TIMEZONE
    assert settings.notion_version == "2022-06-28"
    assert settings.environment == "local"
    assert not settings.notion_configured
    assert not settings.sheets_configured
    assert "NOTION_SECRET not set" in caplog.text


def test_reads_credentials_and_expands_key_newlines(clean_env):
    clean_env.setenv("NOTION_SECRET", "  secret_abc  ")
    clean_env.setenv("SPREADSHEET_ID", "sheet-1")
    clean_env.setenv("GOOGLE_CLIENT_EMAIL", "bot@example.com")
    clean_env.setenv("GOOGLE_PRIVATE_KEY", "-----BEGIN-----\\nabc\\n-----END-----")
    clean_env.setenv("NOLA_API_KEY", "k")
    clean_env.setenv("NOTION_ACTION_BASE_DB_ID", "db-1")

    settings = load_settings(use_dotenv=False)

    assert settings.notion_secret == "secret_abc"
    assert settings.google_private_key == "-----BEGIN-----\nabc\n-----END-----"
    assert settings.sheets_configured
    assert settings.api_key == "k"
    assert settings.action_base_database_id == "db-1"


def test_timezone_precedence(clean_env):
    clean_env.setenv("TZ", "America/New_York")
    assert load_settings(use_dotenv=False).timezone == "America/New_York"

    clean_env.setenv("NOLA_TIMEZONE", "Europe/Paris")
    assert load_settings(use_dotenv=False).zone.key == "Europe/Paris"


def test_unknown_timezone_is_fatal(clean_env):
    clean_env.setenv("NOLA_TIMEZONE", "Mars/Olympus_Mons")
    with pytest.raises(ConfigError):
        load_settings(use_dotenv=False)


def test_schema_path_override(clean_env, tmp_path):
    clean_env.setenv("NOLA_SCHEMA_PATH", str(tmp_path / "custom.yml"))
    assert load_settings(use_dotenv=False).schema_path == Path(tmp_path / "custom.yml")


class TestWorkspaceSchema:
    def test_default_schema_labels(self):
        schema = load_workspace_schema()

        assert schema.action_base.database_name == "Action Base"
        assert schema.action_base.label("category") == "Type"
        assert schema.action_base.priority_values == ["HIGH", "MID", "LOW"]
        assert schema.notes.sheet_title == "Maal Secretary Notes"
        assert schema.notes.headers == ["TITLE", "Date & Time", "Tag", "Notes"]

    def test_unknown_label_raises(self):
        with pytest.raises(SchemaError):
            load_workspace_schema().action_base.label("owner")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaError, match="not found"):
            load_workspace_schema(tmp_path / "missing.yml")

    def test_incomplete_schema(self, tmp_path):
        path = tmp_path / "workspace.yml"
        path.write_text(
            "action_base:\n  database_name: Tasks\n  properties:\n    name: Name\n"
            "notes:\n  headers: [A, B, C, D]\n",
            encoding="utf-8",
        )
        with pytest.raises(SchemaError, match="missing"):
            load_workspace_schema(path)
