"""Tests for application settings."""

from formbuilder.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.storage_key == "savedForms"
    assert settings.default_form_title == "Untitled Form"
    assert settings.copy_suffix == " (Copy)"


def test_only_used_settings_are_declared():
    assert set(Settings.model_fields) == {
        "database_url",
        "storage_key",
        "default_form_title",
        "copy_suffix",
        "cors_origins",
        "log_level",
    }


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("FORMBUILDER_DEFAULT_FORM_TITLE", "New Form")
    monkeypatch.setenv("FORMBUILDER_CORS_ORIGINS", "http://a.test, http://b.test")

    settings = Settings(_env_file=None)

    assert settings.default_form_title == "New Form"
    assert settings.cors_origins_list == ["http://a.test", "http://b.test"]
