"""Unit tests for the app configuration artifact (kickstart.generators.app_config)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from kickstart.generators.app_config import (
    APP_CONFIG_PATH,
    MIGRATIONS_DIR,
    build_app_config,
    rewrite_migration_locale,
    write_app_config,
)
from kickstart.state import I18nConfig, ProjectData, ProvisioningState

MIGRATION = "20260126000000_init.sql"


class TestBuildAppConfig:
    @pytest.mark.unit
    def test_full_data(self, sample_state: ProvisioningState):
        assert build_app_config(sample_state.data) == {
            "appName": "Acme Notes",
            "publicAppName": "Acme Notes",
            "supportEmail": "support@acme.test",
            "logoUrl": "https://app.acme.test/emails/logo.png",
            "primaryColor": "#3b5bdb",
            "defaultLocale": "en",
            "supportedLocales": ["en", "fr", "de"],
        }

    @pytest.mark.unit
    def test_defaults_when_empty(self):
        config = build_app_config(ProjectData())
        assert config["appName"] == "App"
        assert config["logoUrl"] == "/brand/logo.svg"
        assert config["supportedLocales"] == ["en"]

    @pytest.mark.unit
    def test_default_locale_forced_first(self, sample_state: ProvisioningState):
        data = sample_state.data.model_copy(
            update={"i18n": I18nConfig(default_locale="fr", supported_locales=["en", "fr", "en"])}
        )
        assert build_app_config(data)["supportedLocales"] == ["fr", "en"]

    @pytest.mark.unit
    def test_empty_logo_falls_back(self, sample_state: ProvisioningState):
        params = sample_state.data.app_params.model_copy(update={"logo_url": ""})
        data = sample_state.data.model_copy(update={"app_params": params})
        assert build_app_config(data)["logoUrl"] == "/brand/logo.svg"


class TestWriteAppConfig:
    @pytest.mark.unit
    def test_writes_json_and_patches_migration(
        self, template_root: Path, sample_state: ProvisioningState
    ):
        data = sample_state.data.model_copy(
            update={"i18n": I18nConfig(default_locale="fr", supported_locales=["fr", "en"])}
        )
        path = write_app_config(template_root, data, migration_name=MIGRATION)

        assert path == template_root / APP_CONFIG_PATH
        written = json.loads(path.read_text(encoding="utf-8"))
        assert written["defaultLocale"] == "fr"

        sql = (template_root / MIGRATIONS_DIR / MIGRATION).read_text(encoding="utf-8")
        assert "default 'fr'" in sql
        assert "values (new.id, 'fr')" in sql
        assert "'en'" not in sql

    @pytest.mark.unit
    def test_missing_migration_is_skipped(self, tmp_path: Path):
        assert rewrite_migration_locale(tmp_path / "nope.sql", "fr") is False

    @pytest.mark.unit
    def test_no_migration_name(self, template_root: Path, sample_state: ProvisioningState):
        write_app_config(template_root, sample_state.data)
        sql = (template_root / MIGRATIONS_DIR / MIGRATION).read_text(encoding="utf-8")
        assert "default 'en'" in sql
