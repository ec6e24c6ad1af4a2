"""Unit tests for the persisted state model and store (kickstart.state)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from kickstart.state import (
    STATE_VERSION,
    ProjectInfo,
    ProvisioningState,
    StateStore,
)


class TestProvisioningState:
    @pytest.mark.unit
    def test_fresh_state_is_empty(self):
        state = ProvisioningState()
        assert state.schema_version == STATE_VERSION
        assert state.completed_steps == []
        assert state.flags == {}
        assert state.data.project is None

    @pytest.mark.unit
    def test_mark_completed_is_idempotent(self):
        state = ProvisioningState()
        state.mark_completed("skills")
        state.mark_completed("skills")
        state.mark_completed("tokens")
        assert state.completed_steps == ["skills", "tokens"]
        assert state.is_completed("skills")
        assert not state.is_completed("infra")


class TestStateStore:
    @pytest.mark.unit
    def test_missing_file_loads_empty(self, tmp_path: Path):
        store = StateStore(tmp_path / "state.json")
        assert store.load() == ProvisioningState()

    @pytest.mark.unit
    def test_save_then_load(self, tmp_path: Path, sample_state: ProvisioningState):
        store = StateStore(tmp_path / ".bootstrap" / "state.json")
        sample_state.flags["skills_restart_confirmed"] = True
        store.save(sample_state)

        loaded = store.load()
        assert loaded == sample_state
        assert loaded.data.project == ProjectInfo(
            app_name="Acme Notes", slug="acme-notes", description="Notes"
        )

    @pytest.mark.unit
    def test_saved_document_is_json(self, tmp_path: Path, sample_state: ProvisioningState):
        path = tmp_path / "state.json"
        StateStore(path).save(sample_state)
        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw["schema_version"] == 1
        assert raw["completed_steps"] == ["skills", "cli-check", "tokens"]
        assert raw["data"]["scopes"]["vercel_scope"] == "acme-team"

    @pytest.mark.unit
    def test_corrupt_file_resets(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        assert StateStore(path).load() == ProvisioningState()

    @pytest.mark.unit
    def test_non_object_resets(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert StateStore(path).load() == ProvisioningState()

    @pytest.mark.unit
    @pytest.mark.parametrize("version", [0, 2, None, True, 1.0, "1"])
    def test_version_mismatch_resets(self, tmp_path: Path, version):
        path = tmp_path / "state.json"
        path.write_text(
            json.dumps({"schema_version": version, "completed_steps": ["skills"]}),
            encoding="utf-8",
        )
        state = StateStore(path).load()
        assert state.completed_steps == []

    @pytest.mark.unit
    def test_invalid_document_resets(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_text(
            json.dumps({"schema_version": 1, "data": {"legal": {"mode": "carrier-pigeon"}}}),
            encoding="utf-8",
        )
        assert StateStore(path).load() == ProvisioningState()

    @pytest.mark.unit
    def test_unknown_step_ids_are_dropped(self, tmp_path: Path):
        path = tmp_path / "state.json"
        path.write_text(
            json.dumps({"schema_version": 1, "completed_steps": ["skills", "retired", "tokens"]}),
            encoding="utf-8",
        )
        state = StateStore(path, step_ids=["skills", "cli-check", "tokens"]).load()
        assert state.completed_steps == ["skills", "tokens"]

    @pytest.mark.unit
    def test_reset_removes_file(self, tmp_path: Path):
        path = tmp_path / "state.json"
        store = StateStore(path)
        store.save(ProvisioningState())
        assert store.reset() is True
        assert not path.exists()
        assert store.reset() is False
