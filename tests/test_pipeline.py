"""Unit tests for the step machine and CLI entry point (kickstart.pipeline)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from kickstart.pipeline import (
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_OK,
    BootstrapError,
    Bootstrapper,
    RunResult,
    build_parser,
    main,
)
from kickstart.state import ProvisioningState, StateStore
from kickstart.steps import STEP_IDS
from kickstart.steps.base import Step, StepOutcome


class RecordingStep(Step):
    """Step double returning a fixed outcome and counting its runs."""

    def __init__(self, step_id: str, outcome: StepOutcome | None = None, error: Exception | None = None):
        self.id = step_id
        self.title = f"Step {step_id}"
        self.outcome = outcome or StepOutcome.done()
        self.error = error
        self.runs = 0

    async def run(self, state: ProvisioningState, prompt) -> StepOutcome:
        self.runs += 1
        if self.error:
            raise self.error
        state.flags[f"ran_{self.id}"] = True
        return self.outcome


def _completed(path: Path) -> list[str]:
    return json.loads(path.read_text(encoding="utf-8"))["completed_steps"]


class TestBootstrapper:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_runs_all_steps_in_order(self, tmp_path: Path, scripted):
        prompt, _ = scripted([])
        steps = [RecordingStep("a"), RecordingStep("b"), RecordingStep("c")]
        store = StateStore(tmp_path / "state.json")

        result = await Bootstrapper(steps, store, prompt).run()

        assert result == RunResult(finished=True)
        assert _completed(store.path) == ["a", "b", "c"]
        assert [s.runs for s in steps] == [1, 1, 1]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_completed_steps_are_skipped(self, tmp_path: Path, scripted):
        prompt, _ = scripted([])
        store = StateStore(tmp_path / "state.json")
        store.save(ProvisioningState(completed_steps=["a"]))
        steps = [RecordingStep("a"), RecordingStep("b")]

        await Bootstrapper(steps, store, prompt).run()

        assert steps[0].runs == 0
        assert steps[1].runs == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rerun_after_completion_does_nothing(self, tmp_path: Path, scripted):
        prompt, _ = scripted([])
        store = StateStore(tmp_path / "state.json")
        steps = [RecordingStep("a"), RecordingStep("b")]

        await Bootstrapper(steps, store, prompt).run()
        result = await Bootstrapper(steps, store, prompt).run()

        assert result.finished is True
        assert [s.runs for s in steps] == [1, 1]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exit_stops_without_marking(self, tmp_path: Path, scripted):
        prompt, _ = scripted([])
        store = StateStore(tmp_path / "state.json")
        steps = [RecordingStep("a"), RecordingStep("b", StepOutcome.stop()), RecordingStep("c")]

        result = await Bootstrapper(steps, store, prompt).run()

        assert result == RunResult(finished=False, stopped_at="b")
        assert steps[2].runs == 0
        assert _completed(store.path) == ["a"]
        # Flags set by the stopping step are kept.
        assert store.load().flags["ran_b"] is True

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_completed_and_exit_marks_then_stops(self, tmp_path: Path, scripted):
        prompt, _ = scripted([])
        store = StateStore(tmp_path / "state.json")
        steps = [RecordingStep("a", StepOutcome(completed=True, exit=True)), RecordingStep("b")]

        result = await Bootstrapper(steps, store, prompt).run()

        assert result.stopped_at == "a"
        assert _completed(store.path) == ["a"]
        assert steps[1].runs == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_progress_persisted_before_failing_step(self, tmp_path: Path, scripted):
        prompt, _ = scripted([])
        store = StateStore(tmp_path / "state.json")
        steps = [RecordingStep("a"), RecordingStep("b", error=RuntimeError("boom"))]

        with pytest.raises(RuntimeError, match="boom"):
            await Bootstrapper(steps, store, prompt).run()

        assert _completed(store.path) == ["a"]

        steps[1].error = None
        await Bootstrapper(steps, store, prompt).run()
        assert steps[0].runs == 1
        assert steps[1].runs == 2

    @pytest.mark.unit
    def test_duplicate_ids_rejected(self, tmp_path: Path, scripted):
        prompt, _ = scripted([])
        with pytest.raises(BootstrapError):
            Bootstrapper([RecordingStep("a"), RecordingStep("a")], StateStore(tmp_path / "s.json"), prompt)

    @pytest.mark.unit
    def test_from_config_registers_every_step(self, config, scripted):
        prompt, _ = scripted([])
        bootstrapper = Bootstrapper.from_config(config, prompt)
        assert tuple(step.id for step in bootstrapper.steps) == STEP_IDS
        assert bootstrapper.store.path == config.state_path


class TestStepRegistry:
    @pytest.mark.unit
    def test_fixed_order(self):
        assert STEP_IDS == (
            "skills",
            "cli-check",
            "tokens",
            "project-info",
            "domains",
            "scopes",
            "app-params",
            "i18n",
            "legal",
            "legal-profile",
            "local-repo",
            "design-system",
            "legal-docs",
            "infra",
            "git-remote",
            "summary",
            "finish",
        )


class TestCli:
    @pytest.mark.unit
    def test_parser(self):
        args = build_parser().parse_args(["--template-root", "/tmp/t", "--reset"])
        assert args.template_root == "/tmp/t"
        assert args.reset is True

    @pytest.mark.unit
    def test_missing_template_root_exits_1(self, tmp_path: Path):
        assert main(["--template-root", str(tmp_path / "missing")]) == EXIT_ERROR

    @pytest.mark.unit
    def test_finished_run_exits_0(self, tmp_path: Path):
        async def finished(self):
            return RunResult(finished=True)

        with patch.object(Bootstrapper, "run", finished):
            assert main(["--template-root", str(tmp_path)]) == EXIT_OK
        assert (tmp_path / ".bootstrap").is_dir()

    @pytest.mark.unit
    def test_intentional_stop_exits_0(self, tmp_path: Path):
        async def stopped(self):
            return RunResult(finished=False, stopped_at="skills")

        with patch.object(Bootstrapper, "run", stopped):
            assert main(["--template-root", str(tmp_path)]) == EXIT_OK

    @pytest.mark.unit
    def test_step_error_exits_1(self, tmp_path: Path):
        async def broken(self):
            raise RuntimeError("gh exploded")

        with patch.object(Bootstrapper, "run", broken):
            assert main(["--template-root", str(tmp_path)]) == EXIT_ERROR

    @pytest.mark.unit
    def test_interrupt_exits_130(self, tmp_path: Path):
        async def interrupted(self):
            raise KeyboardInterrupt

        with patch.object(Bootstrapper, "run", interrupted):
            assert main(["--template-root", str(tmp_path)]) == EXIT_INTERRUPTED

    @pytest.mark.unit
    def test_reset_deletes_saved_progress(self, tmp_path: Path):
        state_path = tmp_path / ".bootstrap" / "state.json"
        StateStore(state_path).save(ProvisioningState(completed_steps=["skills"]))

        async def finished(self):
            return RunResult(finished=True)

        with patch.object(Bootstrapper, "run", finished):
            assert main(["--template-root", str(tmp_path), "--reset"]) == EXIT_OK
        assert not state_path.exists()
