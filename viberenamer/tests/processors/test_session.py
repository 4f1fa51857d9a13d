"""Unit tests for the interactive rename session."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from viberenamer.errors import NoInstructionProvidedError, ServiceError
from viberenamer.models.rename import SessionState
from viberenamer.processors.executor import RenameExecutor
from viberenamer.processors.session import (
    ALLOWED_TRANSITIONS,
    SessionController,
    build_instructions,
    pair_proposals,
)


class FakeService:
    """Generation service returning canned replies, one per call."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def submit(self, instructions, request, temperature):
        self.calls.append((instructions, request, temperature))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class ScriptedAnswers:
    """Stands in for line input; None means the input stream is closed."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, message):
        self.prompts.append(message)
        return self.answers.pop(0) if self.answers else None


@pytest.fixture
def files(tmp_path):
    """Three eligible files."""
    paths = []
    for name in ("x", "y", "z"):
        path = tmp_path / name
        path.write_text(name)
        paths.append(str(path))
    return paths


def make_controller(service, *answers, executor=None):
    return SessionController(service=service, executor=executor, ask=ScriptedAnswers(*answers))


class TestHelpers:
    """Tests for module-level helpers."""

    def test_build_instructions_lists_files_once(self):
        """Test that the encoded file list appears exactly once in the instructions."""
        instructions = build_instructions(["a.txt", "b.txt"])

        assert instructions.count('"a.txt","b.txt"') == 1
        assert "quoted and comma-separated" in instructions

    def test_pair_proposals_truncates_to_shorter(self):
        """Test that pairing stops at the shorter list."""
        pairs = pair_proposals(["x", "y", "z"], ["X", "Y"])

        assert [(p.original, p.proposed_name) for p in pairs] == [("x", "X"), ("y", "Y")]

    def test_only_retrying_leads_back(self):
        """Test that querying is re-entered only from the retry state."""
        sources = [state for state, targets in ALLOWED_TRANSITIONS.items() if SessionState.QUERYING_MODEL in targets]

        assert sorted(sources) == sorted([SessionState.COLLECTING_PROMPT, SessionState.RETRYING])


class TestSessionController:
    """Tests for SessionController.run."""

    def test_confirmed_rename(self, tmp_path):
        """Test the happy path: propose, confirm, rename."""
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "b.txt").write_text("b")
        originals = [str(tmp_path / "a.txt"), str(tmp_path / "b.txt")]
        service = FakeService('"A.TXT","B.TXT"')
        controller = make_controller(service, "yes")

        outcome = controller.run(originals, initial_instruction="uppercase names")

        assert outcome.state is SessionState.DONE
        assert outcome.failure_count == 0
        assert [str(p) for p in outcome.proposals] == [f"{originals[0]} -> A.TXT", f"{originals[1]} -> B.TXT"]
        assert (tmp_path / "A.TXT").exists()
        assert (tmp_path / "B.TXT").exists()
        assert not (tmp_path / "a.txt").exists()

    def test_request_and_temperature_sent(self, files):
        """Test that only the instruction is sent as the request, with the run temperature."""
        service = FakeService('"X","Y","Z"')
        controller = SessionController(service=service, ask=ScriptedAnswers("no", "no"), temperature=0.5)

        controller.run(files, initial_instruction="  uppercase  ")

        instructions, request, temperature = service.calls[0]
        assert request == "uppercase"
        assert temperature == 0.5
        assert files[0] in instructions

    def test_confirmation_is_case_insensitive(self, files):
        """Test that 'YES' with surrounding whitespace confirms."""
        service = FakeService('"X","Y","Z"')
        controller = make_controller(service, "  YES ")

        outcome = controller.run(files, initial_instruction="uppercase")

        assert outcome.state is SessionState.DONE

    def test_count_mismatch_truncates_and_warns(self, files, tmp_path, capsys):
        """Test that a short reply renames only the overlapping pairs."""
        service = FakeService('"X","Y"')
        controller = make_controller(service, "yes")

        outcome = controller.run(files, initial_instruction="uppercase")

        assert outcome.state is SessionState.DONE
        assert len(outcome.proposals) == 2
        assert (tmp_path / "X").exists()
        assert (tmp_path / "Y").exists()
        assert (tmp_path / "z").exists()

        captured = capsys.readouterr()
        assert "Mismatch between input files (3) and returned names (2)" in captured.err
        assert "Proposed renames (2):" in captured.out

    def test_longer_reply_is_truncated(self, files, tmp_path):
        """Test that extra names in the reply are ignored."""
        service = FakeService('"X","Y","Z","W"')
        controller = make_controller(service, "yes")

        outcome = controller.run(files, initial_instruction="uppercase")

        assert len(outcome.proposals) == 3
        assert not (tmp_path / "W").exists()

    def test_blank_items_are_dropped(self, files):
        """Test that empty names in the reply are never proposed."""
        service = FakeService('"X","  ","Z"')
        controller = make_controller(service, "no", "no")

        outcome = controller.run(files, initial_instruction="uppercase")

        assert [p.proposed_name for p in outcome.proposals] == ["X", "Z"]

    def test_partial_failure(self, files, tmp_path):
        """Test that a failed move is counted while the others complete."""
        (tmp_path / "taken").write_text("occupied")
        service = FakeService('"X","taken","Z"')
        controller = make_controller(service, "yes")

        outcome = controller.run(files, initial_instruction="uppercase")

        assert outcome.state is SessionState.PARTIAL_FAILURE
        assert outcome.failure_count == 1
        assert len(outcome.report.succeeded) == 2
        assert (tmp_path / "y").exists()
        assert (tmp_path / "X").exists()
        assert (tmp_path / "Z").exists()

    def test_dry_run_never_moves(self, files):
        """Test that dry run ends after the proposal even with auto-confirm."""
        executor = MagicMock(spec=RenameExecutor)
        service = FakeService('"X","Y","Z"')
        controller = make_controller(service, executor=executor)

        outcome = controller.run(files, initial_instruction="uppercase", auto_confirm=True, dry_run=True)

        assert outcome.state is SessionState.DRY_RUN_DONE
        executor.execute.assert_not_called()
        assert controller.ask.prompts == []

    def test_auto_confirm_skips_prompt(self, files, tmp_path):
        """Test that auto-confirm executes without asking."""
        service = FakeService('"X","Y","Z"')
        controller = make_controller(service)

        outcome = controller.run(files, initial_instruction="uppercase", auto_confirm=True)

        assert outcome.state is SessionState.DONE
        assert controller.ask.prompts == []
        assert (tmp_path / "Z").exists()

    def test_decline_then_quit_aborts(self, files):
        """Test that declining and refusing to retry leaves every file untouched."""
        service = FakeService('"X","Y","Z"')
        controller = make_controller(service, "no", "no")

        outcome = controller.run(files, initial_instruction="uppercase")

        assert outcome.state is SessionState.ABORTED
        assert outcome.report is None
        for path in files:
            assert Path(path).read_text() == Path(path).name

    def test_decline_then_closed_input_aborts(self, files):
        """Test that a closed input stream at the retry offer aborts."""
        service = FakeService('"X","Y","Z"')
        controller = make_controller(service, "no")

        outcome = controller.run(files, initial_instruction="uppercase")

        assert outcome.state is SessionState.ABORTED

    @pytest.mark.parametrize("new_prompt", ["", "   ", None])
    def test_retry_with_blank_prompt_aborts(self, files, new_prompt):
        """Test that agreeing to retry but entering nothing aborts."""
        service = FakeService('"X","Y","Z"')
        controller = make_controller(service, "no", "yes", new_prompt)

        outcome = controller.run(files, initial_instruction="uppercase")

        assert outcome.state is SessionState.ABORTED
        assert len(service.calls) == 1

    def test_retry_requeries_with_new_instruction(self, files, tmp_path):
        """Test that a new instruction is sent with the same fixed instructions."""
        service = FakeService('"X","Y","Z"', '"x-1","y-1","z-1"')
        controller = make_controller(service, "no", "yes", "add -1 suffix", "yes")

        outcome = controller.run(files, initial_instruction="uppercase")

        assert outcome.state is SessionState.DONE
        assert outcome.rounds == 2
        assert [call[1] for call in service.calls] == ["uppercase", "add -1 suffix"]
        assert service.calls[0][0] == service.calls[1][0]
        assert (tmp_path / "x-1").exists()
        assert not (tmp_path / "X").exists()
        assert (SessionState.RETRYING, SessionState.QUERYING_MODEL) in controller.transitions

    def test_prompts_for_missing_instruction(self, files):
        """Test that the instruction is read interactively when not supplied."""
        service = FakeService('"X","Y","Z"')
        controller = make_controller(service, "uppercase", "no", "no")

        controller.run(files, initial_instruction="   ")

        assert service.calls[0][1] == "uppercase"

    @pytest.mark.parametrize("entered", ["", "  ", None])
    def test_missing_instruction_is_fatal(self, files, entered):
        """Test that a blank or closed prompt fails without querying."""
        service = FakeService('"X","Y","Z"')
        controller = make_controller(service, entered)

        with pytest.raises(NoInstructionProvidedError):
            controller.run(files)

        assert service.calls == []

    def test_service_error_is_fatal(self, files, tmp_path):
        """Test that a service failure ends the run without retrying or moving."""
        service = FakeService(ServiceError("boom"), '"X","Y","Z"')
        controller = make_controller(service, "yes")

        with pytest.raises(ServiceError, match="boom"):
            controller.run(files, initial_instruction="uppercase")

        assert len(service.calls) == 1
        assert (tmp_path / "x").exists()

    def test_unexpected_service_exception_is_wrapped(self, files):
        """Test that arbitrary backend exceptions surface as ServiceError."""
        service = FakeService(TimeoutError("too slow"))
        controller = make_controller(service)

        with pytest.raises(ServiceError, match="too slow"):
            controller.run(files, initial_instruction="uppercase")
