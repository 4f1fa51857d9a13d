"""Interactive rename session: query, review, retry and execute."""

from collections.abc import Callable

from rich.console import Console
from rich.markup import escape

from viberenamer.errors import NoInstructionProvidedError, ServiceError
from viberenamer.interaction import ask_line, is_yes
from viberenamer.models.rename import ProposalPair, RenameReport, SessionOutcome, SessionState
from viberenamer.processors.codec import decode_filenames, encode_filenames
from viberenamer.processors.executor import RenameExecutor
from viberenamer.prompts import RENAME_SYSTEM_PROMPT
from viberenamer.service import DEFAULT_TEMPERATURE, GenerationService


console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

# Every edge the session may take. RETRYING -> QUERYING_MODEL is the only one leading back.
ALLOWED_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.COLLECTING_PROMPT: frozenset({SessionState.QUERYING_MODEL}),
    SessionState.QUERYING_MODEL: frozenset({SessionState.PRESENTING_PROPOSAL}),
    SessionState.PRESENTING_PROPOSAL: frozenset(
        {SessionState.DRY_RUN_DONE, SessionState.CONFIRMING, SessionState.EXECUTING}
    ),
    SessionState.CONFIRMING: frozenset({SessionState.EXECUTING, SessionState.RETRYING}),
    SessionState.RETRYING: frozenset({SessionState.QUERYING_MODEL, SessionState.ABORTED}),
    SessionState.EXECUTING: frozenset({SessionState.DONE, SessionState.PARTIAL_FAILURE}),
}

PROMPT_INTRO = 'Enter your renaming request.\nExample: "Rename all files to kebab-case with a \'vibe-\' prefix"'


def build_instructions(usable_files: list[str]) -> str:
    """Build the fixed session instructions, listing the files once."""
    return RENAME_SYSTEM_PROMPT.format(filenames=encode_filenames(usable_files))


def pair_proposals(originals: list[str], items: list[str]) -> list[ProposalPair]:
    """Match originals with proposed names by position, up to the shorter of the two."""
    return [ProposalPair(original=original, proposed_name=name) for original, name in zip(originals, items)]


class SessionController:
    """Drives one renaming session as a finite state machine.

    States and edges are listed in ``ALLOWED_TRANSITIONS``. Declining a
    proposal and entering a new request is the only way back to querying;
    every other path ends the session.
    """

    def __init__(
        self,
        service: GenerationService,
        executor: RenameExecutor | None = None,
        ask: Callable[[str], str | None] = ask_line,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        """Initialize the controller.

        Args:
            service: Generation service asked for new names.
            executor: Executor applying confirmed renames.
            ask: Reads one line of user input for a prompt; returns None on closed input.
            temperature: Sampling temperature used for every round.
        """
        self.service = service
        self.executor = executor or RenameExecutor()
        self.ask = ask
        self.temperature = temperature

        self.state = SessionState.COLLECTING_PROMPT
        self.transitions: list[tuple[SessionState, SessionState]] = []

    def _transition(self, new_state: SessionState) -> None:
        if new_state not in ALLOWED_TRANSITIONS.get(self.state, frozenset()):
            raise RuntimeError(f"Invalid session transition: {self.state.value} -> {new_state.value}")
        self.transitions.append((self.state, new_state))
        self.state = new_state

    def run(
        self,
        usable_files: list[str],
        initial_instruction: str | None = None,
        auto_confirm: bool = False,
        dry_run: bool = False,
    ) -> SessionOutcome:
        """Run the session until it reaches a terminal state.

        Args:
            usable_files: Files to rename, in the order they were given.
            initial_instruction: Renaming request. Asked for interactively when missing or blank.
            auto_confirm: Execute proposals without asking.
            dry_run: Stop after presenting the first proposal. Takes precedence over auto_confirm.

        Returns:
            SessionOutcome describing how the session ended.

        Raises:
            NoInstructionProvidedError: If no request was supplied or entered.
            ServiceError: If the generation service fails.
        """
        self.state = SessionState.COLLECTING_PROMPT
        self.transitions = []

        instructions = build_instructions(usable_files)
        instruction = (initial_instruction or "").strip()
        reply = ""
        proposals: list[ProposalPair] = []
        report: RenameReport | None = None
        rounds = 0

        while not self.state.is_terminal:
            if self.state is SessionState.COLLECTING_PROMPT:
                instruction = instruction or self._read_instruction()
                self._transition(SessionState.QUERYING_MODEL)

            elif self.state is SessionState.QUERYING_MODEL:
                reply = self._query(instructions, instruction)
                rounds += 1
                self._transition(SessionState.PRESENTING_PROPOSAL)

            elif self.state is SessionState.PRESENTING_PROPOSAL:
                proposals = self._present(usable_files, reply)
                if dry_run:
                    console.print("[yellow]Dry run requested. No files were renamed.[/yellow]")
                    self._transition(SessionState.DRY_RUN_DONE)
                elif auto_confirm:
                    self._transition(SessionState.EXECUTING)
                else:
                    self._transition(SessionState.CONFIRMING)

            elif self.state is SessionState.CONFIRMING:
                answer = self.ask("Proceed with renaming? Type 'yes' to confirm, or anything else to decline: ")
                self._transition(SessionState.EXECUTING if is_yes(answer) else SessionState.RETRYING)

            elif self.state is SessionState.RETRYING:
                new_instruction = self._read_retry_instruction()
                if new_instruction:
                    instruction = new_instruction
                    self._transition(SessionState.QUERYING_MODEL)
                else:
                    self._transition(SessionState.ABORTED)

            elif self.state is SessionState.EXECUTING:
                report = self.executor.execute(proposals)
                if report.failure_count:
                    err_console.print(f"[bold red]Completed with {report.failure_count} failure(s).[/bold red]")
                    self._transition(SessionState.PARTIAL_FAILURE)
                else:
                    console.print("[bold green]All files renamed successfully.[/bold green]")
                    self._transition(SessionState.DONE)

        return SessionOutcome(state=self.state, rounds=rounds, proposals=proposals, report=report)

    def _read_instruction(self) -> str:
        console.print(PROMPT_INTRO, markup=False)
        entered = self.ask("> ")
        if not entered or not entered.strip():
            raise NoInstructionProvidedError("No renaming prompt provided.")
        return entered.strip()

    def _read_retry_instruction(self) -> str | None:
        """Offer a new request after a declined proposal. Returns None to quit."""
        answer = self.ask(
            "Would you like to supply a new prompt? Type 'yes' to enter a new prompt, anything else to quit: "
        )
        if not is_yes(answer):
            console.print("Exiting without changes.")
            return None

        console.print("Enter a new renaming request:")
        entered = self.ask("> ")
        if entered is None:
            console.print("No input received. Exiting without changes.")
            return None
        if not entered.strip():
            console.print("Empty prompt entered. Exiting without changes.")
            return None
        return entered.strip()

    def _query(self, instructions: str, instruction: str) -> str:
        """Send the current request; the file list already lives in the instructions."""
        console.print("[cyan]Generating rename suggestions...[/cyan]")
        try:
            reply = self.service.submit(instructions, instruction, self.temperature)
        except ServiceError:
            raise
        except Exception as e:
            raise ServiceError(f"Language model error: {e}") from e
        return reply

    def _present(self, usable_files: list[str], reply: str) -> list[ProposalPair]:
        """Decode the reply, warn about count mismatches and print the pairing."""
        items = [item.strip() for item in decode_filenames(reply)]
        items = [item for item in items if item]

        proposals = pair_proposals(usable_files, items)
        if len(usable_files) != len(items):
            err_console.print(
                f"[yellow]Warning: Mismatch between input files ({len(usable_files)}) and returned names "
                f"({len(items)}). Showing first {len(proposals)} pair(s).[/yellow]"
            )

        console.print(f"[bold]Proposed renames ({len(proposals)}):[/bold]")
        for proposal in proposals:
            console.print(escape(str(proposal)))

        return proposals
