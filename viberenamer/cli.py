"""CLI entrypoints."""

import click
from langchain.chat_models import init_chat_model
from langsmith import traceable
from rich.console import Console

from viberenamer.errors import NoInputFilesError, NoInstructionProvidedError, ServiceError
from viberenamer.interaction import ask_line, is_yes
from viberenamer.models.rename import SessionState
from viberenamer.processors.eligibility import filter_usable_files
from viberenamer.processors.session import SessionController
from viberenamer.service import DEFAULT_TEMPERATURE, LangChainGenerationService


__version__ = "0.1.0"

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

USAGE_HINT = "Try: viberenamer -p \"kebab-case with 'vibe-' prefix\" file1.txt \"file 2.png\""


def _confirm_reduced_set(requested: int, usable: list[str]) -> bool:
    """Tell the user about excluded entries and ask whether to go on without them."""
    removed = requested - len(usable)
    err_console.print(
        f"[yellow]Note: {removed} item(s) were excluded because they do not exist "
        "or lack required permissions.[/yellow]"
    )
    if not usable:
        console.print("No usable files remain. Exiting.")
        return False

    answer = ask_line(
        f"Proceed with the remaining {len(usable)} file(s)? Type 'yes' to continue, anything else to quit: "
    )
    if not is_yes(answer):
        console.print("Exiting without changes.")
        return False
    return True


@click.command(
    "viberenamer",
    context_settings=dict(show_default=True, auto_envvar_prefix="VIBERENAMER"),
)
@click.argument("files", nargs=-1)
@click.option(
    "-p",
    "--prompt",
    type=str,
    default=None,
    help="Provide the renaming request non-interactively.",
)
@click.option(
    "-y",
    "--yes",
    is_flag=True,
    default=False,
    help="Automatically confirm and perform renames without prompting.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Preview the proposed renames without performing any changes.",
)
@click.option("--model-identifier", type=str, default="gpt-5.1", help="LLM model to use.")
@click.option(
    "--temperature",
    type=float,
    default=DEFAULT_TEMPERATURE,
    help="Sampling temperature used for every request of the run.",
)
@click.option("--show-token-usage", is_flag=True, default=False, help="Display token usage of the run.")
@click.version_option(__version__, prog_name="viberenamer")
@traceable
def cli(
    files: tuple[str, ...],
    prompt: str | None,
    yes: bool,
    dry_run: bool,
    model_identifier: str,
    temperature: float,
    show_token_usage: bool,
) -> None:
    """Rename files based on a natural-language prompt using a language model.

    Provide one or more file paths. The tool will propose new names via a
    language model and let you confirm. You can pass --prompt to run
    non-interactively, or use --dry-run to preview without renaming.

    Examples:

        viberenamer -p "kebab-case with 'vibe-' prefix" notes.txt "Holiday Photo.png"

        viberenamer --dry-run -p "uppercase names" *.txt
    """
    try:
        usable_files = filter_usable_files(list(files))
    except NoInputFilesError as e:
        raise click.UsageError(f"{e}\n{USAGE_HINT}") from e

    if len(usable_files) < len(files) and not _confirm_reduced_set(len(files), usable_files):
        return

    console.print(
        f"Renaming [bold cyan]{len(usable_files)}[/bold cyan] file(s) "
        f"using model [bold magenta]{model_identifier}[/bold magenta]..."
    )

    try:
        llm = init_chat_model(model=model_identifier)
    except Exception as e:
        err_console.print(f"[bold red]Error:[/bold red] Could not initialize model {model_identifier}: {e}")
        raise SystemExit(1) from e

    service = LangChainGenerationService(llm=llm)
    controller = SessionController(service=service, temperature=temperature)

    try:
        outcome = controller.run(usable_files, initial_instruction=prompt, auto_confirm=yes, dry_run=dry_run)
    except (NoInstructionProvidedError, ServiceError) as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}")
        raise SystemExit(1) from e

    if show_token_usage:
        usage = service.usage
        note = f" (estimated for {usage.estimated_requests} request(s))" if usage.is_estimated else ""
        console.print()
        console.print("[bold]Token Usage:[/bold]")
        console.print(f"  Requests: [cyan]{usage.requests}[/cyan]")
        console.print(f"  Input tokens: [cyan]{usage.input_tokens:,}[/cyan]{note}")
        console.print(f"  Output tokens: [cyan]{usage.output_tokens:,}[/cyan]{note}")
        console.print(f"  Total tokens: [cyan]{usage.total_tokens:,}[/cyan]")

    if outcome.state is SessionState.PARTIAL_FAILURE:
        raise SystemExit(1)
