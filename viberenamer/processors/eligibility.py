"""Eligibility checks for files passed on the command line."""

import os

from rich.console import Console
from rich.markup import escape

from viberenamer.errors import NoInputFilesError
from viberenamer.models.rename import PathCandidate


console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def inspect_path(argument: str, cwd: str | None = None) -> PathCandidate:
    """Check existence, kind and permissions of a single argument.

    Args:
        argument: Raw command-line argument.
        cwd: Directory relative arguments are checked against. Defaults to the current directory.

    Returns:
        PathCandidate describing the argument. The expanded argument is kept as its identity.
    """
    expanded = os.path.expanduser(argument)
    checked_path = os.path.join(cwd or os.getcwd(), expanded)
    # Checks use the path as given: "file.txt/" does not exist. Normalizing only locates the parent.
    absolute_path = os.path.normpath(checked_path)

    if not os.path.lexists(checked_path):
        return PathCandidate(raw_argument=expanded, resolved_absolute_path=absolute_path, exists=False)

    parent = os.path.dirname(absolute_path)
    return PathCandidate(
        raw_argument=expanded,
        resolved_absolute_path=absolute_path,
        exists=True,
        is_directory=os.path.isdir(checked_path),
        readable=os.access(checked_path, os.R_OK),
        writable=os.access(checked_path, os.W_OK),
        parent_writable=os.access(parent, os.W_OK),
    )


def _report_candidate(candidate: PathCandidate) -> None:
    """Print the existence and permission checks for one candidate."""
    path = escape(candidate.resolved_absolute_path)
    if not candidate.exists:
        err_console.print(f"[red]✗ Missing:[/red] {path}")
        return

    kind = "directory" if candidate.is_directory else "file"
    console.print(f"[green]✓ Exists:[/green] {path} ({kind})")

    if candidate.writable:
        console.print("  • Writable file: yes")
    else:
        err_console.print("  • Writable file: [red]NO[/red] (insufficient permissions to modify/move)")

    parent = escape(candidate.parent_directory)
    if candidate.parent_writable:
        console.print(f"  • Writable containing directory: yes ({parent})")
    else:
        err_console.print(
            f"  • Writable containing directory: [red]NO[/red] ({parent}) (cannot create destination)"
        )

    if not candidate.readable:
        err_console.print("  • Readable file: [red]NO[/red] (cannot read source file)")

    if candidate.is_directory:
        console.print(f"  • [yellow]Skipping directory:[/yellow] {path}")
    elif not candidate.eligible:
        err_console.print(f"  • [yellow]Skipping due to insufficient permissions:[/yellow] {path}")


def filter_usable_files(arguments: list[str], cwd: str | None = None) -> list[str]:
    """Filter command-line arguments down to files that can safely be renamed.

    A file is usable if it exists, is not a directory, is readable and writable,
    and its containing directory is writable. Unusable entries are reported and
    omitted; nothing is raised for them. Repeated arguments resolving to the same
    path are kept once, at their first appearance.

    Args:
        arguments: Raw command-line arguments, in order.
        cwd: Directory relative arguments are checked against. Defaults to the current directory.

    Returns:
        Usable arguments (tilde-expanded, otherwise as given) in input order.

    Raises:
        NoInputFilesError: If no arguments were given.
    """
    if not arguments:
        raise NoInputFilesError("You must provide one or more files to rename.")

    cwd = cwd or os.getcwd()
    console.print(
        f"Checking [bold cyan]{len(arguments)}[/bold cyan] argument(s) for existence and permissions "
        f"(cwd: {escape(cwd)}):"
    )

    usable: list[str] = []
    seen: set[str] = set()

    for argument in arguments:
        candidate = inspect_path(argument, cwd)

        if candidate.resolved_absolute_path in seen:
            console.print(f"[yellow]Skipping duplicate:[/yellow] {escape(candidate.resolved_absolute_path)}")
            continue
        seen.add(candidate.resolved_absolute_path)

        _report_candidate(candidate)
        if candidate.eligible:
            usable.append(candidate.raw_argument)

    return usable
