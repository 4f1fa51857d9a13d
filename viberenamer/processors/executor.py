"""Apply confirmed rename proposals to the filesystem."""

import os
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from viberenamer.models.rename import ProposalPair, RenameFailure, RenameReport


console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def destination_for(original: str, proposed_name: str) -> str:
    """Place the proposed name in the directory containing the original path.

    Separators inside the proposed name are passed through unchanged, but a
    leading one never escapes the original's directory.
    """
    return os.path.join(os.path.dirname(original), proposed_name.lstrip(os.sep))


def _is_case_only_rename(source: Path, target: Path) -> bool:
    """Whether target is source spelled in another case on a case-insensitive filesystem."""
    return (
        source.parent == target.parent
        and source.name != target.name
        and source.name.lower() == target.name.lower()
        and os.path.samefile(source, target)
    )


class RenameExecutor:
    """Performs renames one by one, continuing past failures."""

    def _move(self, source: Path, target: Path) -> None:
        """Move a single file.

        Raises:
            FileNotFoundError: If source file doesn't exist.
            FileExistsError: If target file already exists and is not the source itself.
        """
        if not source.exists():
            raise FileNotFoundError(f"Source file not found: {source}")
        if os.path.lexists(target) and not _is_case_only_rename(source, target):
            raise FileExistsError(f"Target file already exists: {target}")
        source.rename(target)

    def execute(self, pairs: list[ProposalPair]) -> RenameReport:
        """Rename each original to its proposed name, in order.

        Args:
            pairs: Proposals to apply.

        Returns:
            RenameReport with every success and every failure.
        """
        report = RenameReport()

        for pair in pairs:
            source = pair.original
            destination = destination_for(pair.original, pair.proposed_name)

            if os.path.normpath(source) == os.path.normpath(destination):
                console.print(f"[dim]Unchanged:[/dim] {escape(source)}")
                report.succeeded.append((source, destination))
                continue

            try:
                self._move(Path(source), Path(destination))
            except OSError as e:
                err_console.print(
                    f"[red]Failed to rename[/red] {escape(source)} -> {escape(destination)}: {escape(str(e))}"
                )
                report.failures.append(RenameFailure(source=source, destination=destination, reason=str(e)))
                continue

            console.print(f"[green]Renamed:[/green] {escape(source)} -> {escape(destination)}")
            report.succeeded.append((source, destination))

        return report
