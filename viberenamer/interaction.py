"""Line-based prompts read from standard input."""

from rich.console import Console


console = Console(soft_wrap=True)


def ask_line(message: str) -> str | None:
    """Print a prompt and read a single line of input.

    Returns:
        The stripped line, or None if the input stream is closed.
    """
    try:
        line = console.input(message)
    except EOFError:
        return None
    return line.strip()


def is_yes(answer: str | None) -> bool:
    """Only a literal 'yes' (any case, surrounding whitespace ignored) counts as agreement."""
    return answer is not None and answer.strip().lower() == "yes"
