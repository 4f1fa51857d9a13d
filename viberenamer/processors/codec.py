"""Quoted, comma-separated filename list codec.

The same format describes the input files to the language model and is
expected back in its reply, e.g. ``"a.txt","my \\"notes\\".md"``.
"""

import os


def encode_filenames(filenames: list[str]) -> str:
    """Encode filenames into the quoted, comma-separated wire format.

    A leading ``~`` is expanded and literal double quotes are escaped with a
    backslash. Fields are joined with a bare comma.
    """
    quoted = []
    for filename in filenames:
        escaped = os.path.expanduser(filename).replace('"', '\\"')
        quoted.append(f'"{escaped}"')
    return ",".join(quoted)


def _unquote_field(field: str) -> str:
    """Trim whitespace and strip one outer layer of double quotes, if present."""
    trimmed = field.strip()
    if len(trimmed) >= 2 and trimmed.startswith('"') and trimmed.endswith('"'):
        return trimmed[1:-1]
    return trimmed


def decode_filenames(line: str) -> list[str]:
    """Split a quoted, comma-separated line into its fields.

    Commas inside double quotes are literal. Inside quotes a backslash makes
    the next character literal, so ``\\"`` yields a quote. Whitespace around
    fields is trimmed.

    The last field is kept only if it has content: ``"a",""`` decodes to
    ``["a"]`` while ``"","a"`` decodes to ``["", "a"]``. This asymmetry is
    intentionally preserved quirky behavior; replies already in the wild decode
    this way.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    escape_next = False

    for ch in line:
        if in_quotes:
            if escape_next:
                current.append(ch)
                escape_next = False
            elif ch == "\\":
                escape_next = True
            elif ch == '"':
                in_quotes = False
            else:
                current.append(ch)
        elif ch == ",":
            fields.append(_unquote_field("".join(current)))
            current = []
        elif ch == '"':
            in_quotes = True
        else:
            current.append(ch)

    raw = "".join(current)
    last = _unquote_field(raw)
    if last:
        fields.append(last)
    elif raw.strip():
        fields.append("")

    return fields
