"""Parser for .env style files.

Turns file content into a ``dict`` of variable name to string value::

    # comment
    export DATABASE_URL=postgres://localhost/app   # trailing comment
    JWT_SECRET: "multi\\nline"
    EMPTY=

Quoted values (single, double or backtick) may span several lines and may
contain ``#``. Only double-quoted values expand ``\\n`` and ``\\r``.
"""

import io
import re
from typing import Callable, Dict, Mapping, Optional, Union

from dotenv import dotenv_values

Source = Union[str, bytes]
Parser = Callable[[str], Mapping[str, Optional[str]]]

QUOTES = ("'", '"', "`")

_LINE = re.compile(
    r"""
    ^[ \t]*
    (?:export[ \t]+)?
    (?P<key>[\w.-]+)
    (?:
        [ \t]*[=:][ \t]*
        (?P<value>
            '(?:\\'|[^'])*'
          | "(?:\\"|[^"])*"
          | `(?:\\`|[^`])*`
          | [^#\n]*
        )
    )?
    [ \t]*
    (?:\#[^\n]*)?
    $
    """,
    re.MULTILINE | re.VERBOSE,
)


def decode(source: Source, encoding: str = "utf-8") -> str:
    """Decode bytes with ``encoding``; undecodable sequences become U+FFFD."""
    if isinstance(source, bytes):
        return source.decode(encoding, errors="replace")
    return source


def _clean_value(raw: Optional[str]) -> str:
    value = (raw or "").strip()
    if not value:
        return ""

    quote = value[0]
    if quote in QUOTES and len(value) >= 2 and value[-1] == quote:
        value = value[1:-1]

    if quote == '"':
        value = value.replace("\\n", "\n").replace("\\r", "\r")

    return value


def parse(source: Source, encoding: str = "utf-8") -> Dict[str, str]:
    """Parse .env content into a name -> value mapping.

    Args:
        source: File content as text, or bytes to decode with ``encoding``
        encoding: Codec used when ``source`` is bytes

    Returns:
        Variables in file order. A bare ``KEY`` or ``KEY=`` maps to ``""``;
        lines that do not look like declarations are skipped. When a key
        repeats, the last declaration wins.
    """
    text = decode(source, encoding).replace("\r\n", "\n").replace("\r", "\n")

    result: Dict[str, str] = {}
    for match in _LINE.finditer(text):
        result[match.group("key")] = _clean_value(match.group("value"))

    return result


def parse_with_dotenv(source: Source, encoding: str = "utf-8") -> Dict[str, Optional[str]]:
    """Alternate parser backed by python-dotenv, with interpolation disabled.

    python-dotenv returns None for bare keys; the loader maps those to ``""``.
    """
    return dict(dotenv_values(stream=io.StringIO(decode(source, encoding)), interpolate=False))


__all__ = ["Parser", "Source", "decode", "parse", "parse_with_dotenv"]
