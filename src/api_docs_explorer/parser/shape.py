"""Object shape parser.

Splits ``{ ... }`` type expressions into their top-level fields.
"""

import re
from collections.abc import Iterator

from api_docs_explorer.parser.base import ParsedField
from api_docs_explorer.parser.scanner import split_top_level

FIELD_PATTERN = re.compile(r"^\s*([A-Za-z_$][\w$]*)(\?)?\s*:(.*)$", re.DOTALL)

# Literal and interface bodies may quote their keys ('examples', "v1").
ENTRY_PATTERN = re.compile(
    r"""^\s*(?:'([^']*)'|"([^"]*)"|([\w$@./-]+))\s*\??\s*:(.*)$""",
    re.DOTALL,
)


def unwrap_braces(text: str) -> str | None:
    """Return the interior of a ``{ ... }`` text, or None if it has no outer braces."""
    body = text.strip()
    if not (body.startswith("{") and body.endswith("}")):
        return None
    return body[1:-1]


def parse_object_shape(text: str) -> list[ParsedField]:
    """Parse an object type expression into an ordered list of fields.

    Text without outer braces is opaque and yields no fields. Rows that
    are not ``key: type`` or ``key?: type`` are dropped.
    """
    body = unwrap_braces(text)
    if body is None:
        return []

    fields = []
    for row in split_top_level(body, ",;"):
        match = FIELD_PATTERN.match(row)
        if not match:
            continue
        fields.append(
            ParsedField(
                key=match.group(1),
                optional=match.group(2) == "?",
                type=match.group(3).strip(),
            )
        )
    return fields


def iter_entries(body: str) -> Iterator[tuple[str, str]]:
    """Yield ``(key, value)`` rows of a literal or interface body."""
    for row in split_top_level(body, ",;"):
        match = ENTRY_PATTERN.match(row)
        if not match:
            continue
        key = next(g for g in match.group(1, 2, 3) if g is not None)
        yield key, match.group(4).strip()
