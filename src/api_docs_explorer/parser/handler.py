"""Handler source lookup.

Recovers the auth requirement and rate limit an endpoint handler exports,
e.g.::

    export const auth: AuthProps = { login: true, additional: [{ key: 'admin', value: true }] };
    export const rateLimit: number | false = 10;
"""

import logging
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel

from api_docs_explorer.parser.base import ROOT_PAGE, AuthCondition, AuthDescriptor
from api_docs_explorer.parser.scanner import find_block_end, split_top_level, strip_comments
from api_docs_explorer.parser.shape import iter_entries, unwrap_braces

logger = logging.getLogger(__name__)

AUTH_PATTERN = re.compile(r"export\s+const\s+auth\s*(?::\s*AuthProps\s*)?=\s*(?=\{)")
RATE_LIMIT_PATTERN = re.compile(r"export\s+const\s+rateLimit\s*(?::[^=]+)?=\s*([^;\n]+)")
DESCRIPTION_PATTERN = re.compile(r"/\*\*((?:(?!\*/).)*)\*/\s*export\s+const\s+main\b", re.DOTALL)

# Handler condition keys, in the order they take precedence.
CONDITION_KINDS = {"value": "value", "type": "type", "nullish": "nullish", "mustBeFalsy": "falsy"}

API_FOLDER = "_api"


class HandlerMeta(BaseModel):
    """What a handler file says about its endpoint."""

    auth: AuthDescriptor = AuthDescriptor()
    rate_limit: int | Literal[False] | None = None
    description: str | None = None


def find_handler(source_root: Path, page: str, name: str, version: str, extensions: list[str]) -> Path | None:
    """Locate ``<page>/_api/<name>_<version>.<ext>`` (or ``<name>.<ext>`` for v1)."""
    folder = source_root / API_FOLDER if page == ROOT_PAGE else source_root / page / API_FOLDER
    stems = [f"{name}_{version}"]
    if version == "v1":
        stems.append(name)
    for stem in stems:
        for ext in extensions:
            candidate = folder / f"{stem}{ext}"
            if candidate.is_file():
                return candidate
    return None


def read_handler_meta(path: Path | None) -> HandlerMeta:
    """Read auth and rate limit from a handler file.

    A missing or undecodable file gives the defaults.
    """
    if path is None or not path.is_file():
        return HandlerMeta()
    try:
        source = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        logger.debug("Ignoring handler %s: %s", path, e)
        return HandlerMeta()
    text = strip_comments(source)
    return HandlerMeta(
        auth=parse_auth(text),
        rate_limit=parse_rate_limit(text),
        description=parse_description(source),
    )


def parse_description(source: str) -> str | None:
    """Text of the ``/** ... */`` block right above ``export const main``."""
    match = DESCRIPTION_PATTERN.search(source)
    if not match:
        return None
    lines = [line.strip().lstrip("*").strip() for line in match.group(1).splitlines()]
    description = " ".join(line for line in lines if line)
    return description or None


def parse_rate_limit(text: str) -> int | Literal[False] | None:
    """``False`` when disabled, an int when set, None when absent or not a literal."""
    match = RATE_LIMIT_PATTERN.search(text)
    if not match:
        return None
    return rate_limit_literal(match.group(1))


def rate_limit_literal(raw: str) -> int | Literal[False] | None:
    value = raw.strip()
    if value == "false":
        return False
    try:
        return int(value)
    except ValueError:
        return None


def parse_auth(text: str) -> AuthDescriptor:
    """Interpret the exported auth literal.

    Literals that cannot be interpreted are kept verbatim in ``raw``.
    """
    match = AUTH_PATTERN.search(text)
    if not match:
        return AuthDescriptor()
    start = match.end()
    end = find_block_end(text, start)
    if end == -1:
        return AuthDescriptor(raw=text[start:].strip())
    literal = text[start:end + 1]

    entries = dict(iter_entries(literal[1:-1]))
    login = entries.get("login", "false")
    if login not in ("true", "false"):
        return AuthDescriptor(raw=literal)

    additional = _parse_conditions(entries.get("additional", "[]"))
    if additional is None:
        return AuthDescriptor(requires_login=login == "true", raw=literal)

    return AuthDescriptor(requires_login=login == "true", additional=additional, known=True)


def _parse_conditions(text: str) -> list[AuthCondition] | None:
    text = text.strip()
    if not (text.startswith("[") and text.endswith("]")):
        return None

    conditions = []
    for item in split_top_level(text[1:-1], ","):
        if not item.strip():
            continue
        body = unwrap_braces(item)
        if body is None:
            return None
        entries = dict(iter_entries(body))
        key = entries.get("key")
        if key is None:
            return None
        condition = None
        for source, kind in CONDITION_KINDS.items():
            if source in entries:
                condition = AuthCondition(key=str(_literal(key)), kind=kind, expected=_literal(entries[source]))
                break
        if condition is None:
            return None
        conditions.append(condition)
    return conditions


def _literal(raw: str) -> Any:
    value = raw.strip()
    if value in ("true", "false"):
        return value == "true"
    if value == "null":
        return None
    if len(value) >= 2 and value[0] in ("'", '"', "`") and value[-1] == value[0]:
        return value[1:-1]
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value
