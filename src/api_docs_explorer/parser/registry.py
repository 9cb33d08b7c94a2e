"""Generated type registry extractor.

Rebuilds the per-page catalog of endpoint and sync signatures from
``apiTypes.generated.ts`` and the handler files next to it. Block extents
are found by depth tracking, so the generator's indentation does not
matter. Malformed blocks are skipped; only a missing registry is fatal.
"""

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from api_docs_explorer.config import ExplorerConfig
from api_docs_explorer.errors import ExplorerError, RegistryNotFound, RegistryUnreadable
from api_docs_explorer.parser.base import (
    BroadcastSignature,
    DocsResponse,
    EndpointSignature,
    RegistryDocument,
)
from api_docs_explorer.parser.handler import find_handler, rate_limit_literal, read_handler_meta
from api_docs_explorer.parser.scanner import find_block_end, strip_comments
from api_docs_explorer.parser.shape import iter_entries, unwrap_braces

logger = logging.getLogger(__name__)

API_MAP_PATTERN = re.compile(r"export\s+interface\s+ApiTypeMap\s*(?=\{)")
SYNC_MAP_PATTERN = re.compile(r"export\s+interface\s+SyncTypeMap\s*(?=\{)")

API_FIELDS = {"input", "output", "method"}
SYNC_FIELDS = {"clientInput", "serverOutput", "clientOutput"}

DEFAULT_SHAPE = "{}"
DEFAULT_METHOD = "POST"
DEFAULT_VERSION = "v1"

DEFAULT_EXTENSIONS = [".ts", ".tsx", ".js"]


def extract_registry(
    registry_path: Path,
    source_root: Path | None = None,
    extensions: list[str] | None = None,
) -> RegistryDocument:
    """Extract every endpoint and sync signature from a generated registry.

    ``source_root`` is where handler files live (``<page>/_api/<name>.ts``);
    without it no auth or rate limit is recovered.
    Raises RegistryNotFound when ``registry_path`` does not exist and
    RegistryUnreadable when it cannot be read as UTF-8 text.
    """
    if not registry_path.is_file():
        raise RegistryNotFound(registry_path)

    try:
        source = registry_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise RegistryUnreadable(registry_path, e) from e
    text = strip_comments(source)
    extensions = extensions or DEFAULT_EXTENSIONS

    endpoints: dict[str, list[EndpointSignature]] = {}
    for page, name, version, fields in _walk(_interface_body(text, API_MAP_PATTERN), API_FIELDS):
        endpoints.setdefault(page, []).append(
            _endpoint(page, name, version, fields, source_root, extensions)
        )

    broadcasts: dict[str, list[BroadcastSignature]] = {}
    for page, name, version, fields in _walk(_interface_body(text, SYNC_MAP_PATTERN), SYNC_FIELDS):
        broadcasts.setdefault(page, []).append(
            BroadcastSignature(
                page=page,
                name=name,
                version=version,
                client_input=fields.get("clientInput") or DEFAULT_SHAPE,
                server_output=fields.get("serverOutput") or DEFAULT_SHAPE,
                client_output=fields.get("clientOutput") or DEFAULT_SHAPE,
            )
        )

    document = RegistryDocument(endpoints=endpoints, broadcasts=broadcasts)
    logger.info("Extracted %d signatures from %s", document.signature_count(), registry_path)
    return document


def get_docs(config: ExplorerConfig) -> DocsResponse:
    """Load the documentation, reporting a missing or unreadable registry as one error result."""
    try:
        document = extract_registry(
            config.registry_path,
            source_root=config.source_root,
            extensions=config.handler_extensions,
        )
    except ExplorerError as e:
        logger.error("Documentation extraction failed: %s", e)
        return DocsResponse(status="error", message=str(e))
    return DocsResponse(status="success", result=document)


def _interface_body(text: str, pattern: re.Pattern) -> str:
    match = pattern.search(text)
    if not match:
        logger.debug("No %s block in registry", pattern.pattern)
        return ""
    start = match.end()
    end = find_block_end(text, start)
    if end == -1:
        # Unbalanced to the end of file: take what is there.
        return text[start + 1:]
    return text[start + 1:end]


def _walk(body: str, signature_fields: set[str]) -> Iterator[tuple[str, str, str, dict[str, str]]]:
    """Yield ``(page, name, version, fields)`` for each signature block."""
    for page, page_value in iter_entries(body):
        page_body = unwrap_braces(page_value)
        if page_body is None:
            logger.debug("Skipping page %r: not a block", page)
            continue
        for name, name_value in iter_entries(page_body):
            name_body = unwrap_braces(name_value)
            if name_body is None:
                logger.debug("Skipping %s/%s: not a block", page, name)
                continue
            entries = list(iter_entries(name_body))
            if any(key in signature_fields for key, _ in entries):
                # Unversioned layout: the signature sits directly under its name.
                yield page, name, DEFAULT_VERSION, dict(entries)
                continue
            for version, version_value in entries:
                version_body = unwrap_braces(version_value)
                if version_body is None:
                    logger.debug("Skipping %s/%s/%s: not a block", page, name, version)
                    continue
                yield page, name, version, dict(iter_entries(version_body))


def _endpoint(
    page: str,
    name: str,
    version: str,
    fields: dict[str, str],
    source_root: Path | None,
    extensions: list[str],
) -> EndpointSignature:
    method = _unquote(fields.get("method", "")) or DEFAULT_METHOD
    rate_limit = rate_limit_literal(fields["rateLimit"]) if "rateLimit" in fields else None

    handler = None
    if source_root is not None:
        handler = find_handler(source_root, page, name, version, extensions)
        if handler is None:
            logger.debug("No handler file for %s/%s/%s under %s", page, name, version, source_root)
    meta = read_handler_meta(handler)
    if meta.rate_limit is not None:
        rate_limit = meta.rate_limit

    logger.debug("Endpoint %s/%s/%s (%s)", page, name, version, method)
    return EndpointSignature(
        page=page,
        name=name,
        version=version,
        method=method.upper(),
        description=meta.description,
        input=fields.get("input") or DEFAULT_SHAPE,
        output=fields.get("output") or DEFAULT_SHAPE,
        auth=meta.auth,
        rate_limit=rate_limit,
    )


def _unquote(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] in ("'", '"') and text[-1] == text[0]:
        return text[1:-1]
    return text
