"""Call targets and transport snippets for a signature."""

import json
from collections.abc import Mapping
from typing import Any

from api_docs_explorer.parser.base import ROOT_PAGE, join_route

EXAMPLE_RESPONSE_INDEX = 123
EXAMPLE_RECEIVER = "room-code"


def _key(signature) -> tuple[str, str, str, str]:
    if isinstance(signature, Mapping):
        return "api", signature["page"], signature["name"], signature.get("version", "v1")
    return signature.route_prefix, signature.page, signature.name, signature.version


def route_path(signature) -> str:
    """Live call target, e.g. ``api/dashboard/save/v1`` or ``sync/counter/v1``."""
    return join_route(*_key(signature))


def request_name(signature) -> str:
    """Name passed to the client request helpers."""
    _, page, name, _ = _key(signature)
    if page == ROOT_PAGE:
        return name
    return f"{page}/{name}"


def _render_payload(payload: Any, indent: str) -> str:
    text = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    return text.replace("\n", "\n" + indent)


def request_snippet(signature, payload: Any) -> str:
    """Client helper call (``apiRequest`` / ``syncRequest``)."""
    prefix, _, _, version = _key(signature)
    data = _render_payload(payload, "  ")
    if prefix == "sync":
        return (
            "await syncRequest({\n"
            f"  name: '{request_name(signature)}',\n"
            f"  version: '{version}',\n"
            f"  data: {data},\n"
            f"  receiver: '{EXAMPLE_RECEIVER}',\n"
            "});"
        )
    return (
        "const response = await apiRequest({\n"
        f"  name: '{request_name(signature)}',\n"
        f"  version: '{version}',\n"
        f"  data: {data},\n"
        "});"
    )


def message_snippet(signature, payload: Any) -> str:
    """Raw socket message carrying the same payload."""
    prefix = _key(signature)[0]
    data = _render_payload(payload, "  ")
    if prefix == "sync":
        return (
            "socket.emit('sync', {\n"
            f"  name: '{route_path(signature)}',\n"
            f"  data: {data},\n"
            f"  receiver: '{EXAMPLE_RECEIVER}',\n"
            "  ignoreSelf: false,\n"
            "});"
        )
    return (
        "socket.emit('apiRequest', {\n"
        f"  name: '{route_path(signature)}',\n"
        f"  data: {data},\n"
        f"  responseIndex: {EXAMPLE_RESPONSE_INDEX},\n"
        "});\n"
        "\n"
        "// Listen for response\n"
        f"socket.on('apiResponse-{EXAMPLE_RESPONSE_INDEX}', (response) => {{\n"
        "  console.log(response);\n"
        "});"
    )
