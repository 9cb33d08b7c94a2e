"""Unified data models for extracted interface signatures.

The registry extractor converts the generated type map and the handler
sources into these models; the CLI and the generators only consume them.
"""

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer, field_validator

ROOT_PAGE = "root"

_VERSION_NUMBER = re.compile(r"(\d+)")


def join_route(prefix: str, page: str, name: str, version: str) -> str:
    """Build a call target such as ``api/examples/echo/v1``."""
    if page == ROOT_PAGE:
        return f"{prefix}/{name}/{version}"
    return f"{prefix}/{page}/{name}/{version}"


def version_sort_key(version: str) -> tuple[int, str]:
    match = _VERSION_NUMBER.search(version)
    return (int(match.group(1)) if match else 0, version)


class ParsedField(BaseModel):
    """A single top-level field of an object type expression."""

    model_config = ConfigDict(frozen=True)

    key: str
    optional: bool
    type: str


class AuthCondition(BaseModel):
    """One additional auth requirement on a session attribute."""

    model_config = ConfigDict(frozen=True)

    key: str
    kind: Literal["value", "type", "nullish", "falsy"]
    expected: Any = None

    def describe(self) -> str:
        if self.kind == "value":
            return f"{self.key} == {self.expected!r}"
        if self.kind == "type":
            return f"{self.key} is {self.expected}"
        if self.kind == "nullish":
            return f"{self.key} is nullish" if self.expected else f"{self.key} is set"
        return f"{self.key} must be falsy" if self.expected else f"{self.key} must be truthy"


class AuthDescriptor(BaseModel):
    """Auth requirement recovered from a handler's ``auth`` export."""

    model_config = ConfigDict(frozen=True)

    requires_login: bool = False
    additional: list[AuthCondition] = []
    known: bool = False
    raw: str | None = None  # literal text kept when it could not be interpreted

    def summary(self) -> str:
        if not self.known:
            return "auth unknown"
        text = "login required" if self.requires_login else "public"
        if self.additional:
            text += " (" + ", ".join(c.describe() for c in self.additional) + ")"
        return text


class EndpointSignature(BaseModel):
    """A request/response endpoint of one page."""

    model_config = ConfigDict(frozen=True)
    route_prefix: ClassVar[str] = "api"

    page: str
    name: str
    version: str = "v1"
    method: str = "POST"  # GET / POST / PUT / DELETE
    description: str | None = None
    input: str = "{}"
    output: str = "{}"
    auth: AuthDescriptor = AuthDescriptor()
    rate_limit: int | Literal[False] | None = None  # False = disabled, None = unset

    @computed_field
    @property
    def route_id(self) -> str:
        return join_route(self.route_prefix, self.page, self.name, self.version)


class BroadcastSignature(BaseModel):
    """A sync event broadcast to every client of a room."""

    model_config = ConfigDict(frozen=True)
    route_prefix: ClassVar[str] = "sync"

    page: str
    name: str
    version: str = "v1"
    client_input: str = "{}"
    server_output: str = "{}"
    client_output: str = "{}"

    @computed_field
    @property
    def route_id(self) -> str:
        return join_route(self.route_prefix, self.page, self.name, self.version)


class RegistryDocument(BaseModel):
    """Per-page catalog of every endpoint and broadcast signature.

    Pages map to read-only views and each page holds a tuple, so a loaded
    document cannot be changed in place.
    """

    model_config = ConfigDict(frozen=True)

    endpoints: Mapping[str, tuple[EndpointSignature, ...]] = Field(default_factory=dict, validate_default=True)
    broadcasts: Mapping[str, tuple[BroadcastSignature, ...]] = Field(default_factory=dict, validate_default=True)

    @field_validator("endpoints", "broadcasts", mode="after")
    @classmethod
    def freeze_pages(cls, value: Mapping) -> Mapping:
        return MappingProxyType(dict(value))

    @field_serializer("endpoints", "broadcasts")
    def serialize_pages(self, value: Mapping) -> dict:
        return dict(value)

    def find_endpoint(self, page: str, name: str, version: str | None = None) -> EndpointSignature | None:
        return _find(self.endpoints.get(page, ()), name, version)

    def find_broadcast(self, page: str, name: str, version: str | None = None) -> BroadcastSignature | None:
        return _find(self.broadcasts.get(page, ()), name, version)

    def signature_count(self) -> int:
        return sum(len(s) for s in self.endpoints.values()) + sum(len(s) for s in self.broadcasts.values())


class DocsResponse(BaseModel):
    """Result of one documentation-loading call."""

    model_config = ConfigDict(frozen=True)

    status: Literal["success", "error"]
    result: RegistryDocument | None = None
    message: str | None = None


def _find(signatures, name, version):
    matches = [s for s in signatures if s.name == name]
    if version is not None:
        matches = [s for s in matches if s.version == version]
    if not matches:
        return None
    return max(matches, key=lambda s: version_sort_key(s.version))
