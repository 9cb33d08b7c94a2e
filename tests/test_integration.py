"""End-to-end: registry text -> signature -> shapes -> example payload -> snippets."""

from pathlib import Path

import pytest

from api_docs_explorer.errors import RegistryNotFound
from api_docs_explorer.generator.descriptors import message_snippet, request_snippet, route_path
from api_docs_explorer.generator.sample import PLACEHOLDER_PREFIX, SampleGenerator
from api_docs_explorer.parser.formatter import format_type
from api_docs_explorer.parser.registry import extract_registry
from api_docs_explorer.parser.shape import parse_object_shape

ECHO_REGISTRY = """/**
 * Auto-generated type map for all API and Sync endpoints.
 */

export interface ApiTypeMap {
  'examples': {
    'echo': {
      'v1': {
        input: { msg: string };
        output: { ok: boolean };
        method: 'POST';
      };
    };
  };
}
"""


@pytest.fixture
def project(tmp_path) -> Path:
    src = tmp_path / "src"
    (src / "_sockets").mkdir(parents=True)
    (src / "examples" / "_api").mkdir(parents=True)
    (src / "_sockets" / "apiTypes.generated.ts").write_text(ECHO_REGISTRY)
    return src


class TestEchoScenario:
    def test_extraction_without_handler(self, project):
        document = extract_registry(project / "_sockets" / "apiTypes.generated.ts", source_root=project)

        assert list(document.endpoints) == ["examples"]
        assert len(document.endpoints["examples"]) == 1
        sig = document.endpoints["examples"][0]
        assert sig.name == "echo"
        assert sig.method == "POST"
        assert sig.auth.requires_login is False
        assert sig.rate_limit is None
        assert document.broadcasts == {}

    def test_example_payload_always_has_msg(self, project):
        document = extract_registry(project / "_sockets" / "apiTypes.generated.ts", source_root=project)
        sig = document.find_endpoint("examples", "echo")
        generator = SampleGenerator(seed=0)

        for _ in range(20):
            record = generator.record_for(sig.input)
            assert list(record) == ["msg"]
            assert record["msg"].startswith(f"{PLACEHOLDER_PREFIX}-")

    def test_detail_view_pieces(self, project):
        document = extract_registry(project / "_sockets" / "apiTypes.generated.ts", source_root=project)
        sig = document.find_endpoint("examples", "echo")

        assert [f.key for f in parse_object_shape(sig.output)] == ["ok"]
        assert format_type(sig.input) == "{\n  msg: string\n}"
        payload = SampleGenerator(seed=0).record_for(sig.input)
        assert route_path(sig) == "api/examples/echo/v1"
        assert "name: 'examples/echo'" in request_snippet(sig, payload)
        assert "name: 'api/examples/echo/v1'" in message_snippet(sig, payload)

    def test_handler_added_later_is_picked_up(self, project):
        (project / "examples" / "_api" / "echo.ts").write_text(
            "export const auth: AuthProps = { login: true };\nexport const rateLimit: number | false = 5;\n"
        )
        sig = extract_registry(project / "_sockets" / "apiTypes.generated.ts", source_root=project).find_endpoint(
            "examples", "echo"
        )
        assert sig.auth.requires_login is True
        assert sig.rate_limit == 5

    def test_registry_without_endpoint_block(self, project):
        registry = project / "_sockets" / "apiTypes.generated.ts"
        registry.write_text("export type HttpMethod = 'GET' | 'POST';\n")
        assert extract_registry(registry, source_root=project).endpoints == {}

    def test_missing_registry(self, project):
        with pytest.raises(RegistryNotFound):
            extract_registry(project / "_sockets" / "missing.generated.ts", source_root=project)
