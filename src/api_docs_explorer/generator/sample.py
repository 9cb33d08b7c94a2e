"""Synthetic example payloads for the "try it" input editor.

Values only need to be structurally plausible for the type text; they
are never validated against it.
"""

import random
import re
from datetime import datetime, timezone
from typing import Any

from api_docs_explorer.parser.scanner import find_block_end, split_top_level
from api_docs_explorer.parser.shape import parse_object_shape, unwrap_braces

NULLISH = {"undefined", "null"}
OPTIONAL_INCLUDE_RATE = 0.4
PLACEHOLDER_PREFIX = "example"

_NUMBER_LITERAL = re.compile(r"^-?\d+(\.\d+)?$")
_ARRAY_GENERIC = re.compile(r"^(?:Readonly)?Array<(.*)>$", re.DOTALL)


def _is_quoted(text: str) -> bool:
    return len(text) >= 2 and text[0] in ("'", '"') and text[-1] == text[0]


class SampleGenerator:
    """Generates example values from type expressions.

    Pass ``seed`` (or a ``random.Random``) for reproducible output.
    """

    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        self.rng = rng or random.Random(seed)

    def value_for(self, type_text: str) -> Any:
        """Produce one example value consistent with ``type_text``.

        For a union, one non-nullish branch is picked at random from
        ``self.rng``; the first branch is used only when every branch is
        ``undefined`` or ``null``. Seed the generator for a fixed choice.
        """
        text = type_text.strip()

        branches = [b.strip() for b in split_top_level(text, "|")]
        branches = [b for b in branches if b]
        if len(branches) > 1:
            candidates = [b for b in branches if b not in NULLISH] or branches[:1]
            return self.value_for(self.rng.choice(candidates))

        if text.endswith("[]"):
            item = text[:-2]
            return [self.value_for(item) for _ in range(2)]

        generic = _ARRAY_GENERIC.match(text)
        if generic:
            return [self.value_for(generic.group(1)) for _ in range(2)]

        if text.startswith("(") and find_block_end(text, 0) == len(text) - 1:
            return self.value_for(text[1:-1])

        if unwrap_braces(text) is not None:
            return self.record_for(text)

        if text == "string":
            return f"{PLACEHOLDER_PREFIX}-{self.rng.randint(0, 9999)}"
        if text == "number":
            return self.rng.randrange(100)
        if text == "boolean":
            return self.rng.random() < 0.5
        if text == "Date":
            return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        if _is_quoted(text):
            return text[1:-1]
        if text in ("true", "false"):
            return text == "true"
        if _NUMBER_LITERAL.match(text):
            return float(text) if "." in text else int(text)
        return None

    def record_for(self, object_text: str) -> dict[str, Any]:
        """Build an example object, randomly leaving out optional fields."""
        record = {}
        for field in parse_object_shape(object_text):
            if field.optional and self.rng.random() >= OPTIONAL_INCLUDE_RATE:
                continue
            record[field.key] = self.value_for(field.type)
        return record
