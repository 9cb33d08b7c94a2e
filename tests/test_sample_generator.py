import random
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from api_docs_explorer.generator.sample import PLACEHOLDER_PREFIX, SampleGenerator
from api_docs_explorer.parser.shape import parse_object_shape


class TestValueFor:
    def test_string_placeholder(self):
        value = SampleGenerator(seed=1).value_for("string")
        assert isinstance(value, str)
        assert value.startswith(f"{PLACEHOLDER_PREFIX}-")

    def test_number_range(self):
        gen = SampleGenerator(seed=2)
        values = [gen.value_for("number") for _ in range(200)]
        assert all(isinstance(v, int) and 0 <= v < 100 for v in values)

    def test_boolean(self):
        gen = SampleGenerator(seed=3)
        values = {gen.value_for("boolean") for _ in range(50)}
        assert values == {True, False}

    def test_date_is_iso_timestamp(self):
        value = SampleGenerator().value_for("Date")
        assert value.endswith("Z")
        datetime.fromisoformat(value.replace("Z", "+00:00"))

    def test_string_literal_union(self):
        gen = SampleGenerator(seed=4)
        values = {gen.value_for("'pro' | 'free'") for _ in range(50)}
        assert values == {"pro", "free"}

    def test_double_quoted_literal(self):
        assert SampleGenerator().value_for('"dark"') == "dark"

    def test_nullish_branches_are_avoided(self):
        gen = SampleGenerator(seed=5)
        for _ in range(20):
            assert isinstance(gen.value_for("string | null | undefined"), str)

    def test_all_nullish_falls_back_to_first_branch(self):
        assert SampleGenerator().value_for("null | undefined") is None

    def test_union_branch_follows_the_seed(self):
        first = [SampleGenerator(seed=11).value_for("'a' | 'b' | 'c'") for _ in range(10)]
        again = [SampleGenerator(seed=11).value_for("'a' | 'b' | 'c'") for _ in range(10)]
        assert first == again

    def test_union_branch_comes_from_the_rng(self):
        rng = MagicMock()
        rng.choice.side_effect = lambda candidates: candidates[-1]
        assert SampleGenerator(rng=rng).value_for("'a' | null | 'b'") == "b"
        rng.choice.assert_called_once_with(["'a'", "'b'"])

    def test_array_has_two_elements(self):
        value = SampleGenerator(seed=6).value_for("number[]")
        assert len(value) == 2
        assert all(isinstance(v, int) for v in value)

    def test_generic_array(self):
        value = SampleGenerator(seed=6).value_for("Array<'a'>")
        assert value == ["a", "a"]

    def test_parenthesized_union_array(self):
        value = SampleGenerator(seed=7).value_for("('x' | 'y')[]")
        assert len(value) == 2
        assert set(value) <= {"x", "y"}

    def test_union_inside_braces_is_not_split(self):
        value = SampleGenerator(seed=8).value_for("{ a: 1 | 2 }")
        assert value["a"] in (1, 2)

    def test_union_inside_string_is_not_split(self):
        assert SampleGenerator().value_for("'a|b'") == "a|b"

    def test_nested_object(self):
        value = SampleGenerator(seed=9).value_for("{ user: { id: number; name: string } }")
        assert set(value) == {"user"}
        assert set(value["user"]) == {"id", "name"}

    def test_boolean_and_number_literals(self):
        gen = SampleGenerator()
        assert gen.value_for("true") is True
        assert gen.value_for("false") is False
        assert gen.value_for("42") == 42

    @pytest.mark.parametrize("text", ["any", "unknown", "SessionLayout", ""])
    def test_unrecognized_is_none(self, text):
        assert SampleGenerator().value_for(text) is None


class TestRecordFor:
    SHAPE = "{ id: number; name?: string; theme?: 'light' | 'dark'; tags: string[] }"

    def test_required_fields_always_present(self):
        gen = SampleGenerator(seed=10)
        for _ in range(50):
            record = gen.record_for(self.SHAPE)
            assert {"id", "tags"} <= set(record)

    def test_never_adds_unknown_keys(self):
        gen = SampleGenerator(seed=11)
        keys = {f.key for f in parse_object_shape(self.SHAPE)}
        for _ in range(50):
            assert set(gen.record_for(self.SHAPE)) <= keys

    def test_optional_fields_are_sometimes_omitted(self):
        gen = SampleGenerator(seed=12)
        seen = [("name" in gen.record_for(self.SHAPE)) for _ in range(200)]
        assert any(seen)
        assert not all(seen)

    def test_optional_included_when_coin_says_so(self):
        rng = MagicMock(spec=random.Random)
        rng.random.return_value = 0.1
        rng.randint.return_value = 7
        record = SampleGenerator(rng=rng).record_for("{ name?: string }")
        assert record == {"name": f"{PLACEHOLDER_PREFIX}-7"}

    def test_optional_omitted_when_coin_says_so(self):
        rng = MagicMock(spec=random.Random)
        rng.random.return_value = 0.9
        assert SampleGenerator(rng=rng).record_for("{ name?: string }") == {}

    def test_untyped_shape_gives_empty_record(self):
        assert SampleGenerator().record_for("any") == {}

    def test_same_seed_same_record(self):
        shape = "{ a: number; b?: string; c: boolean }"
        assert SampleGenerator(seed=13).record_for(shape) == SampleGenerator(seed=13).record_for(shape)
