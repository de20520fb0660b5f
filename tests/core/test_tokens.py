# tests/core/test_tokens.py
"""Tests for deferred values: tokens, lazy helpers, and the resolver."""

from typing import Any

import pytest

from tests.fixtures.trees import RecordingHost


def _stack_with_resource() -> tuple[Any, Any, Any]:
    from arbor.core.tree import App, Stack
    from arbor.entities import Resource

    app = App()
    stack = Stack(app, "S")
    resource = Resource(stack, "Bucket", resource_type="Bucket")
    return app, stack, resource


class TestTokenComposition:
    """Building tokens out of other tokens and literals."""

    def test_string_concatenation_builds_join(self) -> None:
        from arbor.core.tokens import JoinToken, Lazy

        token = Lazy.string(lambda ctx: "x")
        joined = "a/" + token + "b"

        assert isinstance(joined, JoinToken)
        assert joined.delimiter == ""
        assert joined.parts == ("a/", token, "b")

    def test_nested_same_delimiter_joins_flatten(self) -> None:
        from arbor.core.tokens import Lazy, fn

        token = Lazy.string(lambda ctx: "x")
        inner = fn.join("-", ["a", token])
        outer = fn.join("-", [inner, "b"])

        assert outer.parts == ("a", token, "b")

    def test_different_delimiter_joins_nest(self) -> None:
        from arbor.core.tokens import Lazy, fn

        inner = fn.join(",", ["a", Lazy.string(lambda ctx: "x")])
        outer = fn.join("-", [inner, "b"])

        assert outer.parts == (inner, "b")

    def test_non_string_token_does_not_concatenate(self) -> None:
        from arbor.core.tokens import Lazy

        listing = Lazy.list(lambda ctx: ["a"])
        with pytest.raises(TypeError):
            _ = listing + "x"

    def test_list_token_indexing_builds_select(self) -> None:
        from arbor.contracts.enums import TokenShape
        from arbor.core.tokens import Lazy

        selected = Lazy.list(lambda ctx: ["a", "b"])[1]
        assert selected.shape == TokenShape.STRING

    def test_string_token_is_not_indexable(self) -> None:
        from arbor.core.tokens import Lazy

        with pytest.raises(TypeError):
            _ = Lazy.string(lambda ctx: "x")[0]

    def test_tokens_are_not_iterable(self) -> None:
        from arbor.core.tokens import Lazy

        with pytest.raises(TypeError):
            list(Lazy.list(lambda ctx: ["a"]))

    def test_negative_select_index_rejected(self) -> None:
        from arbor.core.tokens import fn

        with pytest.raises(ValueError):
            fn.select(-1, ["a"])

    def test_resource_attribute_tokens_are_memoized(self) -> None:
        _, _, bucket = _stack_with_resource()

        assert bucket.get_att("arn") is bucket.get_att("arn")
        assert bucket.ref is bucket.ref
        assert bucket.get_att("arn") is not bucket.get_att("name")

    def test_reference_key_identifies_value(self) -> None:
        _, _, bucket = _stack_with_resource()

        assert bucket.get_att("arn").reference_key == ("App", "S", "Bucket", "FnGetAtt", "arn")
        assert bucket.ref.reference_key == ("App", "S", "Bucket", "Ref", "")


class TestTokenResolver:
    """Depth-first, cached, cycle-checked resolution."""

    def test_literals_pass_through(self) -> None:
        from arbor.core.tokens import TokenResolver

        _, _, bucket = _stack_with_resource()
        resolver = TokenResolver(RecordingHost())

        value = {"a": [1, "two", None, {"b": True}]}
        assert resolver.resolve(value, consumer=bucket) == value

    def test_tuples_become_lists(self) -> None:
        from arbor.core.tokens import TokenResolver

        _, _, bucket = _stack_with_resource()
        assert TokenResolver(RecordingHost()).resolve(("a", "b"), consumer=bucket) == ["a", "b"]

    def test_reference_resolves_to_intrinsic(self) -> None:
        from arbor.core.tokens import TokenResolver
        from arbor.core.tree import Stack
        from arbor.entities import Resource

        _, stack, bucket = _stack_with_resource()
        consumer = Resource(stack, "Policy", resource_type="Policy")
        host = RecordingHost()
        resolver = TokenResolver(host)

        logical_id = host.logical_id(bucket)
        assert resolver.resolve(bucket.ref, consumer=consumer) == {"Ref": logical_id}
        assert resolver.resolve(bucket.get_att("arn"), consumer=consumer) == {"Fn::GetAtt": [logical_id, "arn"]}
        assert Stack.of(consumer) is stack

    def test_references_are_noted_for_consumer(self) -> None:
        from arbor.core.tokens import TokenResolver
        from arbor.entities import Resource

        _, stack, bucket = _stack_with_resource()
        consumer = Resource(stack, "Policy", resource_type="Policy")
        host = RecordingHost()

        TokenResolver(host).resolve({"r": bucket.ref}, consumer=consumer)

        assert host.noted == [("App/S/Policy", "App/S/Bucket")]

    def test_token_computed_at_most_once(self) -> None:
        from arbor.core.tokens import Lazy, TokenResolver

        _, _, bucket = _stack_with_resource()
        calls: list[int] = []

        def compute(ctx: Any) -> str:
            calls.append(1)
            return "value"

        token = Lazy.string(compute)
        resolver = TokenResolver(RecordingHost())

        first = resolver.resolve({"a": token, "b": [token]}, consumer=bucket)
        second = resolver.resolve(token, consumer=bucket)

        assert first == {"a": "value", "b": ["value"]}
        assert second == "value"
        assert len(calls) == 1

    def test_cache_hit_still_records_producers(self) -> None:
        from arbor.core.tokens import TokenResolver
        from arbor.entities import Resource

        _, stack, bucket = _stack_with_resource()
        first = Resource(stack, "First", resource_type="T")
        second = Resource(stack, "Second", resource_type="T")
        shared = bucket.get_att("arn") + "/*"
        host = RecordingHost()
        resolver = TokenResolver(host)

        resolver.resolve(shared, consumer=first)
        resolver.resolve(shared, consumer=first)
        resolver.resolve(shared, consumer=second)

        # The second resolution for First is served from the cache
        assert host.noted.count(("App/S/First", "App/S/Bucket")) == 2
        assert ("App/S/Second", "App/S/Bucket") in host.noted

    def test_lazy_results_are_resolved_recursively(self) -> None:
        from arbor.core.tokens import Lazy, TokenResolver

        _, _, bucket = _stack_with_resource()
        host = RecordingHost()
        token = Lazy.mapping(lambda ctx: {"Arn": bucket.get_att("arn"), "Static": 1})

        resolved = TokenResolver(host).resolve(token, consumer=bucket)

        assert resolved == {"Arn": {"Fn::GetAtt": [host.logical_id(bucket), "arn"]}, "Static": 1}

    def test_self_referential_token_raises(self) -> None:
        from arbor.contracts.errors import CyclicTokenError
        from arbor.core.tokens import Lazy, TokenResolver

        _, _, bucket = _stack_with_resource()
        holder: dict[str, Any] = {}
        first = Lazy.string(lambda ctx: ctx.resolve(holder["second"]), label="first")
        second = Lazy.string(lambda ctx: ctx.resolve(first), label="second")
        holder["second"] = second

        with pytest.raises(CyclicTokenError) as exc_info:
            TokenResolver(RecordingHost()).resolve(first, consumer=bucket)

        assert exc_info.value.cycle == ("first", "second", "first")

    def test_foreign_reference_goes_through_host_import(self) -> None:
        from arbor.core.tokens import TokenResolver
        from arbor.core.tree import Stack
        from arbor.entities import Resource

        app, _, bucket = _stack_with_resource()
        other = Resource(Stack(app, "Other"), "Policy", resource_type="Policy")
        host = RecordingHost()

        resolved = TokenResolver(host).resolve(bucket.get_att("arn"), consumer=other)

        assert resolved == {"Imported": "App/S/Bucket.arn"}
        assert host.imported == ["App/S/Bucket.arn"]


class TestLowering:
    """Joins, splits and selects collapse when inputs are literal."""

    def _resolve(self, value: Any) -> tuple[Any, RecordingHost, Any]:
        from arbor.core.tokens import TokenResolver

        _, _, bucket = _stack_with_resource()
        host = RecordingHost()
        return TokenResolver(host).resolve(value, consumer=bucket), host, bucket

    def test_join_of_literals_collapses(self) -> None:
        from arbor.core.tokens import Lazy, fn

        resolved, _, _ = self._resolve(fn.join("-", ["a", Lazy.string(lambda ctx: "b"), 3]))
        assert resolved == "a-b-3"

    def test_join_keeps_order_around_deferred_part(self) -> None:
        _, _, bucket = _stack_with_resource()
        resolved, host, _ = self._resolve("a/" + bucket.ref + "b")

        assert resolved == {"Fn::Join": ["", ["a/", {"Ref": host.logical_id(bucket)}, "b"]]}

    def test_join_merges_adjacent_literals(self) -> None:
        from arbor.core.tokens import Lazy

        _, _, bucket = _stack_with_resource()
        token = "a" + Lazy.string(lambda ctx: "b") + bucket.ref + "c" + "d"
        resolved, host, _ = self._resolve(token)

        assert resolved == {"Fn::Join": ["", ["ab", {"Ref": host.logical_id(bucket)}, "cd"]]}

    def test_join_over_deferred_list_kept_whole(self) -> None:
        from arbor.core.tokens import Lazy, fn

        zones = Lazy.string(lambda ctx: {"Fn::Join": [",", {"Ref": "Zones"}]})
        resolved, _, _ = self._resolve(fn.join(",", [zones, "x"]))

        assert resolved == {"Fn::Join": [",", [{"Fn::Join": [",", {"Ref": "Zones"}]}, "x"]]}

    def test_join_rejects_mapping_parts(self) -> None:
        from arbor.core.tokens import Lazy, fn

        with pytest.raises(TypeError):
            self._resolve(fn.join("", ["a", Lazy.mapping(lambda ctx: {"not": "intrinsic", "two": "keys"})]))

    def test_split_of_literal_is_eager(self) -> None:
        from arbor.core.tokens import Lazy

        resolved, _, _ = self._resolve(Lazy.string(lambda ctx: "a,b,c").split(","))
        assert resolved == ["a", "b", "c"]

    def test_split_of_deferred_value_lowers(self) -> None:
        _, _, bucket = _stack_with_resource()
        resolved, host, _ = self._resolve(bucket.ref.split(":")[2])

        assert resolved == {"Fn::Select": [2, {"Fn::Split": [":", {"Ref": host.logical_id(bucket)}]}]}

    def test_select_from_literal_list(self) -> None:
        from arbor.core.tokens import fn

        resolved, _, _ = self._resolve(fn.select(1, ["a", "b"]))
        assert resolved == "b"

    def test_select_out_of_range_raises(self) -> None:
        from arbor.core.tokens import fn

        with pytest.raises(IndexError):
            self._resolve(fn.select(5, ["a"]))

    def test_import_value_by_name(self) -> None:
        from arbor.core.tokens import fn

        resolved, _, _ = self._resolve(fn.import_value("shared-vpc-id"))
        assert resolved == {"Fn::ImportValue": "shared-vpc-id"}
