"""Tests for cache key derivation."""

import math

import pytest

from dispatch_cache.core.call_signature import DescriptorCall, PositionalCall, parse_call
from dispatch_cache.core.keys import derive_key, is_empty_payload, to_key_string


class AmbiguousBatch:
    """Payload whose truth value cannot be decided, like an array or frame."""

    def __bool__(self):
        raise ValueError("The truth value of a batch is ambiguous")

    def __len__(self):
        raise ValueError("The length of a batch is ambiguous")

    def __str__(self):
        return "batch"


class TestToKeyString:
    """Tests for to_key_string."""

    def test_strings_pass_through(self):
        """Should return strings unchanged, quotes included."""
        assert to_key_string("fetchUser") == "fetchUser"
        assert to_key_string('already "quoted"') == 'already "quoted"'

    @pytest.mark.parametrize(
        "value,expected",
        [
            ({"id": 42}, '{"id":42}'),
            ([1, 2, 3], "[1,2,3]"),
            (7, "7"),
            (True, "true"),
            (None, "null"),
            ({"name": "Zoë"}, '{"name":"Zoë"}'),
        ],
    )
    def test_non_strings_use_compact_json(self, value, expected):
        """Should encode non-strings as compact JSON."""
        assert to_key_string(value) == expected

    def test_object_key_order_is_kept(self):
        """Should render structurally equal payloads with different key order differently."""
        assert to_key_string({"a": 1, "b": 2}) != to_key_string({"b": 2, "a": 1})

    def test_unencodable_objects_still_render(self):
        """Should render objects JSON cannot encode via str."""

        class Thing:
            def __str__(self):
                return "thing"

        assert to_key_string({"t": Thing()}) == '{"t":"thing"}'

    def test_cyclic_values_fall_back_to_repr(self):
        """Should fall back to repr for cyclic containers."""
        cyclic: list = []
        cyclic.append(cyclic)
        assert to_key_string(cyclic) == repr(cyclic)


class TestIsEmptyPayload:
    """Tests for is_empty_payload."""

    @pytest.mark.parametrize("value", [None, False, "", 0, 0.0, math.nan])
    def test_empty_values(self, value):
        """Should treat None, False, empty string, zero and NaN as empty."""
        assert is_empty_payload(value) is True

    @pytest.mark.parametrize("value", [{}, [], (), "0", 1, -1, True, {"x": 0}])
    def test_present_values(self, value):
        """Should treat empty containers and other values as present."""
        assert is_empty_payload(value) is False

    def test_never_asks_objects_for_truth_value(self):
        """Should not call __bool__ or __len__ on arbitrary objects."""
        assert is_empty_payload(AmbiguousBatch()) is False


class TestDeriveKey:
    """Tests for derive_key."""

    def test_action_only(self):
        """Should use the bare action without a payload."""
        assert derive_key(PositionalCall("fetchUser")) == "fetchUser"

    def test_action_with_payload(self):
        """Should append the encoded payload after a colon."""
        assert derive_key(PositionalCall("fetchUser", {"id": 1})) == 'fetchUser:{"id":1}'

    def test_string_payload_is_not_quoted(self):
        """Should append string payloads verbatim."""
        assert derive_key(PositionalCall("search", "cats")) == "search:cats"

    def test_different_payloads_differ(self):
        """Should derive distinct keys for distinct payloads."""
        assert derive_key(parse_call(("a", {"x": 1}))) != derive_key(parse_call(("a", {"x": 2})))

    @pytest.mark.parametrize("payload", [None, 0, "", False])
    def test_empty_payload_collapses_to_action(self, payload):
        """Should key empty payloads like a call without one."""
        assert derive_key(parse_call(("a", payload))) == derive_key(parse_call(("a",)))

    @pytest.mark.parametrize("payload,expected", [({}, "a:{}"), ([], "a:[]")])
    def test_empty_containers_keep_their_segment(self, payload, expected):
        """Should keep empty containers in the key."""
        assert derive_key(parse_call(("a", payload))) == expected
        assert derive_key(parse_call(("a", payload))) != derive_key(parse_call(("a",)))

    def test_ambiguous_payload_does_not_raise(self):
        """Should derive a key for payloads whose truth value raises."""
        assert derive_key(parse_call(("load", AmbiguousBatch()))) == 'load:"batch"'

    def test_options_do_not_affect_key(self):
        """Should ignore call options when keying."""
        assert derive_key(parse_call(("a", {"x": 1}, {"timeout": 5}))) == 'a:{"x":1}'

    def test_descriptor_uses_type_only(self):
        """Should key descriptors by their type alone."""
        call = DescriptorCall({"type": "fetchUser", "timeout": 100})
        assert derive_key(call) == "fetchUser"

    def test_descriptor_and_positional_share_key(self):
        """Should give a descriptor and a bare positional call the same key."""
        assert derive_key(parse_call(({"type": "load"},))) == derive_key(parse_call(("load",)))

    def test_non_string_action_is_encoded(self):
        """Should encode non-string actions as JSON."""
        assert derive_key(PositionalCall(["ns", "load"])) == '["ns","load"]'
