"""Tests for dotted-path access."""

import pytest

from sluice.errors import PathError
from sluice.paths import get_path, has_path, set_path, split_path
from sluice.types import MISSING


class Request:
    """Attribute-style root container."""

    def __init__(self, **attrs):
        self.__dict__.update(attrs)


# =============================================================================
# get_path
# =============================================================================


class TestGetPath:
    def test_top_level_key(self):
        assert get_path({"a": 1}, "a") == 1

    def test_nested_key(self):
        root = {"c": {"d": {"e": "test"}}}
        assert get_path(root, "c.d.e") == "test"

    def test_missing_key_returns_missing(self):
        assert get_path({"a": 1}, "b") is MISSING

    def test_missing_intermediate_returns_missing(self):
        assert get_path({"a": 1}, "x.y.z") is MISSING

    def test_present_none_is_not_missing(self):
        assert get_path({"a": None}, "a") is None

    def test_none_intermediate_returns_missing(self):
        assert get_path({"a": None}, "a.b") is MISSING

    def test_scalar_intermediate_returns_missing(self):
        assert get_path({"a": "text"}, "a.upper") is MISSING

    def test_list_index(self):
        root = {"items": [{"name": "x"}, {"name": "y"}]}
        assert get_path(root, "items.1.name") == "y"

    def test_list_index_out_of_range(self):
        assert get_path({"items": [1]}, "items.3") is MISSING

    def test_list_non_numeric_segment(self):
        assert get_path({"items": [1]}, "items.append") is MISSING

    def test_attribute_object(self):
        request = Request(body={"name": "Test Name"})
        assert get_path(request, "body.name") == "Test Name"

    def test_empty_path_raises(self):
        with pytest.raises(PathError):
            get_path({}, "")


class TestHasPath:
    def test_present(self):
        assert has_path({"a": {"b": 0}}, "a.b")

    def test_present_none(self):
        assert has_path({"a": None}, "a")

    def test_absent(self):
        assert not has_path({}, "a")


def test_split_path():
    assert split_path("a.b.c") == ["a", "b", "c"]


# =============================================================================
# set_path
# =============================================================================


class TestSetPath:
    def test_top_level(self):
        root = {}
        set_path(root, "a", 1)
        assert root == {"a": 1}

    def test_creates_intermediate_dicts(self):
        root = {}
        set_path(root, "c.d.e", "x")
        assert root == {"c": {"d": {"e": "x"}}}

    def test_overwrites_existing(self):
        root = {"c": {"d": 1, "f": True}}
        set_path(root, "c.d", 2)
        assert root == {"c": {"d": 2, "f": True}}

    def test_mutates_in_place(self):
        inner = {"b": 1}
        root = {"a": inner}
        set_path(root, "a.b", 5)
        assert inner["b"] == 5

    def test_writes_none(self):
        root = {}
        set_path(root, "c", None)
        assert root == {"c": None}

    def test_list_index(self):
        root = {"items": [1, 2, 3]}
        set_path(root, "items.1", 20)
        assert root["items"] == [1, 20, 3]

    def test_list_append_at_length(self):
        root = {"items": [1]}
        set_path(root, "items.1", 2)
        assert root["items"] == [1, 2]

    def test_list_index_beyond_length_raises(self):
        with pytest.raises(PathError):
            set_path({"items": []}, "items.5", 1)

    def test_attribute_object(self):
        request = Request(body={})
        set_path(request, "body.name", "x")
        assert request.body == {"name": "x"}

    def test_creates_attribute(self):
        request = Request()
        set_path(request, "body.name", "x")
        assert request.body == {"name": "x"}

    def test_scalar_intermediate_raises(self):
        with pytest.raises(PathError, match="holds a str"):
            set_path({"a": "text"}, "a.b", 1)
