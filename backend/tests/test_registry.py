"""Function registry tests."""

import pytest

from bgg_gateway.models import FunctionBinding
from bgg_gateway.registry import DEFAULT_BINDINGS, FunctionRegistry, registry
from bgg_gateway.schemas import GetHotItemsArgs


def test_default_registry_has_four_functions_in_order():
    assert registry.names() == ["search_game", "get_thing", "get_hot_items", "get_user_collection"]
    assert len(registry) == 4


def test_get_unknown_returns_none():
    assert registry.get("nope") is None
    assert "nope" not in registry


def test_descriptors_match_bindings():
    for binding, descriptor in zip(DEFAULT_BINDINGS, registry.descriptors()):
        assert descriptor.name == binding.name
        assert descriptor.parameters == binding.parameters


def test_upstream_paths():
    paths = {name: registry.get(name).path for name in registry.names()}
    assert paths == {
        "search_game": "/search",
        "get_thing": "/thing",
        "get_hot_items": "/hot",
        "get_user_collection": "/collection",
    }


def test_duplicate_names_rejected():
    binding = FunctionBinding(
        name="get_hot_items",
        description="dup",
        path="/hot",
        parameters={"type": "object", "properties": {}},
        argsModel=GetHotItemsArgs,
    )
    with pytest.raises(ValueError):
        FunctionRegistry([binding, binding])
