from __future__ import annotations

from decimal import Decimal

import pytest

from acsh.errors import EmptyMenuError, ModelNotFoundError, ResolveError, SelectionCancelled
from acsh.menu import CANCELLED, Confirmed
from acsh.models import ModelRegistry, StaticSource
from acsh.selection import apply_selection, format_cost, resolve_direct, resolve_from_menu


class FakeSelector:
    def __init__(self, outcome):
        self.outcome = outcome
        self.seen = None

    def run(self, labels):
        self.seen = list(labels)
        if not labels:
            raise EmptyMenuError("menu has no entries")
        return self.outcome


class DictStore:
    def __init__(self):
        self.values = {}
        self.writes = []

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value):
        self.update({key: value})

    def update(self, values):
        self.writes.append(list(values))
        self.values.update(values)


@pytest.fixture
def registry(sample_models):
    registry = ModelRegistry()
    registry.load(StaticSource(sample_models))
    return registry


def test_resolve_direct_returns_exact_record(registry):
    record = resolve_direct(registry, "anthropic", "claude-3-5-haiku-20241022")

    assert record.provider == "anthropic"
    assert record.model == "claude-3-5-haiku-20241022"
    assert record.endpoint == "https://api.anthropic.com/v1/messages"
    assert record.prompt_cost == Decimal("0.00000025")


def test_menu_position_one_returns_first_record(registry):
    selector = FakeSelector(Confirmed(1))
    record = resolve_from_menu(registry, selector)

    assert record == resolve_direct(registry, "anthropic", "claude-3-5-haiku-20241022")
    assert selector.seen == registry.display_order()


def test_menu_position_maps_through_display_order(registry):
    assert resolve_from_menu(registry, FakeSelector(Confirmed(4))).model == "llama3-70b-8192"
    assert resolve_from_menu(registry, FakeSelector(Confirmed(5))).provider == "ollama"


def test_cancelled_menu_raises_selection_cancelled(registry):
    with pytest.raises(SelectionCancelled):
        resolve_from_menu(registry, FakeSelector(CANCELLED))


def test_empty_registry_reports_empty_menu():
    with pytest.raises(EmptyMenuError):
        resolve_from_menu(ModelRegistry(), FakeSelector(Confirmed(1)))


def test_unknown_model_lists_provider_candidates(registry):
    with pytest.raises(ModelNotFoundError) as excinfo:
        resolve_direct(registry, "anthropic", "claude-2")

    assert isinstance(excinfo.value, ResolveError)
    assert excinfo.value.candidates == [
        "anthropic|claude-3-5-haiku-20241022",
        "anthropic|claude-3-7-sonnet-latest",
    ]
    assert "claude-2" in str(excinfo.value)


def test_unencodable_pair_is_not_found(registry):
    with pytest.raises(ModelNotFoundError) as excinfo:
        resolve_direct(registry, "openai", "gpt|4o")
    assert excinfo.value.candidates == ["openai|gpt-4o"]


def test_apply_selection_writes_all_fields_at_once(registry):
    store = DictStore()
    apply_selection(store, resolve_direct(registry, "anthropic", "claude-3-5-haiku-20241022"))

    assert store.writes == [["model", "endpoint", "provider", "api_prompt_cost", "api_completion_cost"]]
    assert store.values == {
        "model": "claude-3-5-haiku-20241022",
        "endpoint": "https://api.anthropic.com/v1/messages",
        "provider": "anthropic",
        "api_prompt_cost": "0.00000025",
        "api_completion_cost": "0.00000125",
    }


@pytest.mark.parametrize(
    "cost, expected",
    [
        (Decimal(0), "0.00000000"),
        (Decimal("2.5E-7"), "0.00000025"),
        (Decimal("0.000015"), "0.00001500"),
    ],
)
def test_format_cost(cost, expected):
    assert format_cost(cost) == expected


def test_position_past_the_end_is_rejected(registry):
    with pytest.raises(ResolveError, match="outside 1..5"):
        resolve_from_menu(registry, FakeSelector(Confirmed(6)))


@pytest.mark.parametrize("position", [0, -1])
def test_confirmed_rejects_positions_below_one(position):
    with pytest.raises(ValueError):
        Confirmed(position)


@pytest.mark.parametrize("position", [True, 1.0, "1", None])
def test_confirmed_requires_an_integer(position):
    with pytest.raises(TypeError):
        Confirmed(position)
