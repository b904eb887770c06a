from __future__ import annotations

import json

import pytest

from foodcart.core.constants import (
    CART_STORAGE_KEY_V1,
    CART_STORAGE_KEY_V2,
    PROMO_STORAGE_KEY_V1,
)
from foodcart.domain.cart import CartLine, Promo
from foodcart.integrations.cart_persistence import (
    CartPersistenceAdapter,
    CartState,
    sanitize_items,
    sanitize_promo,
)


def _lines() -> list[CartLine]:
    return [
        CartLine(item_id="classic-burger", name="Classic Burger", unit_price=11.99, quantity=2),
        CartLine(item_id="fries", name="Sea-Salt Fries", unit_price=4.25, quantity=1, notes="aioli"),
    ]


def test_save_then_load_round_trips(store, clock) -> None:
    adapter = CartPersistenceAdapter(store, clock=clock)
    assert adapter.save(_lines(), Promo("OCEAN10", 0.1))

    state = CartPersistenceAdapter(store).load()

    assert state.items == _lines()
    assert state.promo == Promo("OCEAN10", 0.1)


def test_save_writes_envelope_and_legacy_mirrors(store, clock) -> None:
    adapter = CartPersistenceAdapter(store, clock=clock)
    adapter.save(_lines(), Promo("SHIPFREE", 0.06))

    envelope = json.loads(store.data[CART_STORAGE_KEY_V2])
    assert envelope["version"] == 2
    assert envelope["savedAt"] == clock.now
    assert envelope["items"][0] == {
        "itemId": "classic-burger",
        "name": "Classic Burger",
        "unitPrice": 11.99,
        "quantity": 2,
        "notes": "",
    }
    assert json.loads(store.data[CART_STORAGE_KEY_V1]) == envelope["items"]
    assert json.loads(store.data[PROMO_STORAGE_KEY_V1]) == {"code": "SHIPFREE", "discountRate": 0.06}


def test_unchanged_state_is_not_rewritten(store, clock) -> None:
    adapter = CartPersistenceAdapter(store, clock=clock)
    adapter.save(_lines(), Promo())
    writes = len(store.set_calls)

    clock.advance(5_000)
    result = adapter.save(_lines(), Promo())

    assert result.ok and result.skipped
    assert len(store.set_calls) == writes


def test_fresh_adapter_always_writes_once(store, clock) -> None:
    CartPersistenceAdapter(store, clock=clock).save(_lines(), Promo())
    writes = len(store.set_calls)

    result = CartPersistenceAdapter(store, clock=clock).save(_lines(), Promo())

    assert result.ok and not result.skipped
    assert len(store.set_calls) == writes + 3


def test_failed_envelope_write_skips_legacy_keys(store, clock) -> None:
    store.fail_writes.add(CART_STORAGE_KEY_V2)
    adapter = CartPersistenceAdapter(store, clock=clock)

    result = adapter.save(_lines(), Promo())

    assert not result
    assert store.data == {}

    # failure is not cached as persisted: the next save retries
    store.fail_writes.clear()
    assert not adapter.save(_lines(), Promo()).skipped
    assert CART_STORAGE_KEY_V2 in store.data


def test_legacy_only_store_migrates_to_same_shape(store) -> None:
    store.data[CART_STORAGE_KEY_V1] = json.dumps([line.to_dict() for line in _lines()])
    store.data[PROMO_STORAGE_KEY_V1] = json.dumps({"code": "OCEAN10", "discountRate": 0.1})

    state = CartPersistenceAdapter(store).load()

    assert state == CartState(items=_lines(), promo=Promo("OCEAN10", 0.1))


def test_envelope_with_other_version_falls_back_to_legacy(store) -> None:
    store.data[CART_STORAGE_KEY_V2] = json.dumps({"version": 3, "items": [], "promo": {}})
    store.data[CART_STORAGE_KEY_V1] = json.dumps([{"itemId": "fries", "unitPrice": 4.25, "quantity": 2}])

    state = CartPersistenceAdapter(store).load()

    assert [line.item_id for line in state.items] == ["fries"]
    assert state.promo == Promo()


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", "null", '"text"'])
def test_malformed_envelope_is_treated_as_absent(store, raw) -> None:
    store.data[CART_STORAGE_KEY_V2] = raw
    store.data[PROMO_STORAGE_KEY_V1] = json.dumps({"code": "OCEAN10", "discountRate": 0.1})

    state = CartPersistenceAdapter(store).load()

    assert state.items == []
    assert state.promo.code == "OCEAN10"


def test_empty_store_loads_defaults(store) -> None:
    assert CartPersistenceAdapter(store).load() == CartState()


def test_unreadable_storage_loads_defaults(store) -> None:
    store.fail_reads.update({CART_STORAGE_KEY_V2, CART_STORAGE_KEY_V1, PROMO_STORAGE_KEY_V1})

    assert CartPersistenceAdapter(store).load() == CartState()


def test_promo_in_storage_is_clamped(store) -> None:
    store.data[CART_STORAGE_KEY_V2] = json.dumps(
        {"version": 2, "items": [], "promo": {"code": "HACKED", "discountRate": 0.9}}
    )

    state = CartPersistenceAdapter(store).load()

    assert state.promo == Promo("HACKED", 0.5)


def test_sanitize_items_drops_and_defaults() -> None:
    items = sanitize_items(
        [
            {"itemId": "a", "name": 7, "unitPrice": "3", "quantity": "2", "notes": None},
            {"itemId": 42, "name": "no string id"},
            "not an object",
            {"name": "missing id"},
            {"itemId": "b", "unitPrice": 2.5, "quantity": 3, "notes": "no onions"},
            {"itemId": "zero", "unitPrice": 1, "quantity": 0},
            {"itemId": "a", "unitPrice": 9, "quantity": 9},
        ]
    )

    assert items == [
        CartLine(item_id="a", name="", unit_price=0.0, quantity=1, notes=""),
        CartLine(item_id="b", name="", unit_price=2.5, quantity=3, notes="no onions"),
    ]


def test_sanitize_items_rejects_non_list() -> None:
    assert sanitize_items({"itemId": "a"}) == []
    assert sanitize_items(None) == []


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, Promo()),
        ([], Promo()),
        ({"code": 5, "discountRate": 0.1}, Promo("", 0.1)),
        ({"code": "X", "discountRate": "0.3"}, Promo("X", 0)),
        ({"code": "X", "discountRate": True}, Promo("X", 0)),
        ({"code": "X", "discountRate": -0.2}, Promo("X", 0)),
    ],
)
def test_sanitize_promo(raw, expected) -> None:
    assert sanitize_promo(raw) == expected
