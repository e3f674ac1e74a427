"""Unit tests for the insert-once composition store."""

import threading

import pytest

from composition.composer import Composer
from composition.parameters import ParameterSet
from server.composition_store import CompositionStore
from server.exceptions import StoreError


@pytest.fixture
def composition():
    return Composer().compose(ParameterSet(genre="pop", key="C", mood="happy", seed=1))


def test_insert_and_get_returns_same_object(composition):
    store = CompositionStore()
    store.insert("abc", composition)

    assert store.get("abc") is composition
    assert "abc" in store
    assert len(store) == 1


def test_missing_id_returns_none():
    store = CompositionStore()
    assert store.get("missing") is None


def test_duplicate_id_rejected(composition):
    store = CompositionStore()
    store.insert("abc", composition)

    with pytest.raises(StoreError):
        store.insert("abc", composition)

    assert store.get("abc") is composition


def test_items_in_insertion_order(composition):
    store = CompositionStore()
    for composition_id in ("c", "a", "b"):
        store.insert(composition_id, composition)

    assert [composition_id for composition_id, _ in store.items()] == ["c", "a", "b"]


def test_concurrent_inserts(composition):
    store = CompositionStore()

    def worker(offset):
        for i in range(100):
            store.insert(f"{offset}-{i}", composition)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store) == 800
