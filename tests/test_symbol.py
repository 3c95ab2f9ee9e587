import pytest

from cuss import SymbolPool


def test_intern_returns_same_symbol_for_same_name():
    pool = SymbolPool()
    assert pool.intern("div") is pool.intern("div")
    assert len(pool) == 1


def test_symbols_order_by_intern_position_not_text():
    pool = SymbolPool()
    zebra = pool.intern("zebra")
    apple = pool.intern("apple")
    assert zebra < apple
    assert sorted([apple, zebra]) == [zebra, apple]


def test_lookup_does_not_intern():
    pool = SymbolPool()
    assert pool.lookup("span") is None
    assert pool.lookup(None) is None
    assert "span" not in pool
    assert len(pool) == 0
    symbol = pool.intern("span")
    assert pool.lookup("span") is symbol
    assert "span" in pool


def test_name_round_trip():
    pool = SymbolPool()
    symbol = pool.intern("note")
    assert pool.name(symbol) == "note"
    assert symbol.name == "note"
    assert str(symbol) == "note"
    assert repr(symbol) == "Symbol('note')"


def test_symbols_from_different_pools():
    first = SymbolPool()
    second = SymbolPool()
    a = first.intern("a")
    b = second.intern("a")
    assert a != b
    with pytest.raises(ValueError):
        a < b  # noqa: B015
    with pytest.raises(ValueError):
        first.name(b)


def test_symbols_are_hashable():
    pool = SymbolPool()
    names = {pool.intern("a"), pool.intern("b"), pool.intern("a")}
    assert len(names) == 2
