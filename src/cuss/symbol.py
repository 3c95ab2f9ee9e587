"""Interned names for tags, ids and classes.

A `Symbol` is ordered by the position at which its name was first interned,
not by its text. Every sorted sequence of symbols (class lists on selectors
and on elements) must use this one order, which only holds for symbols from
the same `SymbolPool`.
"""

from __future__ import annotations


class Symbol:
    __slots__ = ("_pool", "index")

    index: int
    _pool: SymbolPool

    def __init__(self, pool: SymbolPool, index: int) -> None:
        self._pool = pool
        self.index = index

    @property
    def name(self) -> str:
        return self._pool.name(self)

    def _key(self, other: object) -> int:
        if not isinstance(other, Symbol):
            raise TypeError(f"Cannot compare Symbol with {type(other).__name__}")
        if other._pool is not self._pool:
            raise ValueError("Cannot compare symbols from different pools")
        return other.index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Symbol):
            return NotImplemented
        return self._pool is other._pool and self.index == other.index

    def __hash__(self) -> int:
        return hash((id(self._pool), self.index))

    def __lt__(self, other: Symbol) -> bool:
        return self.index < self._key(other)

    def __le__(self, other: Symbol) -> bool:
        return self.index <= self._key(other)

    def __gt__(self, other: Symbol) -> bool:
        return self.index > self._key(other)

    def __ge__(self, other: Symbol) -> bool:
        return self.index >= self._key(other)

    def __repr__(self) -> str:
        return f"Symbol({self.name!r})"

    def __str__(self) -> str:
        return self.name


class SymbolPool:
    """Interns names into `Symbol`s.

    Interning is the only mutation. Matching only ever calls `lookup`, so a
    pool can be shared by traversals running on different threads once the
    stylesheet has been parsed.
    """

    __slots__ = ("_names", "_symbols")

    _names: list[str]
    _symbols: dict[str, Symbol]

    def __init__(self) -> None:
        self._names = []
        self._symbols = {}

    def intern(self, name: str) -> Symbol:
        symbol = self._symbols.get(name)
        if symbol is None:
            symbol = Symbol(self, len(self._names))
            self._names.append(name)
            self._symbols[name] = symbol
        return symbol

    def lookup(self, name: str | None) -> Symbol | None:
        """Return the symbol for `name` without interning it."""
        if name is None:
            return None
        return self._symbols.get(name)

    def name(self, symbol: Symbol) -> str:
        if symbol._pool is not self:
            raise ValueError(f"Symbol #{symbol.index} does not belong to this pool")
        return self._names[symbol.index]

    def __contains__(self, name: object) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"SymbolPool({len(self._names)} symbols)"
