"""Stylesheet model: style rules, their declarations and values."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from .selector import ComplexSelector
from .symbol import Symbol, SymbolPool


class Value:
    """A single component value of a declaration."""

    __slots__ = ("args", "kind", "unit", "value")

    STRING: str = "string"  # "text"
    NUMBER: str = "number"  # 1.5
    PERCENT: str = "percent"  # 50%
    DIMENSION: str = "dimension"  # 10px
    COLOR: str = "color"  # #rrggbb
    IDENT: str = "ident"  # auto
    FUNCTION: str = "function"  # rgb(1, 2, 3)

    kind: str
    value: str | float | int | Symbol
    unit: Symbol | None
    args: tuple[Value, ...]

    def __init__(
        self,
        kind: str,
        value: str | float | int | Symbol,
        unit: Symbol | None = None,
        args: Iterable[Value] = (),
    ) -> None:
        self.kind = kind
        self.value = value
        self.unit = unit
        self.args = tuple(args)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.unit == other.unit
            and self.args == other.args
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.value, self.unit, self.args))

    def __repr__(self) -> str:
        parts = [f"Value({self.kind!r}, {self.value!r}"]
        if self.unit is not None:
            parts.append(f", unit={self.unit!r}")
        if self.args:
            parts.append(f", args={list(self.args)!r}")
        parts.append(")")
        return "".join(parts)


class Declaration:
    __slots__ = ("name", "values")

    name: Symbol
    values: tuple[Value, ...]

    def __init__(self, name: Symbol, values: Iterable[Value]) -> None:
        self.name = name
        self.values = tuple(values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Declaration):
            return NotImplemented
        return self.name == other.name and self.values == other.values

    def __hash__(self) -> int:
        return hash((self.name, self.values))

    def __repr__(self) -> str:
        return f"Declaration({self.name!r}, {list(self.values)!r})"


class Rule:
    """A style rule: a selector list and a block of declarations."""

    __slots__ = ("declarations", "selectors")

    selectors: tuple[ComplexSelector, ...]
    declarations: tuple[Declaration, ...]

    def __init__(self, selectors: Iterable[ComplexSelector], declarations: Iterable[Declaration] = ()) -> None:
        self.selectors = tuple(selectors)
        self.declarations = tuple(declarations)

    def __repr__(self) -> str:
        return f"Rule({list(self.selectors)!r}, {list(self.declarations)!r})"


class SelectorTable:
    """The flat selector table handed to the matching engine.

    `selectors[rule_ix]` is one complex selector; `owners[rule_ix]` is the
    index of the style rule it was written in.
    """

    __slots__ = ("owners", "selectors")

    selectors: tuple[ComplexSelector, ...]
    owners: tuple[int, ...]

    def __init__(self, selectors: Iterable[ComplexSelector], owners: Iterable[int]) -> None:
        self.selectors = tuple(selectors)
        self.owners = tuple(owners)
        if len(self.selectors) != len(self.owners):
            raise ValueError("Every selector needs exactly one owning rule")

    def __len__(self) -> int:
        return len(self.selectors)

    def __getitem__(self, rule_ix: int) -> ComplexSelector:
        return self.selectors[rule_ix]

    def __iter__(self) -> Iterator[ComplexSelector]:
        return iter(self.selectors)


class Stylesheet:
    __slots__ = ("pool", "rules")

    rules: tuple[Rule, ...]
    pool: SymbolPool

    def __init__(self, rules: Sequence[Rule], pool: SymbolPool) -> None:
        self.rules = tuple(rules)
        self.pool = pool

    def selector_table(self) -> SelectorTable:
        selectors: list[ComplexSelector] = []
        owners: list[int] = []
        for owner, rule in enumerate(self.rules):
            for selector in rule.selectors:
                selectors.append(selector)
                owners.append(owner)
        return SelectorTable(selectors, owners)

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"Stylesheet({list(self.rules)!r})"
