# Compiled selector model
# A stylesheet's selectors end up as a flat tuple of ComplexSelector; the
# index into that tuple is the rule identity used by the matching engine.

from __future__ import annotations

import enum
from collections.abc import Iterable

from .symbol import Symbol


class Combinator(enum.Enum):
    DESCENDANT = " "
    CHILD = ">"


class TypeSelector:
    """Either `Ident(tag)` or `Universal` (`*`)."""

    __slots__ = ("tag",)

    tag: Symbol | None

    def __init__(self, tag: Symbol | None = None) -> None:
        self.tag = tag

    @classmethod
    def ident(cls, tag: Symbol) -> TypeSelector:
        return cls(tag)

    @classmethod
    def universal(cls) -> TypeSelector:
        return cls(None)

    @property
    def is_universal(self) -> bool:
        return self.tag is None

    def accepts(self, tag: Symbol | None) -> bool:
        return self.tag is None or self.tag == tag

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeSelector):
            return NotImplemented
        return self.tag == other.tag

    def __hash__(self) -> int:
        return hash(("TypeSelector", self.tag))

    def __repr__(self) -> str:
        if self.tag is None:
            return "TypeSelector.universal()"
        return f"TypeSelector.ident({self.tag!r})"


class CompoundSelector:
    """The id, type and class requirements that must hold on a single node."""

    __slots__ = ("class_selectors", "id_selector", "type_selector")

    id_selector: Symbol | None
    type_selector: TypeSelector | None
    class_selectors: tuple[Symbol, ...]

    def __init__(
        self,
        id_selector: Symbol | None = None,
        type_selector: TypeSelector | None = None,
        class_selectors: Iterable[Symbol] = (),
    ) -> None:
        self.id_selector = id_selector
        self.type_selector = type_selector
        # Matching walks element classes and required classes in lockstep, so
        # the required ones must be ascending and unique.
        self.class_selectors = tuple(sorted(set(class_selectors)))

    def is_empty(self) -> bool:
        return self.id_selector is None and self.type_selector is None and not self.class_selectors

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompoundSelector):
            return NotImplemented
        return (
            self.id_selector == other.id_selector
            and self.type_selector == other.type_selector
            and self.class_selectors == other.class_selectors
        )

    def __hash__(self) -> int:
        return hash((self.id_selector, self.type_selector, self.class_selectors))

    def __repr__(self) -> str:
        fields: list[str] = []
        if self.id_selector is not None:
            fields.append(f"id={self.id_selector!r}")
        if self.type_selector is not None:
            fields.append(f"type={self.type_selector!r}")
        if self.class_selectors:
            fields.append(f"classes={list(self.class_selectors)!r}")
        return f"CompoundSelector({', '.join(fields)})"


class ComplexSelector:
    """A chain `first comb1 sel1 comb2 sel2 ...` of compound selectors."""

    __slots__ = ("first", "tail")

    first: CompoundSelector
    tail: tuple[tuple[Combinator, CompoundSelector], ...]

    def __init__(
        self,
        first: CompoundSelector,
        tail: Iterable[tuple[Combinator, CompoundSelector]] = (),
    ) -> None:
        self.first = first
        self.tail = tuple(tail)

    def compound(self, sel_ix: int) -> CompoundSelector:
        """Return the compound selector at position `sel_ix` of the chain."""
        if sel_ix == 0:
            return self.first
        return self.tail[sel_ix - 1][1]

    def combinator_before(self, sel_ix: int) -> Combinator | None:
        """Return the combinator preceding position `sel_ix`, or None at the start."""
        if sel_ix == 0:
            return None
        return self.tail[sel_ix - 1][0]

    def __len__(self) -> int:
        return len(self.tail) + 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComplexSelector):
            return NotImplemented
        return self.first == other.first and self.tail == other.tail

    def __hash__(self) -> int:
        return hash((self.first, self.tail))

    def __repr__(self) -> str:
        return f"ComplexSelector({self.first!r}, {list(self.tail)!r})"
