"""Incremental NFA for matching selector rules during a pre-order traversal.

Each rule is a chain of compound selectors. A `Cursor` marks how far one rule
has got along its chain; an `NfaState` is the set of every live cursor at one
point of the traversal. Visiting a node narrows the parent's state through
`step_id`, `step_tag`, `step_class` (once per element class, ascending) and
`end_class`, leaving only cursors whose compound selector matched the node.
Those cursors report matched rules through `accepting_rule`, and
`merge` folds them back into the parent's state to give the state for the
node's children.

Every operation returns a new value. Non-matches are represented by absence:
a cursor that fails a step is dropped, never raised.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator, Sequence

from .selector import Combinator, ComplexSelector, CompoundSelector
from .symbol import Symbol


class SelKind(enum.IntEnum):
    INIT = 0
    TAG = 1
    CLASS = 2
    FINAL = 3


class SelState:
    """Progress through one compound selector on one node.

    `INIT -> TAG -> CLASS(n) -> FINAL`, where `n` counts how many of the
    compound selector's required classes have been seen so far.
    """

    __slots__ = ("class_ix", "kind")

    kind: SelKind
    class_ix: int

    def __init__(self, kind: SelKind, class_ix: int = 0) -> None:
        self.kind = kind
        self.class_ix = class_ix

    @classmethod
    def klass(cls, class_ix: int) -> SelState:
        return cls(SelKind.CLASS, class_ix)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelState):
            return NotImplemented
        return self.kind == other.kind and self.class_ix == other.class_ix

    def __hash__(self) -> int:
        return hash((self.kind, self.class_ix))

    def __repr__(self) -> str:
        if self.kind == SelKind.CLASS:
            return f"Class({self.class_ix})"
        return self.kind.name.capitalize()


INIT: SelState = SelState(SelKind.INIT)
TAG: SelState = SelState(SelKind.TAG)
FINAL: SelState = SelState(SelKind.FINAL)


class Cursor:
    """Position of one rule within its selector chain."""

    __slots__ = ("rule_ix", "sel_ix", "sel_state")

    rule_ix: int
    sel_ix: int
    sel_state: SelState

    def __init__(self, rule_ix: int, sel_ix: int = 0, sel_state: SelState = INIT) -> None:
        self.rule_ix = rule_ix
        self.sel_ix = sel_ix
        self.sel_state = sel_state

    def rule_sel(self) -> tuple[int, int]:
        return (self.rule_ix, self.sel_ix)

    def rule_sel_next(self) -> tuple[int, int]:
        return (self.rule_ix, self.sel_ix + 1)

    def _with_state(self, sel_state: SelState) -> Cursor:
        return Cursor(self.rule_ix, self.sel_ix, sel_state)

    def get_sel(self, sels: Sequence[ComplexSelector]) -> CompoundSelector:
        return sels[self.rule_ix].compound(self.sel_ix)

    def step_id(self, sels: Sequence[ComplexSelector], id_: Symbol | None) -> Cursor | None:
        sel = self.get_sel(sels)
        if sel.id_selector is not None and sel.id_selector != id_:
            return None
        return self._with_state(TAG)

    def step_tag(self, sels: Sequence[ComplexSelector], tag: Symbol | None) -> Cursor | None:
        # A tag of None stands for a name no selector mentions.
        sel = self.get_sel(sels)
        if sel.type_selector is not None and not sel.type_selector.accepts(tag):
            return None
        return self._with_state(SelState.klass(0))

    def step_class(self, sels: Sequence[ComplexSelector], class_: Symbol) -> Cursor | None:
        """Feed one element class; classes must arrive in ascending order.

        This is a merge-intersection of the element's classes against the
        selector's required classes. A class greater than the next required
        one means the required class was skipped and can no longer appear.
        """
        state = self.sel_state
        if state.kind != SelKind.CLASS:
            return None
        class_ix = state.class_ix
        required = self.get_sel(sels).class_selectors
        if class_ix == len(required):
            return self
        needed = required[class_ix]
        if class_ < needed:
            return self
        if class_ > needed:
            return None
        return self._with_state(SelState.klass(class_ix + 1))

    def end_class(self, sels: Sequence[ComplexSelector]) -> Cursor | None:
        state = self.sel_state
        if state.kind == SelKind.CLASS and state.class_ix == len(self.get_sel(sels).class_selectors):
            return self._with_state(FINAL)
        return None

    def accepting_rule(self, sels: Sequence[ComplexSelector]) -> int | None:
        """Return `rule_ix` when this cursor sits on the last compound selector of its rule."""
        if self.sel_ix == len(sels[self.rule_ix].tail):
            return self.rule_ix
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cursor):
            return NotImplemented
        return (
            self.rule_ix == other.rule_ix and self.sel_ix == other.sel_ix and self.sel_state == other.sel_state
        )

    def __hash__(self) -> int:
        return hash((self.rule_ix, self.sel_ix, self.sel_state))

    def __repr__(self) -> str:
        return f"Cursor(rule={self.rule_ix}, sel={self.sel_ix}, {self.sel_state!r})"


class NfaState:
    """All live cursors at one traversal point, sorted by `(rule_ix, sel_ix)`.

    There is at most one cursor per key. `merge` depends on that ordering.
    """

    __slots__ = ("_cursors",)

    _cursors: tuple[Cursor, ...]

    def __init__(self, cursors: Iterable[Cursor] = ()) -> None:
        self._cursors = tuple(cursors)

    @classmethod
    def initial(cls, sels: Sequence[ComplexSelector]) -> NfaState:
        return cls(Cursor(rule_ix) for rule_ix in range(len(sels)))

    def cursors(self) -> tuple[Cursor, ...]:
        return self._cursors

    def step_id(self, sels: Sequence[ComplexSelector], id_: Symbol | None) -> NfaState:
        return NfaState(c for c in (cur.step_id(sels, id_) for cur in self._cursors) if c is not None)

    def step_tag(self, sels: Sequence[ComplexSelector], tag: Symbol | None) -> NfaState:
        return NfaState(c for c in (cur.step_tag(sels, tag) for cur in self._cursors) if c is not None)

    def step_class(self, sels: Sequence[ComplexSelector], class_: Symbol) -> NfaState:
        return NfaState(c for c in (cur.step_class(sels, class_) for cur in self._cursors) if c is not None)

    def end_class(self, sels: Sequence[ComplexSelector]) -> NfaState:
        return NfaState(c for c in (cur.end_class(sels) for cur in self._cursors) if c is not None)

    def step_element(
        self,
        sels: Sequence[ComplexSelector],
        id_: Symbol | None,
        tag: Symbol | None,
        classes: Iterable[Symbol],
    ) -> NfaState:
        """Run one node's facts through the state, leaving only `Final` cursors.

        `classes` must be ascending and free of duplicates.
        """
        state = self.step_id(sels, id_).step_tag(sels, tag)
        for class_ in classes:
            if not state._cursors:
                break
            state = state.step_class(sels, class_)
        return state.end_class(sels)

    def accepting_rules(self, sels: Sequence[ComplexSelector]) -> list[int]:
        rules: list[int] = []
        for cursor in self._cursors:
            rule_ix = cursor.accepting_rule(sels)
            if rule_ix is not None:
                rules.append(rule_ix)
        return rules

    def merge(self, tip: NfaState, sels: Sequence[ComplexSelector]) -> NfaState:
        """Combine this (base) state with the `Final` cursors of the node just visited.

        Tip cursors advance to the next compound selector of their rule. A
        base cursor survives into the children's state only when the
        combinator in front of its compound selector is a descendant
        combinator (or nothing precedes it); a child combinator was good for
        exactly one level. Every emitted cursor starts over at `Init`.
        """
        base = self._cursors
        tips = tip._cursors
        result: list[Cursor] = []
        i = 0
        j = 0
        while i < len(base) or j < len(tips):
            if j == len(tips):
                rule_ix, sel_ix = base[i].rule_sel()
                i += 1
                is_tip = False
            elif i == len(base):
                rule_ix, sel_ix = tips[j].rule_sel_next()
                j += 1
                is_tip = True
            else:
                base_key = base[i].rule_sel()
                tip_key = tips[j].rule_sel_next()
                if base_key < tip_key:
                    rule_ix, sel_ix = base_key
                    i += 1
                    is_tip = False
                elif base_key == tip_key:
                    rule_ix, sel_ix = tip_key
                    i += 1
                    j += 1
                    is_tip = True
                else:
                    rule_ix, sel_ix = tip_key
                    j += 1
                    is_tip = True

            rule = sels[rule_ix]
            if sel_ix >= len(rule.tail) + 1:
                continue
            if is_tip or sel_ix == 0 or rule.combinator_before(sel_ix) == Combinator.DESCENDANT:
                result.append(Cursor(rule_ix, sel_ix, INIT))
        return NfaState(result)

    def __len__(self) -> int:
        return len(self._cursors)

    def __iter__(self) -> Iterator[Cursor]:
        return iter(self._cursors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NfaState):
            return NotImplemented
        return self._cursors == other._cursors

    def __hash__(self) -> int:
        return hash(self._cursors)

    def __repr__(self) -> str:
        return f"NfaState({list(self._cursors)!r})"
