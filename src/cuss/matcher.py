# Tree traversal driver for the selector NFA
# Walks a node tree in pre-order with an explicit stack of NfaState
# snapshots, so every sibling starts from its parent's state.

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .parser import ParserOpts, parse_selector_list
from .selector import ComplexSelector
from .statemachine import NfaState
from .symbol import Symbol, SymbolPool

logger = logging.getLogger(__name__)

# (node, matched rule indices) in document order
MatchResult = list[tuple[Any, list[int]]]


class Matcher:
    """Matches a selector table against nodes.

    Nodes are duck-typed: they need `tag`, `id` (str or None), `classes`
    (iterable of str) and `children`. `parent` is only needed by
    `state_below`. Names are resolved with `SymbolPool.lookup`, never
    interned, so one `Matcher` can serve several traversals at once.
    """

    __slots__ = ("lowercase_tags", "pool", "selectors")

    selectors: Sequence[ComplexSelector]
    pool: SymbolPool
    lowercase_tags: bool

    def __init__(
        self,
        selectors: Sequence[ComplexSelector],
        pool: SymbolPool,
        *,
        lowercase_tags: bool = True,
    ) -> None:
        self.selectors = selectors
        self.pool = pool
        self.lowercase_tags = bool(lowercase_tags)

    def initial_state(self) -> NfaState:
        return NfaState.initial(self.selectors)

    def node_facts(self, node: Any) -> tuple[Symbol | None, Symbol | None, list[Symbol]]:
        """Return `(id, tag, classes)` symbols for `node`.

        Names missing from the pool cannot be required by any selector: an
        unknown id or tag becomes None and unknown classes are dropped.
        Classes come back ascending and de-duplicated.
        """
        pool = self.pool
        tag = node.tag.lower() if self.lowercase_tags else node.tag
        classes = {symbol for symbol in map(pool.lookup, node.classes) if symbol is not None}
        return pool.lookup(node.id), pool.lookup(tag), sorted(classes)

    def visit(self, state: NfaState, node: Any) -> tuple[list[int], NfaState]:
        """Visit `node` with its parent's `state`.

        Returns the indices of the rules matching `node` and the state to
        hand to its children.
        """
        sels = self.selectors
        id_, tag, classes = self.node_facts(node)
        final = state.step_element(sels, id_, tag, classes)
        matched = final.accepting_rules(sels)
        if matched:
            logger.debug("%r matched rules %s", node, matched)
        return matched, state.merge(final, sels)

    def state_below(self, node: Any) -> NfaState:
        """Return the state `node`'s children start from, visiting its ancestors first."""
        chain: list[Any] = []
        current = node
        while current is not None:
            chain.append(current)
            current = getattr(current, "parent", None)
        state = self.initial_state()
        for ancestor in reversed(chain):
            _, state = self.visit(state, ancestor)
        return state

    def match_tree(self, root: Any, *, include_root: bool = True, state: NfaState | None = None) -> MatchResult:
        """Match every node under `root` in pre-order.

        `state` is the state `root` is visited with (the initial state by
        default). With `include_root=False` the root is not visited and its
        children are visited with `state` directly.
        """
        if state is None:
            state = self.initial_state()
        results: MatchResult = []
        # Each entry carries the state its node is visited with; siblings
        # share their parent's snapshot.
        stack: list[tuple[Any, NfaState]] = []
        if include_root:
            stack.append((root, state))
        else:
            stack.extend((child, state) for child in reversed(root.children))
        while stack:
            node, parent_state = stack.pop()
            matched, child_state = self.visit(parent_state, node)
            results.append((node, matched))
            if node.children:
                stack.extend((child, child_state) for child in reversed(node.children))
        return results


def match_tree(
    root: Any,
    selectors: Sequence[ComplexSelector],
    pool: SymbolPool,
    *,
    include_root: bool = True,
    lowercase_tags: bool = True,
) -> MatchResult:
    """Match `selectors` against every node of the tree rooted at `root`."""
    return Matcher(selectors, pool, lowercase_tags=lowercase_tags).match_tree(root, include_root=include_root)


def _selector_matcher(selector_string: str, lowercase_tags: bool) -> Matcher:
    pool = SymbolPool()
    opts = ParserOpts(lowercase_tags=lowercase_tags)
    return Matcher(parse_selector_list(selector_string, pool, opts=opts), pool, lowercase_tags=lowercase_tags)


def query(root: Any, selector_string: str, *, lowercase_tags: bool = True) -> list[Any]:
    """
    Query the tree under root, returning all matching nodes.

    Searches descendants of root, not including root itself (matching browser
    behavior for querySelectorAll). Ancestors of root, and root itself, still
    count towards descendant and child combinators.

    Args:
        root: The root node to search from
        selector_string: A CSS selector string
        lowercase_tags: Compare tag names case-insensitively

    Returns:
        A list of matching nodes in document order
    """
    matcher = _selector_matcher(selector_string, lowercase_tags)
    state = matcher.state_below(root)
    results = matcher.match_tree(root, include_root=False, state=state)
    return [node for node, matched in results if matched]


def matches(node: Any, selector_string: str, *, lowercase_tags: bool = True) -> bool:
    """
    Check if a node matches a CSS selector, taking its ancestors into account.

    Args:
        node: The node to check
        selector_string: A CSS selector string
        lowercase_tags: Compare tag names case-insensitively

    Returns:
        True if the node matches, False otherwise
    """
    matcher = _selector_matcher(selector_string, lowercase_tags)
    parent = getattr(node, "parent", None)
    state = matcher.state_below(parent) if parent is not None else matcher.initial_state()
    matched, _ = matcher.visit(state, node)
    return bool(matched)
