from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from .matcher import matches, query


class ElementNode:
    __slots__ = ("attrs", "children", "parent", "tag")

    tag: str
    parent: ElementNode | None
    attrs: dict[str, str]
    children: list[ElementNode]

    def __init__(self, tag: str, attrs: dict[str, str] | None = None) -> None:
        self.tag = tag
        self.parent = None
        self.attrs = dict(attrs) if attrs is not None else {}
        self.children = []

    @property
    def id(self) -> str | None:
        return self.attrs.get("id") or None

    @property
    def classes(self) -> list[str]:
        """Distinct class names from the `class` attribute, in source order."""
        class_attr = self.attrs.get("class", "")
        if not class_attr:
            return []
        return list(dict.fromkeys(class_attr.split()))

    def append_child(self, node: ElementNode) -> None:
        self.children.append(node)
        node.parent = self

    def remove_child(self, node: ElementNode) -> None:
        self.children.remove(node)
        node.parent = None

    def insert_before(self, node: ElementNode, reference_node: ElementNode | None) -> None:
        if reference_node is None:
            self.append_child(node)
            return
        index = self.children.index(reference_node)
        self.children.insert(index, node)
        node.parent = self

    def has_child_nodes(self) -> bool:
        return bool(self.children)

    def iter_tree(self) -> Iterator[ElementNode]:
        """Yield this node and its descendants in pre-order."""
        stack: list[ElementNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def query(self, selector: str, *, lowercase_tags: bool = True) -> list[ElementNode]:
        """
        Query this subtree using a CSS selector.

        Args:
            selector: A CSS selector string
            lowercase_tags: Compare tag names case-insensitively

        Returns:
            A list of matching nodes, in document order, excluding this node

        Raises:
            CssSyntaxError: If the selector is invalid
        """
        result: list[ElementNode] = query(self, selector, lowercase_tags=lowercase_tags)
        return result

    def matches(self, selector: str, *, lowercase_tags: bool = True) -> bool:
        """Check whether this node matches `selector`, given its ancestors."""
        return matches(self, selector, lowercase_tags=lowercase_tags)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"tag": self.tag}
        if self.attrs:
            data["attrs"] = dict(self.attrs)
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ElementNode:
        """Build a tree from `{"tag": ..., "attrs": {...}, "children": [...]}`."""
        if not isinstance(data, dict) or not isinstance(data.get("tag"), str):
            raise ValueError(f"Expected an object with a string 'tag', got {data!r}")
        attrs = data.get("attrs")
        if attrs is not None and (
            not isinstance(attrs, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in attrs.items())
        ):
            raise ValueError(f"Expected 'attrs' to map strings to strings, got {attrs!r}")
        children = data.get("children", ())
        if not isinstance(children, (list, tuple)):
            raise ValueError(f"Expected 'children' to be a list, got {children!r}")
        node = cls(data["tag"], attrs)
        for child in children:
            node.append_child(cls.from_dict(child))
        return node

    def __repr__(self) -> str:
        parts = [f"<{self.tag}"]
        if self.id:
            parts.append(f" id={self.id!r}")
        if self.classes:
            parts.append(f" class={' '.join(self.classes)!r}")
        parts.append(">")
        return "".join(parts)
