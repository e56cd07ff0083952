"""
Navigation of schema.org microdata embedded in HTML.

A Scope is a read-only view over an element of a parsed BeautifulSoup document.
Lookups walk all descendants (not only direct children) in document order, so
nested items such as a rating inside an offer are reachable from the outer
scope. Nothing is cached; every call walks the subtree again.
"""

from collections.abc import Iterator

from bs4 import BeautifulSoup, Tag


class Scope:
    """An ``itemscope`` region (or any element) of a parsed document."""

    __slots__ = ("_node",)

    def __init__(self, node: Tag):
        self._node = node

    def __repr__(self) -> str:
        return f"Scope(<{self._node.name} itemtype={self._node.get('itemtype')!r}>)"

    @classmethod
    def find(cls, root: BeautifulSoup | Tag, item_type: str) -> "Scope | None":
        """Find the first descendant of ``root`` whose ``itemtype`` is ``item_type``."""
        return cls(root).select_type(item_type)

    @property
    def item_type(self) -> str | None:
        """The ``itemtype`` attribute of this scope's element, if any."""
        value = self._node.get("itemtype")
        return str(value) if value is not None else None

    def _descendants_with(self, key: str, value: str) -> Iterator[Tag]:
        for node in self._node.descendants:
            if isinstance(node, Tag) and _attribute_matches(node, key, value):
                yield node

    def select_types(self, item_type: str) -> Iterator["Scope"]:
        """Lazily yield descendant scopes whose ``itemtype`` equals ``item_type``."""
        return (Scope(node) for node in self._descendants_with("itemtype", item_type))

    def select_type(self, item_type: str) -> "Scope | None":
        return next(self.select_types(item_type), None)

    def select_props(self, prop: str) -> Iterator["Scope"]:
        """Lazily yield descendant scopes carrying ``itemprop=prop``."""
        return (Scope(node) for node in self._descendants_with("itemprop", prop))

    def select_prop(self, prop: str) -> "Scope | None":
        return next(self.select_props(prop), None)

    def get_values(self, prop: str) -> Iterator[str]:
        """
        Lazily yield the values of descendant properties named ``prop``.

        A property's value is its ``content`` attribute when present, otherwise
        the concatenated text of the element.
        """
        return (_node_value(node) for node in self._descendants_with("itemprop", prop))

    def get_value(self, prop: str) -> str | None:
        return next(self.get_values(prop), None)

    def select_first(self, selector: str) -> "Scope | None":
        """Narrow to the first descendant matching a CSS selector."""
        node = self._node.select_one(selector)
        return Scope(node) if node is not None else None


def _attribute_matches(node: Tag, key: str, value: str) -> bool:
    attribute = node.get(key)
    if attribute is None:
        return False
    if isinstance(attribute, list):
        return value in attribute
    # itemprop may list several names separated by whitespace
    return attribute == value or value in attribute.split()


def _node_value(node: Tag) -> str:
    content = node.get("content")
    if content is not None:
        return str(content).strip()
    return node.get_text().strip()
