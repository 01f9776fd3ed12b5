"""Read-only traversal wrapper over xml.etree elements for the lint passes."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Dict, Iterator, List, Optional

from services.lint.schema_data import MATHML_NAMESPACE
from utils.xml_utils import split_qname

_ATTRIBUTE_PREFIXES = {
    "http://www.w3.org/XML/1998/namespace": "xml",
    "http://www.w3.org/1999/xlink": "xlink",
}


class MathNode:
    """
    One element of a parsed document, with parent and sibling links.

    Exposes tag (lowercase local name), namespace, attributes, element
    children, own text and full text content. Built once per lint call
    by build_tree and never mutated afterwards.
    """

    __slots__ = ("element", "parent", "index", "children", "tag", "namespace", "attributes")

    def __init__(self, element: ET.Element, parent: Optional["MathNode"] = None, index: int = 0) -> None:
        self.element = element
        self.parent = parent
        self.index = index
        self.children: List[MathNode] = []
        namespace, local = split_qname(element.tag)
        self.namespace = namespace
        self.tag = local.lower()
        self.attributes = _normalize_attributes(element.attrib)

    def __repr__(self) -> str:
        return f"<MathNode {self.tag} children={len(self.children)}>"

    @property
    def is_foreign(self) -> bool:
        """True for elements in an explicit, non-MathML namespace."""
        return bool(self.namespace) and self.namespace != MATHML_NAMESPACE

    @property
    def text(self) -> str:
        """Text content of the element and all descendants."""
        return "".join(self.element.itertext())

    @property
    def stripped_text(self) -> str:
        return self.text.strip()

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    @property
    def next_sibling(self) -> Optional["MathNode"]:
        if self.parent is None:
            return None
        siblings = self.parent.children
        return siblings[self.index + 1] if self.index + 1 < len(siblings) else None

    @property
    def following_siblings(self) -> List["MathNode"]:
        if self.parent is None:
            return []
        return self.parent.children[self.index + 1:]

    @property
    def first_child(self) -> Optional["MathNode"]:
        return self.children[0] if self.children else None

    def ancestors(self) -> Iterator["MathNode"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def has_ancestor(self, tag: str) -> bool:
        return any(ancestor.tag == tag for ancestor in self.ancestors())

    def iter(self) -> Iterator["MathNode"]:
        """This node and every descendant, in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def descendants(self) -> Iterator["MathNode"]:
        iterator = self.iter()
        next(iterator)
        return iterator


def _normalize_attributes(attrib: Dict[str, str]) -> Dict[str, str]:
    normalized = {}
    for raw_name, value in attrib.items():
        namespace, local = split_qname(raw_name)
        prefix = _ATTRIBUTE_PREFIXES.get(namespace)
        name = f"{prefix}:{local}" if prefix else local
        normalized[name.lower()] = value
    return normalized


def build_tree(root: ET.Element) -> MathNode:
    """Wrap an ElementTree element and its subtree."""
    root_node = MathNode(root)
    stack = [root_node]
    while stack:
        node = stack.pop()
        for child in node.element:
            # Comments and processing instructions are not elements
            if not isinstance(child.tag, str):
                continue
            child_node = MathNode(child, node, len(node.children))
            node.children.append(child_node)
            stack.append(child_node)
    return root_node
