"""XML helper utilities."""
from __future__ import annotations

import re
from typing import Optional, Tuple

# First start tag of a document, skipping declarations, comments and doctype
_ROOT_START_TAG = re.compile(
    r"^\s*(?:<\?.*?\?>\s*|<!--.*?-->\s*|<!DOCTYPE[^>]*>\s*)*<([A-Za-z_][\w.\-]*(?::[\w.\-]+)?)([^>]*)>",
    re.DOTALL,
)


def split_qname(tag: str) -> Tuple[str, str]:
    """Split an ElementTree '{uri}local' name into (uri, local)."""
    if tag.startswith("{"):
        uri, _, local = tag[1:].partition("}")
        return uri, local
    return "", tag


def find_root_start_tag(source: str) -> Optional[re.Match]:
    """Match the root element's start tag; group 1 is the raw name, group 2 its attributes."""
    return _ROOT_START_TAG.match(source)


def root_tag_name(source: str) -> str:
    """Raw root element name as written, prefix included."""
    match = find_root_start_tag(source)
    return match.group(1) if match else ""


def declares_namespace_prefix(attribute_text: str, prefix: str) -> bool:
    return re.search(rf"\bxmlns:{re.escape(prefix)}\s*=", attribute_text) is not None
