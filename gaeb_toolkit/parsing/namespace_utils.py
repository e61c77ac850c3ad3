"""
Namespace-agnostic helpers for XML parsing.
GAEB DA XML puts every element in a versioned default namespace
(e.g. http://www.gaeb.de/GAEB_DA_XML/DA83/3.3), so lookups match on local names.
"""

import xml.etree.ElementTree as ET
from typing import Iterator, List, Optional


def local_name(tag: str) -> str:
    """Strip a ``{uri}`` prefix from a tag or attribute name."""
    return tag.split('}')[-1] if '}' in tag else tag


def namespace_uri(tag: str) -> str:
    """Return the ``uri`` part of a ``{uri}local`` tag, or an empty string."""
    if tag.startswith('{') and '}' in tag:
        return tag[1:tag.index('}')]
    return ""


def iter_local(elem: ET.Element, name: str) -> Iterator[ET.Element]:
    """Yield descendants (excluding ``elem`` itself) whose local name matches, in document order."""
    for node in elem.iter():
        if node is elem:
            continue
        if local_name(node.tag) == name:
            yield node


def find_local(elem: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    """Return the first descendant with the given local name, like a DOM ``querySelector``."""
    if elem is None:
        return None
    if local_name(elem.tag) == name:
        return elem
    return next(iter_local(elem, name), None)


def find_path(elem: Optional[ET.Element], names: List[str]) -> Optional[ET.Element]:
    """
    Resolve a descendant chain such as ``["OutlineText", "TextOutlTxt", "span"]``.

    Each step searches any depth below the previous match and the first
    complete chain in document order wins.
    """
    if elem is None:
        return None
    if not names:
        return elem
    head, rest = names[0], names[1:]
    for candidate in iter_local(elem, head):
        found = find_path(candidate, rest)
        if found is not None:
            return found
    return None


def element_text(elem: Optional[ET.Element]) -> str:
    """All text below ``elem`` with whitespace collapsed, like DOM ``textContent.trim()``."""
    if elem is None:
        return ""
    return " ".join("".join(elem.itertext()).split())


def get_attr_any(elem: ET.Element, candidate_attrs: List[str]) -> str:
    """
    Fetch attribute value by trying candidate names and localname matching.
    """
    for attr in candidate_attrs:
        if attr in elem.attrib and elem.attrib[attr]:
            return elem.attrib[attr]
    # Localname match (handles namespaced attributes)
    for attr_key, attr_val in elem.attrib.items():
        if local_name(attr_key) in candidate_attrs and attr_val:
            return attr_val
    return ""


def get_child_text_any(elem: Optional[ET.Element], candidate_tags: List[str]) -> str:
    """
    Return the text of the first non-empty descendant, trying tags in priority order.
    """
    if elem is None:
        return ""
    for tag in candidate_tags:
        for node in iter_local(elem, tag):
            text = element_text(node)
            if text:
                return text
    return ""


def children_excluding(elem: ET.Element, name: str, stop_at: str) -> Iterator[ET.Element]:
    """
    Yield descendants named ``name`` without descending into nested ``stop_at`` elements.

    Used to list the items owned by one BoQ category while leaving items of
    nested sub-categories to those sub-categories.
    """
    for child in elem:
        child_local = local_name(child.tag)
        if child_local == stop_at:
            continue
        if child_local == name:
            yield child
            continue
        yield from children_excluding(child, name, stop_at)
