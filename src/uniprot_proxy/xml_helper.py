"""Minimal element navigation over parsed UniProt XML."""

import re
import xml.etree.ElementTree as ET
from typing import List, Optional

from .exceptions import AmbiguousElementError, DocumentParseError, ElementNotFoundError

# Start tag of the document element (declarations and comments start with <? or <!)
_ROOT_START_TAG = re.compile(rb"<[A-Za-z_][^>]*>")
_DEFAULT_NAMESPACE = re.compile(rb"\s+xmlns\s*=\s*([\"']).*?\1")


def strip_default_namespace(data: bytes) -> bytes:
    """
    Remove the ``xmlns="..."`` declaration from the document element.

    Tags can then be selected by their bare names. Prefixed declarations
    (``xmlns:xsi``) and nested elements are left untouched, so applying this
    twice gives the same bytes as applying it once.
    """
    match = _ROOT_START_TAG.search(data)
    if match is None:
        return data
    start_tag = _DEFAULT_NAMESPACE.sub(b"", match.group(0), count=1)
    return data[:match.start()] + start_tag + data[match.end():]


def parse_record(data: bytes) -> ET.Element:
    """
    Parse record bytes into an element tree.

    Returns:
        The document (root) element

    Raises:
        DocumentParseError: If the bytes are not well-formed XML
    """
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        raise DocumentParseError(f"Malformed UniProt XML: {e}") from e


def select_elements(element: ET.Element, tag: str) -> List[ET.Element]:
    """All direct children with the given tag, in document order."""
    return element.findall(tag)


def select_single_element(element: ET.Element, tag: str) -> ET.Element:
    """
    The one direct child with the given tag.

    Raises:
        ElementNotFoundError: No such child
        AmbiguousElementError: More than one such child
    """
    matches = element.findall(tag)
    if not matches:
        raise ElementNotFoundError(f"<{element.tag}> has no <{tag}> element")
    if len(matches) > 1:
        raise AmbiguousElementError(
            f"<{element.tag}> has {len(matches)} <{tag}> elements, expected one"
        )
    return matches[0]


def get_attribute(element: ET.Element, name: str, default: str = "") -> str:
    return element.get(name, default)


def get_text_content(element: Optional[ET.Element]) -> str:
    """Concatenated text of the element and all its descendants."""
    if element is None:
        return ""
    return "".join(element.itertext())
