"""Render nested mapping documents to XML using lxml.

Document convention:
    - keys starting with ATTRIBUTE_PREFIX ("@") are XML attributes
    - "@xmlns" and "@xmlns:<prefix>" declare namespaces on the element
    - TEXT_KEY ("#text") holds element text content
    - list values are repeated sibling elements
    - scalar values are elements whose text is the value
    - element names "<prefix>:<Name>" resolve through declared prefixes,
      unprefixed names take the in-scope default namespace
    - attribute names "<prefix>:<name>" resolve the same way; "xml:" is
      predefined and unprefixed attributes have no namespace
"""

import logging
from typing import Any, Dict, Mapping, Optional

from lxml import etree

from .exceptions import SerializationError

logger = logging.getLogger(__name__)

ATTRIBUTE_PREFIX = "@"
TEXT_KEY = "#text"
XMLNS = "xmlns"
XML_NS = "http://www.w3.org/XML/1998/namespace"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _split_namespaces(body: Mapping[str, Any]) -> Dict[Optional[str], str]:
    """Collect namespace declarations from an element body.

    Returns:
        Namespace declarations local to this element (prefix -> URI)
    """
    local: Dict[Optional[str], str] = {}
    for key, value in body.items():
        if key == ATTRIBUTE_PREFIX + XMLNS:
            local[None] = value
        elif key.startswith(ATTRIBUTE_PREFIX + XMLNS + ":"):
            local[key.split(":", 1)[1]] = value
    return local


def _qualify(name: str, namespaces: Dict[Optional[str], str]) -> str:
    """Resolve an element name against in-scope namespaces to Clark notation."""
    if ":" in name:
        prefix, local_name = name.split(":", 1)
        if prefix not in namespaces:
            raise SerializationError(
                f"Undeclared namespace prefix '{prefix}' on element '{name}'"
            )
        return f"{{{namespaces[prefix]}}}{local_name}"

    default_ns = namespaces.get(None)
    return f"{{{default_ns}}}{name}" if default_ns else name


def _qualify_attribute(name: str, namespaces: Dict[Optional[str], str]) -> str:
    """Resolve an attribute name to Clark notation.

    Unprefixed attributes are never in the default namespace. The xml prefix
    is always bound.
    """
    if ":" not in name:
        return name

    prefix, local_name = name.split(":", 1)
    if prefix == "xml":
        return f"{{{XML_NS}}}{local_name}"
    if prefix not in namespaces:
        raise SerializationError(
            f"Undeclared namespace prefix '{prefix}' on attribute '{name}'"
        )
    return f"{{{namespaces[prefix]}}}{local_name}"


def _build_element(
    parent: Optional[etree._Element],
    name: str,
    body: Any,
    namespaces: Dict[Optional[str], str],
) -> etree._Element:
    local_ns: Dict[Optional[str], str] = {}
    if isinstance(body, Mapping):
        local_ns = _split_namespaces(body)
    scope = {**namespaces, **local_ns}

    tag = _qualify(name, scope)
    if parent is None:
        element = etree.Element(tag, nsmap=local_ns or None)
    else:
        element = etree.SubElement(parent, tag, nsmap=local_ns or None)

    if not isinstance(body, Mapping):
        if body is not None:
            element.text = _format_value(body)
        return element

    for key, value in body.items():
        if key.startswith(ATTRIBUTE_PREFIX):
            attribute = key[len(ATTRIBUTE_PREFIX):]
            if attribute == XMLNS or attribute.startswith(XMLNS + ":"):
                continue
            element.set(_qualify_attribute(attribute, scope), _format_value(value))
        elif key == TEXT_KEY:
            element.text = _format_value(value)
        elif isinstance(value, (list, tuple)):
            for item in value:
                _build_element(element, key, item, scope)
        else:
            _build_element(element, key, value, scope)

    return element


def build_tree(document: Mapping[str, Any]) -> etree._Element:
    """Convert a mapping document into an lxml element tree.

    Args:
        document: Mapping with exactly one root element

    Returns:
        Root lxml element

    Raises:
        SerializationError: If the document does not have exactly one root
    """
    if len(document) != 1:
        raise SerializationError(
            f"Document must have exactly one root element, got {len(document)}"
        )

    (root_name, root_body), = document.items()
    return _build_element(None, root_name, root_body, {})


def render(document: Mapping[str, Any], pretty_print: bool = True) -> str:
    """Render a mapping document to UTF-8 XML text with an XML declaration.

    Args:
        document: Mapping with exactly one root element
        pretty_print: Indent the output (default: True)

    Returns:
        XML document as a string

    Example:
        >>> xml = render({"Root": {"@a": "1", "Child": "text"}}, pretty_print=False)
        >>> xml.endswith('<Root a="1"><Child>text</Child></Root>')
        True
    """
    root = build_tree(document)
    xml_bytes = etree.tostring(
        root,
        xml_declaration=True,
        encoding="UTF-8",
        pretty_print=pretty_print,
    )
    logger.debug(f"Rendered XML document: {len(xml_bytes)} bytes")
    return xml_bytes.decode("utf-8")
