"""
Flat XML encoding used by the legacy gateway API.

Documents look like ``<xml><key>value</key>...</xml>``, one element per
parameter and no nesting.
"""

import xml.etree.ElementTree as ET
from typing import Any, Dict, Mapping, Union

from ..exceptions import DecodeError
from .canonical import stringify_value

ROOT_TAG = "xml"


def dict_to_xml(params: Mapping[str, Any]) -> str:
    """
    Serialize a flat mapping to an XML document string.

    Args:
        params: Parameters to serialize, values are stringified

    Returns:
        XML string with one child element per key
    """
    root = ET.Element(ROOT_TAG)
    for key, value in params.items():
        child = ET.SubElement(root, key)
        child.text = stringify_value(value)
    return ET.tostring(root, encoding="unicode")


def xml_to_dict(content: Union[str, bytes]) -> Dict[str, str]:
    """
    Parse a flat XML document into a dict of element text.

    Raises:
        DecodeError: If the content is not well-formed XML
    """
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise DecodeError(
            f"Failed to parse XML response: {str(e)}",
            response_data=content
        ) from e
    return {child.tag: (child.text or "") for child in root}
