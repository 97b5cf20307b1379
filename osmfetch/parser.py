"""
OSM XML parser

Parses OSM API v0.6 XML documents into Way and Node records
"""

import math
import xml.etree.ElementTree as ET
from typing import Dict, Optional, Union
from loguru import logger

from .exceptions import ElementDecodeError
from .models import ElementCollection, Node, Way


Number = Union[int, float]


def get_string_attribute(element: ET.Element, name: str) -> Optional[str]:
    return element.attrib.get(name)


def get_number_attribute(element: ET.Element, name: str, integer: bool = True) -> Optional[Number]:
    """
    Read a numeric attribute
    
    Missing attributes and values that don't parse as the requested type
    both come back as None, so a real 0 stays distinguishable.

    Parsing is strict: the whole value must be a number of the requested
    type. "3.14" or "42abc" read as integers give None, not a truncated
    3 or a prefix 42.

    Args:
        element: XML element carrying the attribute
        name: Attribute name
        integer: Parse with int() if True, float() otherwise
        
    Returns:
        Parsed number or None
    """
    raw = element.attrib.get(name)
    if raw is None:
        return None
    try:
        value = int(raw) if integer else float(raw)
    except ValueError:
        return None
    if not integer and not math.isfinite(value):
        return None
    return value


def convert_tags(element: ET.Element) -> Dict[str, str]:
    """Collect <tag k v> children into a dict (last key wins)"""
    tags = {}
    for tag in element.findall("tag"):
        key = tag.attrib.get("k")
        if key is None:
            logger.debug(f"Skipping <tag> without key on <{element.tag} id={element.attrib.get('id')}>")
            continue
        tags[key] = tag.attrib.get("v", "")
    return tags


class OSMXMLParser:
    """Parses OSM API XML responses"""
    
    @staticmethod
    def parse_xml(text: str) -> ET.Element:
        """Parse response text; ET.ParseError propagates for malformed XML"""
        return ET.fromstring(text)
    
    @staticmethod
    def _shared_properties(element: ET.Element) -> Dict:
        element_id = get_number_attribute(element, "id")
        if element_id is None:
            raise ElementDecodeError(
                element.tag,
                f"missing or non-numeric id {element.attrib.get('id')!r}"
            )
        return {
            "id": element_id,
            "changeset": get_number_attribute(element, "changeset"),
            "timestamp": get_string_attribute(element, "timestamp"),
            "version": get_number_attribute(element, "version"),
            "user": get_string_attribute(element, "user"),
            "uid": get_number_attribute(element, "uid"),
            "tags": convert_tags(element),
        }
    
    @staticmethod
    def convert_way(element: ET.Element) -> Way:
        """
        Decode a <way> element
        
        Node refs keep document order and length. A ref that isn't an
        integer stays in place as None.
        """
        properties = OSMXMLParser._shared_properties(element)
        refs = [get_number_attribute(nd, "ref") for nd in element.findall("nd")]
        return Way(nodes=refs, **properties)
    
    @staticmethod
    def convert_node(element: ET.Element) -> Node:
        """Decode a <node> element"""
        properties = OSMXMLParser._shared_properties(element)
        return Node(
            lat=get_number_attribute(element, "lat", integer=False),
            lon=get_number_attribute(element, "lon", integer=False),
            **properties
        )
    
    @staticmethod
    def convert_document(root: ET.Element) -> ElementCollection:
        """
        Decode every way and node in the document
        
        Elements are found at any depth. Ways come first, then nodes,
        each group in document order.
        
        Args:
            root: Parsed document root
            
        Returns:
            Unresolved element collection
        """
        ways = [OSMXMLParser.convert_way(e) for e in root.iter("way")]
        nodes = [OSMXMLParser.convert_node(e) for e in root.iter("node")]
        logger.debug(f"Decoded {len(ways)} ways and {len(nodes)} nodes")
        return ElementCollection(elements=ways + nodes)
