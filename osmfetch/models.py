"""
OSM element models

Pydantic models for the OSM JSON element format: ways, nodes and the
element collection returned by a fetch.
"""

from typing import Annotated, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


ElementType = Literal["way", "node"]


# ============================================================
# Elements
# ============================================================

class BaseElement(BaseModel):
    """Properties shared by every OSM element"""
    model_config = ConfigDict(frozen=True)
    
    id: int
    changeset: Optional[int] = None
    timestamp: Optional[str] = None  # Left as the API sent it
    version: Optional[int] = None
    user: Optional[str] = None
    uid: Optional[int] = None
    tags: Dict[str, str] = Field(default_factory=dict)


class Way(BaseElement):
    """Linear feature or area boundary"""
    type: Literal["way"] = "way"
    nodes: List[Optional[int]] = Field(default_factory=list)  # Node refs in path order, None where unparseable


class Node(BaseElement):
    """Point in space"""
    type: Literal["node"] = "node"
    lat: Optional[float] = None
    lon: Optional[float] = None


OSMElement = Annotated[Union[Way, Node], Field(discriminator="type")]


# ============================================================
# Collection
# ============================================================

class ElementCollection(BaseModel):
    """Result of one fetch: mixed ways and nodes"""
    model_config = ConfigDict(frozen=True)
    
    elements: List[OSMElement] = Field(default_factory=list)
    
    def ways(self) -> List[Way]:
        return [e for e in self.elements if e.type == "way"]
    
    def nodes(self) -> List[Node]:
        return [e for e in self.elements if e.type == "node"]
    
    def last_of_type(self, element_type: ElementType) -> Optional[Union[Way, Node]]:
        """Last element of the given type, or None. Later entries win ties."""
        match = None
        for element in self.elements:
            if element.type == element_type:
                match = element
        return match
    
    def missing_node_refs(self) -> List[int]:
        """Way node refs that have no matching node in the collection"""
        present = {n.id for n in self.nodes()}
        missing = []
        for way in self.ways():
            for ref in way.nodes:
                if ref is not None and ref not in present and ref not in missing:
                    missing.append(ref)
        return missing
