"""
Main OSM element collector

Orchestrates fetch -> parse -> convert -> resolve
"""

from typing import Optional
from loguru import logger

from .config import FetcherConfig, get_config
from .exceptions import ElementNotFoundError
from .gateway import FetchGateway
from .models import ElementCollection, ElementType, Node, Way
from .parser import OSMXMLParser
from .resolver import NodeResolver


class OSMElementCollector:
    """
    Fetch OSM elements from the OSM API and resolve way node refs
    
    Usage:
        collector = OSMElementCollector()
        collection = asyncio.run(collector.fetch_way_set(34211254))
    """
    
    def __init__(self, http_client=None, config: Optional[FetcherConfig] = None):
        self.config = config or get_config()
        self.gateway = FetchGateway(http_client, base_url=self.config.api.base_url)
        self.parser = OSMXMLParser()
        self.resolver = NodeResolver(
            self.gateway,
            max_concurrency=self.config.max_concurrency,
            best_effort=self.config.best_effort,
            timeout=self.config.resolve_timeout,
        )
    
    async def fetch_collection(self, element_id: int, element_type: ElementType) -> ElementCollection:
        """
        Fetch one element document and return its resolved collection
        
        Args:
            element_id: OSM id
            element_type: "way" or "node"
            
        Returns:
            Resolved nodes followed by the document's own ways and nodes
        """
        logger.info(f"Fetching {element_type} {element_id}")
        text = await self.gateway.fetch(element_id, element_type)
        root = self.parser.parse_xml(text)
        collection = self.parser.convert_document(root)
        return await self.resolver.resolve(collection)
    
    async def fetch_way_set(self, way_id: int) -> ElementCollection:
        """Way plus every node it references"""
        return await self.fetch_collection(way_id, "way")
    
    async def fetch_way(self, way_id: int) -> Way:
        return await self._fetch_one(way_id, "way")
    
    async def fetch_node(self, node_id: int) -> Node:
        return await self._fetch_one(node_id, "node")
    
    async def _fetch_one(self, element_id: int, element_type: ElementType):
        # Last match wins if the API returns more than one element of the type
        collection = await self.fetch_collection(element_id, element_type)
        element = collection.last_of_type(element_type)
        if element is None:
            raise ElementNotFoundError(element_type, element_id)
        return element
