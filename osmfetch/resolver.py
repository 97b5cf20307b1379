"""
Node resolver

Expands the node refs of every way in a collection into Node records,
fetching each ref in its own request.
"""

import asyncio
from typing import List, Optional
from loguru import logger

from .config import get_config
from .exceptions import ElementNotFoundError
from .gateway import FetchGateway
from .models import ElementCollection, Node
from .parser import OSMXMLParser


class NodeResolver:
    """
    Resolve way node refs by concurrent per-node fetches
    
    Refs are not de-duplicated and nodes already present in the document
    are not reused: every ref costs one round trip. By default the first
    failing fetch cancels the rest and is re-raised unchanged.
    """
    
    def __init__(
        self,
        gateway: FetchGateway,
        max_concurrency: Optional[int] = None,
        best_effort: Optional[bool] = None,
        timeout: Optional[float] = None,
    ):
        config = get_config()
        self.gateway = gateway
        self.parser = OSMXMLParser()
        self.max_concurrency = max_concurrency or config.max_concurrency
        self.best_effort = config.best_effort if best_effort is None else best_effort
        self.timeout = timeout if timeout is not None else config.resolve_timeout
    
    @staticmethod
    def collect_refs(collection: ElementCollection) -> List[int]:
        """Node refs of all ways, in order, duplicates kept, unparseable refs skipped"""
        refs = []
        for way in collection.ways():
            for position, ref in enumerate(way.nodes):
                if ref is None:
                    logger.warning(f"Way {way.id}: skipping non-numeric node ref at position {position}")
                    continue
                refs.append(ref)
        return refs
    
    async def fetch_node(self, node_id: int) -> Node:
        """Fetch and decode one node; the last <node> in the response wins"""
        text = await self.gateway.fetch(node_id, "node")
        root = self.parser.parse_xml(text)
        node = None
        for element in root.iter("node"):
            node = self.parser.convert_node(element)
        if node is None:
            raise ElementNotFoundError("node", node_id)
        return node
    
    async def resolve(self, collection: ElementCollection) -> ElementCollection:
        """
        Fetch every referenced node and merge
        
        Args:
            collection: Decoded collection (ways and in-document nodes)
            
        Returns:
            New collection: resolved nodes (ref order) followed by the
            original elements
        """
        refs = self.collect_refs(collection)
        if not refs:
            return collection
        
        logger.info(f"Resolving {len(refs)} node refs from {len(collection.ways())} ways")
        
        if self.timeout is not None:
            nodes = await asyncio.wait_for(self._fetch_all(refs), timeout=self.timeout)
        else:
            nodes = await self._fetch_all(refs)
        
        logger.info(f"Resolved {len(nodes)}/{len(refs)} node refs")
        return ElementCollection(elements=nodes + list(collection.elements))
    
    async def _fetch_all(self, refs: List[int]) -> List[Node]:
        semaphore = asyncio.Semaphore(self.max_concurrency)
        
        async def bounded_fetch(node_id: int) -> Node:
            async with semaphore:
                return await self.fetch_node(node_id)
        
        tasks = [asyncio.ensure_future(bounded_fetch(ref)) for ref in refs]
        
        if self.best_effort:
            results = await asyncio.gather(*tasks, return_exceptions=True)
            nodes = []
            for ref, result in zip(refs, results):
                if isinstance(result, BaseException):
                    logger.warning(f"Dropping node {ref}: {result}")
                    continue
                nodes.append(result)
            return nodes
        
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            # Let cancelled tasks settle so none is left pending
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
