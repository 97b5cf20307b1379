"""
Fetch gateway

Builds element URLs and runs the blocking HTTP fetcher off the event loop.
This is the only module that touches the network.
"""

import asyncio
from typing import Optional

from .api_client import OSMAPIClient
from .config import get_config


ELEMENT_TYPES = ("way", "node")


class FetchGateway:
    """Async access to single OSM elements by type and id"""
    
    def __init__(self, http_client=None, base_url: Optional[str] = None):
        # http_client: anything with get_text(url) -> str
        self.http_client = http_client or OSMAPIClient()
        self.base_url = (base_url or get_config().api.base_url).rstrip("/")
    
    def build_url(self, element_id: int, element_type: str) -> str:
        if element_type not in ELEMENT_TYPES:
            raise ValueError(f"Unsupported element type {element_type!r}, expected one of {ELEMENT_TYPES}")
        return f"{self.base_url}/{element_type}/{element_id}"
    
    async def fetch(self, element_id: int, element_type: str) -> str:
        """Return the raw XML text for one element"""
        url = self.build_url(element_id, element_type)
        return await asyncio.to_thread(self.http_client.get_text, url)
