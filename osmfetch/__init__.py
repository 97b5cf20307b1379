"""
OpenStreetMap element fetcher

Fetches ways from the OSM API (XML) and resolves their node refs:
- API client: blocking HTTP fetcher
- Gateway: element URLs, async access
- Parser: XML to Way/Node records
- Resolver: concurrent per-node fetches
- Collector: Main orchestrator class
"""

from .models import ElementCollection, Node, Way
from .collector import OSMElementCollector
from .exceptions import ElementDecodeError, ElementNotFoundError, OSMFetchError

__all__ = [
    "ElementCollection",
    "Node",
    "Way",
    "OSMElementCollector",
    "OSMFetchError",
    "ElementDecodeError",
    "ElementNotFoundError",
]
