"""
Shared fixtures: a fake HTTP fetcher serving canned OSM XML
"""

import threading
import time

import pytest

from osmfetch.config import APIConfig, FetcherConfig


BASE_URL = "https://api.test/api/0.6"


def node_xml(node_id, lat="51.5", lon="-0.12", extra=""):
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="test">
  <node id="{node_id}" visible="true" version="2" changeset="77" timestamp="2016-01-01T00:00:00Z" user="mapper" uid="5" lat="{lat}" lon="{lon}"/>
  {extra}
</osm>"""


def way_xml(way_id, refs, tags=None, extra=""):
    nds = "\n    ".join(f'<nd ref="{ref}"/>' for ref in refs)
    tag_lines = "\n    ".join(f'<tag k="{k}" v="{v}"/>' for k, v in (tags or {}).items())
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<osm version="0.6" generator="test">
  <way id="{way_id}" visible="true" version="3" changeset="1234" timestamp="2015-07-01T10:00:00Z" user="someone" uid="42">
    {nds}
    {tag_lines}
  </way>
  {extra}
</osm>"""


def url(element_type, element_id):
    return f"{BASE_URL}/{element_type}/{element_id}"


class FakeHTTPClient:
    """Serves responses by URL; values may be text or an exception to raise"""
    
    def __init__(self, responses=None, delay=0.0):
        self.responses = dict(responses or {})
        self.delay = delay
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()
    
    def get_text(self, url):
        with self._lock:
            self.calls.append(url)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            response = self.responses[url]
            if isinstance(response, Exception):
                raise response
            return response
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture
def fake_http():
    return FakeHTTPClient()


@pytest.fixture
def fetcher_config():
    return FetcherConfig(api=APIConfig(base_url=BASE_URL))
