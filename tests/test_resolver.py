import asyncio

import pytest
import requests

from osmfetch.exceptions import ElementNotFoundError
from osmfetch.gateway import FetchGateway
from osmfetch.models import ElementCollection, Node, Way
from osmfetch.resolver import NodeResolver

from conftest import BASE_URL, node_xml, url


def make_resolver(http, **kwargs):
    return NodeResolver(FetchGateway(http, base_url=BASE_URL), **kwargs)


def serve_nodes(http, ids):
    for node_id in ids:
        http.responses[url("node", node_id)] = node_xml(node_id)


def test_resolves_n_refs_into_n_plus_one_elements(fake_http):
    serve_nodes(fake_http, [1, 2, 3])
    collection = ElementCollection(elements=[Way(id=10, nodes=[1, 2, 3])])
    
    result = asyncio.run(make_resolver(fake_http).resolve(collection))
    
    assert len(result.elements) == 4
    assert [n.id for n in result.nodes()] == [1, 2, 3]
    assert result.elements[-1] == collection.elements[0]


def test_duplicate_refs_fetch_twice(fake_http):
    serve_nodes(fake_http, [5])
    collection = ElementCollection(elements=[Way(id=10, nodes=[5, 5])])
    
    result = asyncio.run(make_resolver(fake_http).resolve(collection))
    
    assert fake_http.calls == [url("node", 5)] * 2
    assert [n.id for n in result.nodes()] == [5, 5]


def test_no_refs_no_fetches(fake_http):
    collection = ElementCollection(elements=[Way(id=10, nodes=[])])
    result = asyncio.run(make_resolver(fake_http).resolve(collection))
    assert fake_http.calls == []
    assert result.elements == collection.elements


def test_in_document_nodes_are_refetched(fake_http):
    fake_http.responses[url("node", 1)] = node_xml(1, lat="10.0", lon="20.0")
    stale = Node(id=1, lat=0.0, lon=0.0)
    collection = ElementCollection(elements=[Way(id=10, nodes=[1]), stale])
    
    result = asyncio.run(make_resolver(fake_http).resolve(collection))
    
    assert fake_http.calls == [url("node", 1)]
    assert [(n.lat, n.lon) for n in result.nodes()] == [(10.0, 20.0), (0.0, 0.0)]


def test_one_failed_fetch_fails_resolution(fake_http):
    serve_nodes(fake_http, [1, 3])
    error = requests.exceptions.ConnectionError("boom")
    fake_http.responses[url("node", 2)] = error
    collection = ElementCollection(elements=[Way(id=10, nodes=[1, 2, 3])])
    
    with pytest.raises(requests.exceptions.ConnectionError) as excinfo:
        asyncio.run(make_resolver(fake_http).resolve(collection))
    assert excinfo.value is error


def test_best_effort_drops_failed_nodes(fake_http):
    serve_nodes(fake_http, [1, 3])
    fake_http.responses[url("node", 2)] = requests.exceptions.HTTPError("410 Gone")
    collection = ElementCollection(elements=[Way(id=10, nodes=[1, 2, 3])])
    
    result = asyncio.run(make_resolver(fake_http, best_effort=True).resolve(collection))
    
    assert [n.id for n in result.nodes()] == [1, 3]
    assert result.missing_node_refs() == [2]


def test_response_without_node_raises(fake_http):
    fake_http.responses[url("node", 1)] = "<osm/>"
    collection = ElementCollection(elements=[Way(id=10, nodes=[1])])
    with pytest.raises(ElementNotFoundError):
        asyncio.run(make_resolver(fake_http).resolve(collection))


def test_fetches_overlap_up_to_concurrency_limit(fake_http):
    ids = list(range(1, 9))
    serve_nodes(fake_http, ids)
    fake_http.delay = 0.05
    collection = ElementCollection(elements=[Way(id=10, nodes=ids)])
    
    result = asyncio.run(make_resolver(fake_http, max_concurrency=2).resolve(collection))
    
    assert len(result.nodes()) == 8
    assert fake_http.max_in_flight == 2


def test_timeout(fake_http):
    serve_nodes(fake_http, [1])
    fake_http.delay = 0.3
    collection = ElementCollection(elements=[Way(id=10, nodes=[1])])
    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(make_resolver(fake_http, timeout=0.01).resolve(collection))


def test_first_failure_cancels_queued_fetches(fake_http):
    ids = [1, 2, 3, 4, 5]
    serve_nodes(fake_http, ids[1:])
    error = requests.exceptions.ConnectionError("refused")
    fake_http.responses[url("node", 1)] = error
    collection = ElementCollection(elements=[Way(id=10, nodes=ids)])
    
    with pytest.raises(requests.exceptions.ConnectionError) as excinfo:
        asyncio.run(make_resolver(fake_http, max_concurrency=1).resolve(collection))
    
    assert excinfo.value is error
    assert len(fake_http.calls) < len(ids)


def test_non_numeric_refs_are_not_fetched(fake_http):
    serve_nodes(fake_http, [1, 2])
    collection = ElementCollection(elements=[Way(id=10, nodes=[1, None, 2])])
    
    result = asyncio.run(make_resolver(fake_http).resolve(collection))
    
    assert sorted(fake_http.calls) == [url("node", 1), url("node", 2)]
    assert [n.id for n in result.nodes()] == [1, 2]
    assert result.ways()[0].nodes == [1, None, 2]
