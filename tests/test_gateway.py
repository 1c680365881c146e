import sys
import types

import pytest
from fastapi.testclient import TestClient

from conftest import SITE
from wttppy.gateway import create_app, load_client
from wttppy.wttppy import WttpClient


@pytest.fixture
def gateway(client):
    with TestClient(create_app(client)) as test_client:
        yield test_client


def test_proxy_get(gateway):
    response = gateway.get(f"/{SITE}/test.html")

    assert response.status_code == 200
    assert response.text == "<html><body>Hello World!</body></html>"
    assert response.headers["content-type"] == "text/html; charset=utf-8"
    assert response.headers["content-location"] == "datapoint/chunk"


def test_proxy_range_header(gateway):
    response = gateway.get(f"/{SITE}/multifile.html", headers={"Range": "chunks=0-1"})

    assert response.status_code == 200
    assert response.text == "Chunk 1Chunk 2"


def test_proxy_put_then_get_through_alias(gateway):
    response = gateway.put("/example.eth/new.html", content=b"Hello, WTTP!", headers={"Content-Type": "text/plain"})
    assert response.status_code == 201

    response = gateway.get("/example.eth/new.html")
    assert response.status_code == 200
    assert response.text == "Hello, WTTP!"
    assert response.headers["content-type"].startswith("text/plain")


def test_proxy_locate(gateway):
    response = gateway.request("LOCATE", f"/{SITE}/multifile.html")

    assert response.status_code == 200
    assert len(response.text.splitlines()) == 10


def test_proxy_head(gateway):
    response = gateway.head(f"/{SITE}/test.html")

    assert response.status_code == 200
    assert response.headers["etag"].startswith('"0x')


def test_proxy_missing_resource(gateway):
    assert gateway.get(f"/{SITE}/nope.html").status_code == 404


def test_proxy_unresolvable_host(gateway):
    response = gateway.get("/nobody.eth/index.html")

    assert response.status_code == 404
    assert "nobody.eth" in response.json()["detail"]


def test_proxy_collaborator_fault(gateway):
    response = gateway.patch(f"/{SITE}/missing.html", content=b"x", headers={"Range": "chunks=1"})

    assert response.status_code == 502
    assert response.json() == {"detail": "Resource not found: /missing.html"}


def test_fetch_endpoint(gateway):
    response = gateway.post("/fetch", json={"url": f"wttp://{SITE}/test.html"})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == 200
    assert data["body"] == "<html><body>Hello World!</body></html>"
    assert data["headers"]["content-length"] == "38"


def test_fetch_endpoint_define(gateway, session):
    block = {"methods": 3}
    response = gateway.post("/fetch", json={"url": f"wttp://{SITE}/test.html", "method": "DEFINE", "body": block})

    assert response.json()["status"] == 200
    assert session.calls[-1][1]["header"] == block


def test_fetch_endpoint_unsupported_method(gateway):
    response = gateway.post("/fetch", json={"url": f"wttp://{SITE}/test.html", "method": "POST"})

    assert response.status_code == 200
    assert response.json()["status"] == 501
    assert response.json()["body"] == "Client Error: Unsupported method: POST"


def test_fetch_endpoint_invalid_url(gateway):
    response = gateway.post("/fetch", json={"url": "invalid-url"})
    assert response.status_code == 400


def test_fetch_endpoint_validation_error(gateway):
    response = gateway.post("/fetch", json={"method": "GET"})
    assert response.status_code == 422


def test_load_client(monkeypatch, client):
    module = types.ModuleType("wttp_test_factory")
    module.make_client = lambda: client
    monkeypatch.setitem(sys.modules, "wttp_test_factory", module)

    assert load_client("wttp_test_factory:make_client") is client


@pytest.mark.parametrize("factory", ["", "module_only", ":callable"])
def test_load_client_rejects_bad_factory(factory):
    with pytest.raises(ValueError):
        load_client(factory)


def test_client_is_shared_on_app_state(client):
    app = create_app(client)
    assert isinstance(app.state.client, WttpClient)


def test_fetch_endpoint_rejects_object_body_for_put(gateway, session):
    response = gateway.post("/fetch", json={"url": f"wttp://{SITE}/new.html", "method": "PUT", "body": {"a": 1}})

    assert response.status_code == 400
    assert "text or bytes" in response.json()["detail"]
    assert session.calls == []
