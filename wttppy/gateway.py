import importlib
import logging
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, HTTPException, Request, Response
from pydantic import BaseModel, Field

from . import config
from .errors import ClientError, CollaboratorFault, ResolutionError
from .wttppy import WttpClient

logger = logging.getLogger(__name__)

PROXY_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "LOCATE"]

# Recomputed by the HTTP server for the relayed body.
_HOP_HEADERS = {"content-length", "transfer-encoding", "connection"}


class FetchRequest(BaseModel):
    url: str
    method: str = "GET"
    headers: dict[str, str | int] = Field(default_factory=dict)
    body: str | dict[str, Any] | None = None


class FetchResult(BaseModel):
    status: int
    headers: dict[str, str]
    body: str


async def _fetch(client: WttpClient, url: str, method: str, headers, body):
    try:
        return await client.fetch(url, method=method, headers=headers, body=body)
    except ClientError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ResolutionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CollaboratorFault as e:
        raise HTTPException(status_code=502, detail=str(e))


def create_app(client: WttpClient) -> FastAPI:
    """Builds an HTTP front end that relays requests to ``client``."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Gateway is starting up, relaying to %s://", config.URL_SCHEME)
        yield
        logger.info("Gateway is shutting down.")

    app = FastAPI(lifespan=lifespan)
    app.state.client = client

    @app.post("/fetch", response_model=FetchResult)
    async def fetch(request: FetchRequest):
        """Runs a fetch described as JSON. DEFINE blocks travel in ``body``."""
        res = await _fetch(app.state.client, request.url, request.method, request.headers, request.body)
        return FetchResult(status=res.status, headers=dict(res.headers), body=res.text)

    @app.api_route("/{host}/{path:path}", methods=PROXY_METHODS)
    async def proxy(host: str, path: str, request: Request):
        """Relays a plain HTTP request to wttp://{host}/{path}."""
        body = await request.body() if request.method in ("PUT", "PATCH") else None
        url = f"{config.URL_SCHEME}://{host}/{path}"
        res = await _fetch(app.state.client, url, request.method, dict(request.headers), body)
        headers = {k: v for k, v in res.headers.items() if k not in _HOP_HEADERS}
        return Response(content=res.body, status_code=res.status, headers=headers)

    return app


def load_client(factory_path: str = config.CLIENT_FACTORY) -> WttpClient:
    """Imports and calls a "module:callable" factory that returns a WttpClient."""
    module_name, _, attr = factory_path.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Client factory must look like 'module:callable', got {factory_path!r}")
    factory = getattr(importlib.import_module(module_name), attr)
    return factory()


def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL)
    app = create_app(load_client())
    uvicorn.run(app, host=config.GATEWAY_HOST, port=config.GATEWAY_PORT)


if __name__ == "__main__":
    main()
