"""FastAPI binding for the JSON-RPC dispatcher.

One POST endpoint hands the request body to the dispatcher and returns whatever
it wrote; RPC errors travel inside the JSON body with HTTP 200.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, Response
from loguru import logger

from ajaxrpc import __version__
from ajaxrpc.api.demo import build_demo_server, render_index
from ajaxrpc.config.schema import Config
from ajaxrpc.rpc.envelope import BufferedResponseSink
from ajaxrpc.rpc.server import RpcServer


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the registered services for the lifetime of the app."""
    rpc_server: RpcServer = app.state.rpc_server
    logger.info(
        "ajaxrpc API serving {} on {} (services: {})",
        app.state.config.server.rpc_path,
        app.state.config.rpc_url,
        ", ".join(rpc_server.registry.names()) or "none",
    )
    try:
        yield
    finally:
        logger.info("ajaxrpc API stopped; call counts: {}", rpc_server.registry.stats())


def create_app(rpc_server: RpcServer | None = None, config: Config | None = None) -> FastAPI:
    """Build the HTTP app; defaults to the demo server and default config."""
    config = config or Config()
    rpc_server = rpc_server or build_demo_server()
    rpc_path = "/" + config.server.rpc_path.strip("/")

    app = FastAPI(
        title="ajaxrpc",
        description="JSON-RPC over HTTP for registered Python services",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.rpc_server = rpc_server
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.post(rpc_path, include_in_schema=False)
    async def rpc_endpoint(request: Request) -> Response:
        body = await request.body()
        sink = BufferedResponseSink()
        await run_in_threadpool(rpc_server.handle, body, sink)
        return Response(content=sink.getvalue(), status_code=200, headers=sink.headers)

    if config.server.index_enabled:
        @app.get("/", response_class=HTMLResponse, include_in_schema=False)
        async def index() -> HTMLResponse:
            return HTMLResponse(render_index(rpc_path))

    return app
