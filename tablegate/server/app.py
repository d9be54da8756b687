import logging
import os
import secrets
import sys
from contextlib import asynccontextmanager
from functools import cache
from pathlib import Path
from typing import Optional

from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from ..config import construct_build_app_kwargs, parse_configs
from ..media_type_registration import (
    SerializationRegistry,
    default_deserialization_registry,
    default_serialization_registry,
)
from .core import DownstreamFailure
from .router import get_router
from .settings import get_settings

REQUEST_ID_HEADER = "X-Tablegate-Request-ID"

logger = logging.getLogger(__name__)
logger.setLevel("INFO")
handler = logging.StreamHandler()
handler.setLevel("DEBUG")
handler.setFormatter(logging.Formatter("%(message)s"))
logger.addHandler(handler)


def build_app(
    admin,
    server_settings=None,
    serialization_registry: Optional[SerializationRegistry] = None,
    deserialization_registry: Optional[SerializationRegistry] = None,
):
    """
    Serve table administration over HTTP

    Parameters
    ----------
    admin : AdminClient
        The table-administration client that requests are delegated to.
    server_settings: dict, optional
        Dict of other server configuration.
    serialization_registry: SerializationRegistry, optional
        Encoders for responses. Defaults to the built-in XML and plain text.
    deserialization_registry: SerializationRegistry, optional
        Decoders for request bodies. Defaults to the built-in XML.
    """
    server_settings = server_settings or {}
    serialization_registry = serialization_registry or default_serialization_registry
    deserialization_registry = (
        deserialization_registry or default_deserialization_registry
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        "Manage lifespan events for each event loop that the app runs in"
        await startup_event()
        yield

    app = FastAPI(lifespan=lifespan)

    # Healthcheck for deployment to containerized systems, needs to preempt other responses.
    @app.get("/healthz", status_code=200)
    async def healthz():
        return {"status": "ready"}

    # Diagnostics go to clients as plain text, verbatim.
    @app.exception_handler(StarletteHTTPException)
    async def plain_text_http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ):
        return PlainTextResponse(
            str(exc.detail), status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(DownstreamFailure)
    async def downstream_failure_exception_handler(
        request: Request, exc: DownstreamFailure
    ):
        logger.error(f"Administration client failed: {exc.args[0]}")
        return PlainTextResponse(
            exc.args[0], status_code=HTTP_500_INTERNAL_SERVER_ERROR
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        return PlainTextResponse(
            "Internal server error",
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            headers={REQUEST_ID_HEADER: correlation_id.get() or ""},
        )

    # This list will be mutated when settings are processed at app startup.
    app.state.allow_origins = []
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app.state.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    router = get_router(serialization_registry, deserialization_registry)
    app.include_router(router, prefix="/api/v1")

    # Expose the admin client here to make it accessible from endpoints via
    # request.app.state and in tests via app.state
    app.state.admin = admin

    @cache
    def override_get_settings():
        # A copy per app, so the process-wide settings are left alone.
        update = {
            item: server_settings[item]
            for item in ["allow_origins", "request_bytesize_limit"]
            if server_settings.get(item) is not None
        }
        return get_settings().model_copy(update=update)

    async def startup_event():
        from .. import __version__

        logger.info(f"tablegate version {__version__}")
        settings = app.dependency_overrides[get_settings]()
        app.state.allow_origins.extend(settings.allow_origins)
        logger.info(
            f"Serving administration client {type(admin).__name__} "
            f"(request bodies limited to {settings.request_bytesize_limit} bytes)"
        )

    app.dependency_overrides[get_settings] = override_get_settings

    app.add_middleware(
        CorrelationIdMiddleware,
        header_name=REQUEST_ID_HEADER,
        generator=lambda: secrets.token_hex(8),
    )

    return app


def build_app_from_config(config, source_filepath=None):
    "Convenience function that calls build_app(...) given config as dict."
    kwargs = construct_build_app_kwargs(config, source_filepath=source_filepath)
    return build_app(**kwargs)


def app_factory():
    """
    Return an ASGI app instance.

    Use a configuration file at the path specified by the environment variable
    TABLEGATE_CONFIG or, if unset, at the default path "./config.yml".

    This is intended to be used for horizontal deployment (using gunicorn, for
    example) where only a module and instance or factory can be specified.
    """
    config_path = os.getenv("TABLEGATE_CONFIG", "config.yml")
    logger.info(f"Using configuration from {Path(config_path).absolute()}")

    parsed_config = parse_configs(config_path)

    web_app = build_app_from_config(parsed_config, config_path)
    print_server_info(
        web_app,
        host=parsed_config.uvicorn.get("host", "127.0.0.1"),
        port=parsed_config.uvicorn.get("port", 8000),
    )
    return web_app


def __getattr__(name):
    """
    This supports tablegate.server.app.app by creating app on demand.
    """
    if name == "app":
        try:
            return app_factory()
        except Exception as err:
            raise Exception("Failed to create app.") from err
    raise AttributeError(name)


def print_server_info(web_app: FastAPI, host: str = "127.0.0.1", port: int = 8000):
    print(
        f"""
    Table administration is served at:

    http://{host}:{port}/api/v1/

""",
        file=sys.stderr,
    )
