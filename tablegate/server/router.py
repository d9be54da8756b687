import dataclasses
import logging
from typing import Dict, Optional, Sequence, Tuple

from fastapi import APIRouter, Depends, HTTPException, Request
from starlette.status import (
    HTTP_202_ACCEPTED,
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_406_NOT_ACCEPTABLE,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
)

from .. import __version__
from ..media_type_registration import SerializationRegistry
from ..structures.core import ResourceFamily
from ..utils import MalformedRequest
from .core import (
    NoEntry,
    RequestTooLarge,
    UnsupportedMediaTypes,
    call_admin,
    construct_data_response,
    construct_empty_response,
    decode_request_body,
    read_body,
    resolve_representation,
)
from .dependencies import get_admin
from .protocols import AdminClient
from .schemas import About
from .settings import Settings, get_settings
from .utils import get_base_url, get_root_url

logger = logging.getLogger(__name__)

# Matches zero or more trailing path segments, which are ignored.
TRAILING = "..."


@dataclasses.dataclass(frozen=True)
class Route:
    """
    One row of the dispatch table.

    A shape is a tuple of segment patterns: "{param}" captures a segment,
    TRAILING (only last) swallows the rest, and anything else is a keyword
    matched case-insensitively.
    """

    method: str
    shape: Tuple[str, ...]
    operation: str

    def match(self, method: str, segments: Sequence[str]) -> Optional[Dict[str, str]]:
        if method != self.method:
            return None
        shape = self.shape
        if shape and shape[-1] == TRAILING:
            shape = shape[:-1]
            if len(segments) < len(shape):
                return None
            segments = segments[: len(shape)]
        elif len(segments) != len(shape):
            return None
        params = {}
        for pattern, segment in zip(shape, segments):
            if pattern.startswith("{") and pattern.endswith("}"):
                params[pattern[1:-1]] = segment
            elif pattern != segment.lower():
                return None
        return params


ROUTES = (
    Route("GET", ("{name}",), "read_table_metadata"),
    Route("GET", ("{name}", "regions"), "read_table_regions"),
    Route("POST", ("{name}",), "create_table"),
    Route("POST", ("{name}", "enable"), "enable_table"),
    Route("POST", ("{name}", "disable"), "disable_table"),
    Route("PUT", ("{name}", TRAILING), "alter_table"),
    Route("DELETE", ("{name}",), "delete_table"),
)


def resolve_route(routes, method, segments):
    "Return the first matching (route, params), or (None, {}) if none match."
    for route in routes:
        params = route.match(method, segments)
        if params is not None:
            return route, params
    return None, {}


def get_router(
    serialization_registry: SerializationRegistry,
    deserialization_registry: SerializationRegistry,
    routes=ROUTES,
) -> APIRouter:
    router = APIRouter()

    @router.get("/", response_model=About)
    async def about(request: Request):
        base_url = get_base_url(request)
        return About(
            api_version=1,
            library_version=__version__,
            formats={
                family: list(serialization_registry.media_types(family))
                for family in serialization_registry.resource_families
            },
            accepts={
                family: list(deserialization_registry.media_types(family))
                for family in deserialization_registry.resource_families
            },
            links={
                "self": base_url,
                "documentation": f"{get_root_url(request)}/docs",
            },
        )

    async def read_table_metadata(request, admin, settings, name):
        kind = resolve_representation("Accept", request.headers.get("Accept"))
        # The administration client is the source of truth, so scan its
        # listing rather than keeping an index of our own.
        for descriptor in await call_admin(admin.list_table_descriptors):
            if descriptor.name == name:
                break
        else:
            raise NoEntry("Table not found!")
        return construct_data_response(
            ResourceFamily.table, serialization_registry, descriptor, kind
        )

    async def read_table_regions(request, admin, settings, name):
        kind = resolve_representation("Accept", request.headers.get("Accept"))
        table = await call_admin(admin.get_table, name)
        start_keys = await call_admin(table.start_keys_of_regions)
        if not start_keys:
            return construct_empty_response()
        return construct_data_response(
            ResourceFamily.regions, serialization_registry, start_keys, kind
        )

    async def create_table(request, admin, settings, name):
        kind = resolve_representation(
            "Content-Type", request.headers.get("Content-Type")
        )
        body = await read_body(request, settings.request_bytesize_limit)
        # The name in the document, not the one in the path, names the table.
        descriptor = decode_request_body(
            ResourceFamily.table, deserialization_registry, body, kind
        )
        logger.info(f"Creating table {descriptor.name!r}")
        await call_admin(admin.create_table, descriptor)
        return construct_empty_response(HTTP_202_ACCEPTED)

    async def enable_table(request, admin, settings, name):
        logger.info(f"Enabling table {name!r}")
        await call_admin(admin.enable_table, name)
        return construct_empty_response(HTTP_202_ACCEPTED)

    async def disable_table(request, admin, settings, name):
        logger.info(f"Disabling table {name!r}")
        await call_admin(admin.disable_table, name)
        return construct_empty_response(HTTP_202_ACCEPTED)

    async def alter_table(request, admin, settings, name):
        kind = resolve_representation(
            "Content-Type", request.headers.get("Content-Type")
        )
        body = await read_body(request, settings.request_bytesize_limit)
        families = decode_request_body(
            ResourceFamily.columnfamilies, deserialization_registry, body, kind
        )
        # Families are applied one at a time. If one fails, those before it
        # stay applied.
        for family in families:
            logger.info(f"Modifying column family {family.name!r} of table {name!r}")
            await call_admin(admin.modify_column_family, name, family.name, family)
        return construct_empty_response(HTTP_202_ACCEPTED)

    async def delete_table(request, admin, settings, name):
        logger.info(f"Deleting table {name!r}")
        await call_admin(admin.delete_table, name)
        return construct_empty_response(HTTP_202_ACCEPTED)

    operations = {
        "read_table_metadata": read_table_metadata,
        "read_table_regions": read_table_regions,
        "create_table": create_table,
        "enable_table": enable_table,
        "disable_table": disable_table,
        "alter_table": alter_table,
        "delete_table": delete_table,
    }

    @router.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE"])
    async def table_resource(
        request: Request,
        path: str,
        admin: AdminClient = Depends(get_admin),
        settings: Settings = Depends(get_settings),
    ):
        "Dispatch a request on a table to one administrative operation."
        segments = [segment for segment in path.split("/") if segment]
        route, params = resolve_route(routes, request.method, segments)
        if route is None:
            raise HTTPException(
                status_code=HTTP_404_NOT_FOUND,
                detail=f"Not handled: {request.method} /{'/'.join(segments)}",
            )
        operation = operations[route.operation]
        try:
            return await operation(request, admin, settings, **params)
        except NoEntry as err:
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=err.args[0])
        except UnsupportedMediaTypes as err:
            raise HTTPException(status_code=HTTP_406_NOT_ACCEPTABLE, detail=err.args[0])
        except MalformedRequest as err:
            raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=err.args[0])
        except RequestTooLarge as err:
            raise HTTPException(
                status_code=HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=err.args[0]
            )

    return router
