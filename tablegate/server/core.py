from typing import Optional

from fastapi import Request, Response
from starlette.status import HTTP_200_OK, HTTP_204_NO_CONTENT

from ..mimetypes import RepresentationKind, negotiate
from ..serialization import register_builtin_serializers
from ..utils import ensure_awaitable

register_builtin_serializers()


def resolve_representation(header_name: str, header_value: Optional[str]):
    """
    Negotiate a representation kind from the given request header.

    Raise UnsupportedMediaTypes, echoing the header value, if the kind is
    not one we can encode or decode.
    """
    kind = negotiate(header_value)
    if kind is RepresentationKind.mime:
        raise UnsupportedMediaTypes(
            f"Don't support multipart/related yet... ({header_name}: {header_value})"
        )
    if not kind.supported:
        raise UnsupportedMediaTypes(
            f"Unsupported {header_name} Header Content: {header_value}"
        )
    return kind


def construct_data_response(
    resource_family,
    serialization_registry,
    payload,
    kind,
    status_code=HTTP_200_OK,
):
    media_type = kind.media_type
    try:
        serializer = serialization_registry.dispatch(resource_family, media_type)
    except ValueError:
        raise UnsupportedMediaTypes(
            f"Cannot encode {resource_family.value} as {media_type}. "
            f"Supported: {', '.join(serialization_registry.media_types(resource_family))}."
        )
    content = serializer(media_type, payload)
    return Response(content, status_code=status_code, media_type=media_type)


def construct_empty_response(status_code=HTTP_204_NO_CONTENT):
    return Response(status_code=status_code)


def decode_request_body(resource_family, deserialization_registry, body, kind):
    media_type = kind.media_type
    try:
        deserializer = deserialization_registry.dispatch(resource_family, media_type)
    except ValueError:
        raise UnsupportedMediaTypes(
            f"Cannot decode {resource_family.value} from {media_type}. "
            f"Supported: {', '.join(deserialization_registry.media_types(resource_family))}."
        )
    return deserializer(body)


async def read_body(request: Request, limit: int) -> bytes:
    "Read the request body, refusing to buffer more than limit bytes."
    content_length = request.headers.get("Content-Length")
    if content_length is not None and content_length.isdigit():
        if int(content_length) > limit:
            raise RequestTooLarge(
                f"Request body of {content_length} bytes exceeds the limit of {limit} bytes."
            )
    chunks = []
    size = 0
    async for chunk in request.stream():
        size += len(chunk)
        if size > limit:
            raise RequestTooLarge(
                f"Request body exceeds the limit of {limit} bytes."
            )
        chunks.append(chunk)
    return b"".join(chunks)


async def call_admin(func, *args):
    """
    Invoke a method of the administration client.

    Whatever it raises is re-raised as DownstreamFailure, keeping the message.
    """
    try:
        return await ensure_awaitable(func, *args)
    except Exception as err:
        raise DownstreamFailure(str(err) or type(err).__name__) from err


class UnsupportedMediaTypes(Exception):
    pass


class NoEntry(KeyError):
    pass


class DownstreamFailure(Exception):
    "Prompts the server to send 500 with the administration client's message"

    pass


class RequestTooLarge(Exception):
    pass
