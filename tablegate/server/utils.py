from typing import Mapping

from fastapi import Request
from starlette.types import Scope


def get_root_url(request: Request) -> str:
    """
    URL at which the app is being server, including API
    """
    return f"{get_root_url_low_level(request.headers, request.scope)}"


def get_base_url(request: Request) -> str:
    """
    Base URL for the API
    """
    return f"{get_root_url(request)}/api/v1"


def get_root_url_low_level(request_headers: Mapping[str, str], scope: Scope) -> str:
    # We want to get the scheme, host, and root_path (if any)
    # *as it appears to the client* for use in assembling links to
    # include in our responses. Behind a proxy, consult the
    # X-Forwarded-* headers for the original Host and scheme.
    host = request_headers.get("x-forwarded-host", request_headers["host"])
    scheme = request_headers.get("x-forwarded-proto", scope["scheme"])
    root_path = scope.get("root_path", "")
    if root_path.endswith("/"):
        root_path = root_path[:-1]
    return f"{scheme}://{host}{root_path}"
