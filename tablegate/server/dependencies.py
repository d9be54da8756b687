from fastapi import Request

from .protocols import AdminClient


def get_admin(request: Request) -> AdminClient:
    return request.app.state.admin
