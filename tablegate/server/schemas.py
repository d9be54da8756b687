from typing import Dict, List

from pydantic import BaseModel

from ..structures.core import ResourceFamily


class About(BaseModel):
    api_version: int
    library_version: str
    # Media types the server can encode, by resource family
    formats: Dict[ResourceFamily, List[str]]
    # Media types the server can decode from request bodies, by resource family
    accepts: Dict[ResourceFamily, List[str]]
    links: Dict[str, str]
