from typing import Annotated

from pydantic import AfterValidator

from .utils import import_object

EntryPointString = Annotated[
    str,
    AfterValidator(import_object),
]


__all__ = [
    "EntryPointString",
]
