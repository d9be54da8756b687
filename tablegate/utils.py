import builtins
import collections.abc
import contextlib
import functools
import importlib
import inspect
import operator
import os
import sys
from pathlib import Path
from typing import Any, Callable, Generic, Iterator, TextIO, TypeVar, Union

import anyio

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


class DictView(collections.abc.Mapping[K, V], Generic[K, V]):
    "An immutable view of a dict."

    def __init__(self, d: collections.abc.Mapping[K, V]):
        self._internal_dict = d

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._internal_dict!r})"

    def __getitem__(self, key: K) -> V:
        return self._internal_dict[key]

    def __iter__(self) -> collections.abc.Iterator[K]:
        yield from self._internal_dict

    def __len__(self) -> int:
        return len(self._internal_dict)

    def __setitem__(self, key: K, value: V):
        raise TypeError("Setting items is not allowed.")

    def __delitem__(self, key: K):
        raise TypeError("Deleting items is not allowed.")

    def __eq__(self, other: Any) -> bool:
        return self._internal_dict == other


def import_object(colon_separated_string, accept_live_object=True):
    if not isinstance(colon_separated_string, str):
        if not accept_live_object:
            raise ValueError(
                "accept_live_object is False, but live object has been passed"
            )

        # We have been handed the live object itself.
        # Nothing to import. Pass it through.
        return colon_separated_string
    MESSAGE = (
        "Expected string formatted like:\n\n"
        "    package_name.module_name:object_name\n\n"
        "Notice *dots* between modules and a "
        f"*colon* before the object name. Received:\n\n{colon_separated_string!r}"
    )
    import_path, _, obj_path = colon_separated_string.partition(":")
    for segment in import_path.split("."):
        if not segment.isidentifier():
            raise ValueError(MESSAGE)
    for attr in obj_path.split("."):
        if not attr.isidentifier():
            raise ValueError(MESSAGE)
    module = importlib.import_module(import_path)
    return operator.attrgetter(obj_path)(module)


def parse(file: TextIO) -> dict[Any, Any]:
    """
    Given a config file, parse it.

    This wraps YAML parsing and environment variable expansion.
    """
    import yaml

    content = yaml.safe_load(file.read())
    return expand_environment_variables(content)


def expand_environment_variables(config: T) -> T:
    """Expand environment variables in a nested config dictionary

    This function will recursively search through any nested dictionaries
    and/or lists.

    Parameters
    ----------
    config : dict, iterable, or str
        Input object to search for environment variables

    Returns
    -------
    config : same type as input

    Examples
    --------
    >>> expand_environment_variables({'x': [1, 2, '$USER']})  # doctest: +SKIP
    {'x': [1, 2, 'my-username']}
    """
    if isinstance(config, collections.abc.Mapping):
        return {k: expand_environment_variables(v) for k, v in config.items()}  # type: ignore
    elif isinstance(config, str):
        return os.path.expandvars(config)
    elif isinstance(config, (list, tuple, builtins.set)):
        return type(config)([expand_environment_variables(v) for v in config])
    else:
        return config


@contextlib.contextmanager
def prepend_to_sys_path(*paths: Union[str, Path]) -> Iterator[None]:
    "Temporarily prepend items to sys.path."

    for item in reversed(paths):
        # Ensure item is str (not pathlib.Path).
        sys.path.insert(0, str(item))
    try:
        yield
    finally:
        for item in paths:
            sys.path.pop(0)


def is_coroutine_callable(call: Callable[..., Any]) -> bool:
    if inspect.isroutine(call):
        return inspect.iscoroutinefunction(call)
    if inspect.isclass(call):
        return False
    dunder_call = getattr(call, "__call__", None)  # noqa: B004
    return inspect.iscoroutinefunction(dunder_call)


async def ensure_awaitable(func, *args, **kwargs):
    if is_coroutine_callable(func):
        return await func(*args, **kwargs)
    else:
        # run_sync() does not apply **kwargs to func
        # https://github.com/agronholm/anyio/issues/414
        return await anyio.to_thread.run_sync(functools.partial(func, **kwargs), *args)


class SerializationError(Exception):
    pass


class MalformedRequest(SerializationError):
    "Prompts the server to send 400 Bad Request with message"

    pass
