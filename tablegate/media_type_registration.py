from collections import defaultdict

from .utils import DictView


class SerializationRegistry:
    """
    Registry of media types for each resource family

    Examples
    --------

    Register a JSON writer for "regions" resources.

    >>> import json
    >>> serialization_registry.register(
    ...     "regions",
    ...     "application/json",
    ...     lambda media_type, keys: json.dumps([k.decode() for k in keys]).encode(),
    ... )

    """

    def __init__(self):
        self._lookup = defaultdict(dict)

    def media_types(self, resource_family) -> DictView[str, str]:
        """
        List the supported media types for a given resource family.
        """
        return DictView(self._lookup[resource_family])

    @property
    def resource_families(self):
        """
        List the known resource families.
        """
        return list(self._lookup)

    def register(self, resource_family, media_type, func=None):
        """
        Register a new media_type for a resource family.

        Parameters
        ----------
        resource_family : str
            The resource we are encoding, as in "table" or "regions".
        media_type : {str, List[str]}
            MIME type, as in "text/xml" or "text/plain".
        func : callable, optional
            A serializer accepts (media_type, payload) and returns bytes.
            A deserializer accepts bytes and returns the decoded resource.

        Examples
        --------
        Use as a normal method.

        >>> serialization_registry.register("table", "text/xml", serialize_table)

        Use as a decorator.

        >>> @serialization_registry.register("table", "text/xml")
        ... def serialize_table(media_type, descriptor):
        ...     ...
        ...

        """

        def dec(func):
            if isinstance(media_type, str):
                media_types = [media_type]
            else:
                media_types = media_type
            for m in media_types:
                self._lookup[resource_family][m] = func
            return func

        if func is None:
            # Return a decorator
            return dec
        return dec(func)

    def dispatch(self, resource_family, media_type):
        """
        Look up a writer for a given resource family and media type.
        """
        try:
            return self._lookup[resource_family][media_type]
        except KeyError:
            pass
        raise ValueError(
            f"No dispatch for resource_family {resource_family} with media type {media_type}"
        )


default_serialization_registry = SerializationRegistry()
"Global serialization registry. See Registry for usage examples."

default_deserialization_registry = SerializationRegistry()
"Global deserialization registry. See Registry for usage examples."
