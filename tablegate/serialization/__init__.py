def register_builtin_serializers():
    """
    Register built-in serializers and deserializers for each resource family.
    """
    # Each submodule in ..serialization registers serializers on import.
    from ..serialization import markup as _markup  # noqa: F401
    from ..serialization import text as _text  # noqa: F401

    del _markup, _text
