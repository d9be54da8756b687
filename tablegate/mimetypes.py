import enum
from typing import Optional

XML_MIME_TYPE = "text/xml"
PLAIN_MIME_TYPE = "text/plain"
MULTIPART_MIME_TYPE = "multipart/related"


class RepresentationKind(str, enum.Enum):
    xml = "xml"
    plain = "plain"
    # Recognized, but not something we can encode or decode (yet).
    mime = "mime"
    unrecognized = "unrecognized"

    @property
    def media_type(self) -> Optional[str]:
        "The media type used on responses of this kind, if any."
        return DEFAULT_MIME_TYPES_BY_KIND.get(self)

    @property
    def supported(self) -> bool:
        return self in DEFAULT_MIME_TYPES_BY_KIND


# Tokens are matched, in order, as case-insensitive substrings of the header
# value. The first kind with a matching token wins.
DEFAULT_KINDS_BY_TOKEN = {
    XML_MIME_TYPE: RepresentationKind.xml,
    "application/xml": RepresentationKind.xml,
    PLAIN_MIME_TYPE: RepresentationKind.plain,
    MULTIPART_MIME_TYPE: RepresentationKind.mime,
}

DEFAULT_MIME_TYPES_BY_KIND = {
    RepresentationKind.xml: XML_MIME_TYPE,
    RepresentationKind.plain: PLAIN_MIME_TYPE,
}


def negotiate(header_value: Optional[str]) -> RepresentationKind:
    """
    Map an Accept or Content-Type header value onto a RepresentationKind.

    An absent header, or the catch-all '*/*' that curl sends by default,
    selects XML. Anything that matches none of the known tokens is
    RepresentationKind.unrecognized; this never raises.

    >>> negotiate("text/XML; charset=utf-8")
    <RepresentationKind.xml: 'xml'>
    >>> negotiate("image/png")
    <RepresentationKind.unrecognized: 'unrecognized'>
    """
    if header_value is None or header_value.strip() == "*/*":
        return RepresentationKind.xml
    lowered = header_value.lower()
    for token, kind in DEFAULT_KINDS_BY_TOKEN.items():
        if token in lowered:
            return kind
    return RepresentationKind.unrecognized
