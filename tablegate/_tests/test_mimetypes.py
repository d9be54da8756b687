import pytest

from ..mimetypes import RepresentationKind, negotiate


@pytest.mark.parametrize(
    "header, expected",
    [
        (None, RepresentationKind.xml),
        ("*/*", RepresentationKind.xml),
        ("text/xml", RepresentationKind.xml),
        ("TEXT/XML; charset=utf-8", RepresentationKind.xml),
        ("application/xml", RepresentationKind.xml),
        ("text/plain", RepresentationKind.plain),
        ("text/plain;q=0.9", RepresentationKind.plain),
        ("multipart/related; boundary=xyz", RepresentationKind.mime),
        ("image/png", RepresentationKind.unrecognized),
        ("", RepresentationKind.unrecognized),
    ],
)
def test_negotiate(header, expected):
    assert negotiate(header) is expected


def test_first_token_wins():
    # Both tokens appear; xml is checked first.
    assert negotiate("text/plain, text/xml") is RepresentationKind.xml


def test_media_types():
    assert RepresentationKind.xml.media_type == "text/xml"
    assert RepresentationKind.plain.media_type == "text/plain"
    assert RepresentationKind.mime.media_type is None
    assert not RepresentationKind.mime.supported
    assert not RepresentationKind.unrecognized.supported
