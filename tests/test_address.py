import pytest

from issuebridge.application.address import extract_address
from issuebridge.domain.errors import MalformedSourceError

from conftest import ISSUE_BODY


def test_extracts_templated_address():
    body = "...<a href=\"mailto:'bugs@example.org'\">bugs@example.org</a>..."
    assert extract_address(body) == "bugs@example.org"


def test_extracts_plus_address_from_full_template():
    body = (
        "<a href=\"mailto:'hxr+bugtest@hx42.org'\">"
        "<span style=\"font-family: monospace;\">'hxr+bugtest@hx42.org'</span></a>"
    )
    assert extract_address(body) == "hxr+bugtest@hx42.org"


def test_first_contact_block_wins():
    body = ISSUE_BODY + "<a href=\"mailto:'second@x.org'\">x</a>"
    assert extract_address(body) == "a@x.org"


@pytest.mark.parametrize(
    "body,fragment",
    [
        ("no contact block here", "no mailto"),
        ("<a href=\"mailto:'a@x.org'\">never closed", "closing </a>"),
        ("<a href=\"mailto:'a@x.org\">a@x.org</a>", "closing quote"),
        ("<a href=\"mailto:''\">x</a>", "empty address"),
        ("", "empty"),
        (None, "empty"),
    ],
)
def test_malformed_markup_is_rejected(body, fragment):
    with pytest.raises(MalformedSourceError) as exc:
        extract_address(body)
    assert fragment in str(exc.value)


def test_no_entity_decoding():
    body = "<a href=\"mailto:'a&amp;b@x.org'\">x</a>"
    assert extract_address(body) == "a&amp;b@x.org"
