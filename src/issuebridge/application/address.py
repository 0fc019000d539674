"""Recover the reporter's contact address from an issue body.

Issues are opened from a single form template whose contact block renders as::

    <a href="mailto:'someone@example.org'"><span ...>'someone@example.org'</span></a>

The parser walks the three delimiters in order and fails loudly on the first
one it cannot find.
"""

from __future__ import annotations

from issuebridge.domain.errors import MalformedSourceError

OPENING_MARKER = "<a href=\"mailto:'"
CLOSING_ANCHOR = "</a>"
ADDRESS_QUOTE = "'"


def extract_address(issue_body: str | None) -> str:
    """Return the first templated contact address in ``issue_body``."""
    if not issue_body:
        raise MalformedSourceError("Issue body is empty, no contact address to extract")

    start = issue_body.find(OPENING_MARKER)
    if start < 0:
        raise MalformedSourceError("Issue body has no mailto contact block")
    rest = issue_body[start + len(OPENING_MARKER):]

    end = rest.find(CLOSING_ANCHOR)
    if end < 0:
        raise MalformedSourceError("Contact block is missing its closing </a> tag")
    anchor = rest[:end]

    quote = anchor.find(ADDRESS_QUOTE)
    if quote < 0:
        raise MalformedSourceError("Contact block is missing the closing quote after the address")

    address = anchor[:quote]
    if not address:
        raise MalformedSourceError("Contact block holds an empty address")
    return address
