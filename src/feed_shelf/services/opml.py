# ABOUTME: OPML parser and feed extractor for bulk feed import.
# ABOUTME: Validates the opml/body/outline tree, then flattens category -> feed nesting.

from xml.etree import ElementTree

import structlog

from feed_shelf.errors import OpmlParseError, OpmlStructureError
from feed_shelf.models import FeedEntry, OpmlDocument, OpmlOutline

log = structlog.get_logger()


def _outline_from_element(
    element: ElementTree.Element, children: list[OpmlOutline] | None = None
) -> OpmlOutline:
    return OpmlOutline(
        text=element.get("text", ""),
        xml_url=element.get("xmlUrl", ""),
        html_url=element.get("htmlUrl", ""),
        description=element.get("description", ""),
        children=children or [],
    )


def _category_from_element(element: ElementTree.Element) -> OpmlOutline:
    """A top-level outline and its direct children; deeper levels are not read."""
    return _outline_from_element(
        element, [_outline_from_element(child) for child in element.findall("outline")]
    )


def parse_opml_document(content: str) -> OpmlDocument:
    """Parse OPML text into a validated document tree.

    Raises OpmlParseError for malformed XML and OpmlStructureError when the
    root is not <opml>, <body> is missing, or the body has no outlines.
    """
    try:
        root = ElementTree.fromstring(content)  # noqa: S314
    except ElementTree.ParseError as e:
        log.error("opml_parse_error", error=str(e))
        raise OpmlParseError(f"Invalid OPML: {e}") from e

    if root.tag != "opml":
        raise OpmlStructureError(f"Expected <opml> root element, got <{root.tag}>")

    body = root.find("body")
    if body is None:
        raise OpmlStructureError("OPML document has no <body>")

    outlines = body.findall("outline")
    if not outlines:
        raise OpmlStructureError("OPML <body> has no <outline> elements")

    return OpmlDocument(
        title=root.findtext("head/title"),
        outlines=[_category_from_element(outline) for outline in outlines],
    )


def extract_feeds(document: OpmlDocument) -> list[FeedEntry]:
    """Flatten category outlines into feed entries.

    Only the children of top-level outlines are feeds; a top-level outline
    without children is an empty category and yields nothing. Order follows
    the document and duplicates are kept.
    """
    feeds: list[FeedEntry] = []
    for category in document.outlines:
        for outline in category.children:
            feeds.append(
                FeedEntry(
                    title=outline.text,
                    xml_url=outline.xml_url,
                    html_url=outline.html_url,
                    description=outline.description,
                )
            )
    return feeds


def parse_opml(content: str) -> list[FeedEntry]:
    """Parse OPML content and extract its feed entries."""
    feeds = extract_feeds(parse_opml_document(content))
    log.info("opml_parsed", count=len(feeds))
    return feeds
