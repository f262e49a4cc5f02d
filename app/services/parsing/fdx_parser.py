"""Final Draft (.fdx) parser.

Produces typed paragraphs with page tracking plus the elements tagged in the
document's TagData block. Documents carrying a DOCTYPE or entity declarations
are refused before they reach the XML parser, so no entity (external or
internal) is ever expanded into paragraph text.
"""

import codecs
import re
import xml.etree.ElementTree as ET
from typing import List

from app.core.exceptions import ParseError
from app.models.screenplay import ParsedStructuredDocument, StructuredParagraph, TaggedElement
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

ROOT_TAG = "FinalDraft"

_DECLARATION_PATTERN = re.compile(r"<!\s*(DOCTYPE|ENTITY)", re.IGNORECASE)
_ENCODING_PATTERN = re.compile(r"<\?xml[^>]*\bencoding\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)

_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)
_ALLOWED_ENCODINGS = frozenset({"utf-8", "utf8", "utf-16", "utf16"})


def _decode(data: bytes) -> str:
    """Decode the document so declarations are checked on text, not raw bytes.

    Only UTF-8 and BOM-marked UTF-16 are accepted, and a declared encoding
    must be one of those.
    """
    try:
        if data.startswith(_UTF16_BOMS):
            text = data.decode("utf-16")
        else:
            text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError("Invalid FDX: document must be UTF-8 or UTF-16 encoded", original_error=e) from e

    if "\x00" in text:
        raise ParseError("Invalid FDX: document must be UTF-8 or UTF-16 encoded")

    declared = _ENCODING_PATTERN.search(text)
    if declared and declared.group(1).strip().lower() not in _ALLOWED_ENCODINGS:
        raise ParseError(f"Invalid FDX: unsupported encoding {declared.group(1)!r}")
    return text


def parse_fdx(data: bytes) -> ParsedStructuredDocument:
    """Parse a Final Draft document.

    Args:
        data: Raw bytes of the .fdx file

    Returns:
        ParsedStructuredDocument with paragraphs, tagged elements and page count

    Raises:
        ParseError: If the document is not well-formed, declares entities,
            or is not a FinalDraft document
    """
    if _DECLARATION_PATTERN.search(_decode(data)):
        raise ParseError("Invalid FDX: DOCTYPE and entity declarations are not allowed")

    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise ParseError(f"Invalid FDX: {e}", original_error=e) from e

    if root.tag != ROOT_TAG:
        raise ParseError(f"Invalid FDX: missing {ROOT_TAG} root element")

    paragraphs: List[StructuredParagraph] = []
    current_page = 1

    for para in root.findall("./Content/Paragraph"):
        para_type = para.get("Type", "")
        if para.get("StartsNewPage") == "Yes":
            current_page += 1

        full_text = "".join("".join(node.itertext()) for node in para.findall("Text")).strip()
        if not para_type or not full_text:
            continue

        paragraphs.append(StructuredParagraph(type=para_type, text=full_text, page=current_page))

    tagged_elements: List[TaggedElement] = []
    for category in root.findall("./TagData/TagCategory"):
        category_name = category.get("Name", "")
        for tag in category.findall("Tag"):
            tag_name = tag.get("Name", "")
            if category_name and tag_name:
                tagged_elements.append(TaggedElement(category=category_name, name=tag_name))

    LOGGER.debug(
        "Parsed FDX document",
        extra={
            "paragraphs": len(paragraphs),
            "tagged_elements": len(tagged_elements),
            "page_count": current_page,
        },
    )

    return ParsedStructuredDocument(
        paragraphs=paragraphs,
        tagged_elements=tagged_elements,
        page_count=max(1, current_page),
    )
