"""Format dispatch: turn uploaded script bytes into a detection result."""

from dataclasses import dataclass
from typing import Optional

from app.models.enums import ScriptFormat
from app.models.screenplay import DetectionResult
from app.services.detection.element_detector import detect_elements
from app.services.detection.fdx_element_detector import detect_fdx_elements
from app.services.parsing.fdx_parser import parse_fdx
from app.services.parsing.pdf_source import PdfPageTextSource
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class LoadedScript:
    """Detection output plus the page count and format it was derived from."""

    result: DetectionResult
    page_count: int
    format: ScriptFormat


def detect_format(storage_key: str) -> ScriptFormat:
    return ScriptFormat.FDX if storage_key.lower().endswith(".fdx") else ScriptFormat.PDF


def parse_and_detect(
    data: bytes,
    storage_key: str,
    extract_elements: bool = True,
    include_action_props: bool = False,
    page_source: Optional[PdfPageTextSource] = None,
) -> LoadedScript:
    """Parse script bytes with the adapter matching its format and detect elements.

    FDX documents always use structured detection. For PDFs, detection can be
    skipped so only the page count is produced.

    Raises:
        ParseError: If the document cannot be parsed
    """
    script_format = detect_format(storage_key)

    if script_format == ScriptFormat.FDX:
        parsed = parse_fdx(data)
        result = detect_fdx_elements(parsed, include_action_props=include_action_props)
        loaded = LoadedScript(
            result=result,
            page_count=parsed.page_count,
            format=script_format,
        )
    else:
        pages = (page_source or PdfPageTextSource()).extract_pages(data)
        result = detect_elements(pages) if extract_elements else DetectionResult()
        loaded = LoadedScript(result=result, page_count=len(pages), format=script_format)

    LOGGER.info(
        "Script parsed and elements detected",
        extra={
            "storage_key": storage_key,
            "format": script_format.value,
            "page_count": loaded.page_count,
            "elements": len(loaded.result.elements),
            "scenes": len(loaded.result.scenes),
        },
    )
    return loaded
