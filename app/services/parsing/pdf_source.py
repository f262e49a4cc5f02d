"""Page text source backed by pdfplumber."""

from io import BytesIO
from typing import List

import pdfplumber

from app.core.exceptions import ParseError
from app.models.screenplay import PageText
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class PdfPageTextSource:
    """Adapter turning PDF bytes into an ordered list of ``PageText``.

    No layout analysis is attempted; each page contributes whatever text
    pdfplumber extracts, in reading order.
    """

    def extract_pages(self, data: bytes) -> List[PageText]:
        """Extract per-page text.

        Args:
            data: Raw PDF bytes

        Returns:
            One PageText per page, numbered from 1

        Raises:
            ParseError: If the PDF cannot be opened or read
        """
        try:
            with pdfplumber.open(BytesIO(data)) as pdf:
                pages = [
                    PageText(page_number=page_num, text=page.extract_text() or "")
                    for page_num, page in enumerate(pdf.pages, start=1)
                ]
        except Exception as e:
            LOGGER.error(f"Failed to extract PDF text: {e}", exc_info=True)
            raise ParseError(f"Invalid PDF: {e}", original_error=e) from e

        LOGGER.info(f"Extracted text from {len(pages)} PDF pages", extra={"page_count": len(pages)})
        return pages
