"""Document sources: PDF page text and Final Draft XML."""

from app.services.parsing.fdx_parser import parse_fdx
from app.services.parsing.pdf_source import PdfPageTextSource

__all__ = ["parse_fdx", "PdfPageTextSource"]
