"""Rendering, text-extraction and type-sniffing engines.

The pipeline depends on the three protocols below, not on a concrete
library.  The default implementations wrap ``pypdfium2`` (+ Pillow),
``pdfplumber`` and ``filetype``.
"""

from __future__ import annotations

import io
import logging
import threading
from typing import Protocol, runtime_checkable

import filetype
import pdfplumber
import pypdfium2 as pdfium

from fyde.exceptions import ExtractTextError, RenderPreviewError

logger = logging.getLogger(__name__)

PREVIEW_SCALE = 1.0
WHITE = (255, 255, 255, 255)

# PDFium is not thread-safe: every call into it, across all renderer
# instances, goes through this lock.
_PDFIUM_LOCK = threading.Lock()


# ------------------------------------------------------------------
# Protocols
# ------------------------------------------------------------------


@runtime_checkable
class PreviewRenderer(Protocol):
    """Turns document bytes into a PNG preview of its first renderable page."""

    def render(self, content: bytes) -> bytes: ...


@runtime_checkable
class TextExtractor(Protocol):
    """Turns document bytes into a plain-text transcript of every page."""

    def extract(self, content: bytes) -> str: ...


@runtime_checkable
class TypeSniffer(Protocol):
    """Guesses a media type from content bytes; ``None`` when unknown."""

    def sniff(self, content: bytes) -> str | None: ...


# ------------------------------------------------------------------
# Default implementations
# ------------------------------------------------------------------


class PdfiumPreviewRenderer:
    """Render with PDFium and encode the bitmap as PNG."""

    def __init__(
        self,
        scale: float = PREVIEW_SCALE,
        background: tuple[int, int, int, int] = WHITE,
    ) -> None:
        self._scale = scale
        self._background = background

    def render(self, content: bytes) -> bytes:
        with _PDFIUM_LOCK:
            png = self._render_first_page(content)
        if png is None:
            msg = "the document has no renderable page"
            raise RenderPreviewError(msg)
        return png

    def _render_first_page(self, content: bytes) -> bytes | None:
        try:
            pdf = pdfium.PdfDocument(content)
        except pdfium.PdfiumError as exc:
            msg = f"failed to open the document for rendering: {exc}"
            raise RenderPreviewError(msg) from exc

        try:
            for index in range(len(pdf)):
                png = self._render_page(pdf, index)
                if png is not None:
                    return png
            return None
        finally:
            pdf.close()

    def _render_page(self, pdf: pdfium.PdfDocument, index: int) -> bytes | None:
        try:
            page = pdf[index]
        except pdfium.PdfiumError:
            logger.debug("Page %d could not be loaded, trying the next one", index, exc_info=True)
            return None

        buffer = io.BytesIO()
        try:
            bitmap = page.render(scale=self._scale, fill_color=self._background)
            try:
                bitmap.to_pil().save(buffer, format="PNG")
            finally:
                bitmap.close()
        except pdfium.PdfiumError:
            logger.debug("Page %d could not be rendered, trying the next one", index, exc_info=True)
            return None
        finally:
            page.close()
        return buffer.getvalue()


class PdfplumberTextExtractor:
    """Extract text from every page, in page order, joined by newlines."""

    def extract(self, content: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            msg = f"failed to extract the text from the pdf: {exc}"
            raise ExtractTextError(msg) from exc
        return "\n".join(pages)


class FiletypeSniffer:
    """Magic-number based detection via the ``filetype`` package."""

    def sniff(self, content: bytes) -> str | None:
        kind = filetype.guess(content)
        if kind is None:
            return None
        return kind.mime.lower()
