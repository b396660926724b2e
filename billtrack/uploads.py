from __future__ import annotations

import logging

from billtrack.errors import InvalidInputError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")
# PDFs are recognized only to answer with conversion instructions.
ACCEPTED_EXTENSIONS = (*IMAGE_EXTENSIONS, "pdf")

PDF_EXTENSION_MESSAGE = (
    "PDF files cannot be processed directly by the AI image analysis system. "
    "Please convert your PDF to an image first: "
    "1) Take a photo of the bill, "
    '2) Use an online PDF-to-JPG converter (search "PDF to JPG"), '
    "3) Open PDF and take a screenshot, or "
    "4) Use a free tool like SmallPDF or ILovePDF. "
    "Then upload the JPG or PNG image instead."
)

PDF_CONTENT_MESSAGE = (
    "PDF files are not supported for direct AI analysis. "
    "Please convert your PDF to JPG or PNG format first. "
    "Use an online converter like SmallPDF.com or ILovePDF.com"
)


def file_extension(filename: str) -> str:
    return filename.lower().rsplit(".", 1)[-1] if "." in filename else ""


def validate_upload(filename: str, data: bytes, max_size: int) -> None:
    """Reject uploads the vision model cannot read, with instructions on what to send instead."""
    if not data:
        raise InvalidInputError("File field is required")

    if len(data) > max_size:
        size_mb = len(data) / (1024 * 1024)
        limit_mb = max_size / (1024 * 1024)
        logger.warning("Upload rejected: %s is %.2fMB", filename, size_mb)
        raise InvalidInputError(f"File size exceeds {limit_mb:g}MB limit ({size_mb:.2f}MB)")

    ext = file_extension(filename)
    if ext not in ACCEPTED_EXTENSIONS:
        logger.warning("Upload rejected: %s has extension %r", filename, ext)
        raise InvalidInputError(
            f"Invalid file type. Please upload a JPG, PNG, GIF or WEBP image (received: .{ext})"
        )

    if ext == "pdf":
        logger.info("Upload rejected: %s is a PDF", filename)
        raise InvalidInputError(PDF_EXTENSION_MESSAGE)

    if data[:4] == b"%PDF":
        logger.info("Upload rejected: %s has a PDF header", filename)
        raise InvalidInputError(PDF_CONTENT_MESSAGE)
