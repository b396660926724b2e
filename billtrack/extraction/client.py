from __future__ import annotations

import base64
import logging
import os
import re

import anthropic
from pydantic import ValidationError

from billtrack.errors import ExtractionError, ExtractionTimeoutError, UpstreamUnavailableError
from billtrack.extraction.prompts import SYSTEM_PROMPT, build_user_prompt
from billtrack.models.extraction import ExtractionResult
from billtrack.settings import settings
from billtrack.uploads import file_extension

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")

EXTENSION_MEDIA_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}

UNSUPPORTED_FORMAT_MESSAGE = (
    "Unsupported file format for AI analysis. "
    "Please use JPG or PNG image files. "
    "If you have a PDF, convert it to an image first using an online converter or by taking a screenshot."
)
UNAVAILABLE_MESSAGE = (
    "AI service error: The language model is temporarily unavailable. Please try again in a few moments."
)
AUTH_MESSAGE = "AI service error: Make sure your Anthropic API key is valid and has access to the configured model."
TIMEOUT_MESSAGE = "AI service timed out while reading the bill. Please try again later."


def detect_media_type(data: bytes, filename: str) -> str:
    """Sniff the image format from its magic bytes, falling back to the extension."""
    if data[:3] == b"\xff\xd8\xff":
        return "image/jpeg"
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "image/png"
    if data[:4] == b"GIF8":
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return EXTENSION_MEDIA_TYPES.get(file_extension(filename), "image/jpeg")


def strip_code_fence(reply: str) -> str:
    return _FENCE_RE.sub("", reply.strip()).strip()


def parse_reply(reply: str) -> ExtractionResult:
    """Validate the model's reply against the extraction schema, strictly."""
    try:
        return ExtractionResult.model_validate_json(strip_code_fence(reply), strict=True)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'reply'}: {err['msg']}" for err in exc.errors()
        )
        logger.warning("Extraction reply rejected: %s", problems)
        raise ExtractionError(f"Failed to parse bill document: {problems}") from exc


class BillExtractor:
    """Client for the vision model that reads bill images.

    One request per call, no retries. The request is bounded by ``timeout``
    seconds and a timeout is reported separately from other upstream failures.
    """

    def __init__(
        self,
        client: anthropic.Anthropic,
        model: str,
        max_tokens: int = 1024,
        timeout: float = 60.0,
    ) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout

    def _request(self, data: bytes, filename: str) -> anthropic.types.Message:
        media_type = detect_media_type(data, filename)
        logger.info(
            "Extraction request: file=%s media_type=%s size=%d model=%s",
            filename,
            media_type,
            len(data),
            self.model,
        )
        try:
            return self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=SYSTEM_PROMPT,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": media_type,
                                    "data": base64.b64encode(data).decode("ascii"),
                                },
                            },
                            {"type": "text", "text": build_user_prompt(filename)},
                        ],
                    }
                ],
                timeout=self.timeout,
            )
        except anthropic.APITimeoutError as exc:
            logger.error("Extraction timed out after %.1fs for %s", self.timeout, filename)
            raise ExtractionTimeoutError(TIMEOUT_MESSAGE) from exc
        except anthropic.APIConnectionError as exc:
            logger.error("Extraction request failed to connect: %s", exc)
            raise UpstreamUnavailableError(UNAVAILABLE_MESSAGE) from exc
        except anthropic.BadRequestError as exc:
            logger.warning("Extraction request rejected: %s", exc.message)
            if "media_type" in exc.message:
                raise ExtractionError(UNSUPPORTED_FORMAT_MESSAGE) from exc
            raise ExtractionError(f"Failed to parse bill document: {exc.message}") from exc
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError, anthropic.NotFoundError) as exc:
            logger.error("Extraction request not authorized: status=%s", exc.status_code)
            raise UpstreamUnavailableError(AUTH_MESSAGE) from exc
        except anthropic.APIStatusError as exc:
            logger.error("Extraction request failed: status=%s", exc.status_code)
            raise UpstreamUnavailableError(UNAVAILABLE_MESSAGE) from exc

    def extract(self, data: bytes, filename: str) -> ExtractionResult:
        response = self._request(data, filename)
        reply = next((block.text for block in response.content if block.type == "text"), None)
        if reply is None:
            logger.warning("Extraction reply for %s had no text block", filename)
            raise ExtractionError("Failed to parse bill document: no text response from AI")

        result = parse_reply(reply)
        logger.info(
            "Extraction complete: file=%s type=%s period=%r confidence=%.2f",
            filename,
            result.bill_type.value,
            result.period,
            result.confidence,
        )
        return result


def get_bill_extractor() -> BillExtractor:
    api_key = settings.anthropic_api_key or os.environ.get("ANTHROPIC_API_KEY")
    if not api_key:
        logger.error("No Anthropic API key: set BILLTRACK_ANTHROPIC_API_KEY or ANTHROPIC_API_KEY")
        raise UpstreamUnavailableError(AUTH_MESSAGE)
    client = anthropic.Anthropic(
        api_key=api_key,
        max_retries=0,
        timeout=settings.extraction_timeout,
    )
    return BillExtractor(
        client,
        model=settings.anthropic_model,
        max_tokens=settings.extraction_max_tokens,
        timeout=settings.extraction_timeout,
    )
