"""Text extraction for uploaded files.

PDFs go through pypdf first; when that yields too little text (scanned
documents) or fails to parse, the file is sent to a remote model for
extraction. Plain-text files are decoded as UTF-8.
"""

import base64
import io
import logging
from dataclasses import dataclass
from typing import Protocol

from fastapi.concurrency import run_in_threadpool
from openai import AsyncOpenAI
from pypdf import PdfReader

from backend.app.config import Settings
from backend.app.docs.errors import ExtractionError

logger = logging.getLogger(__name__)

PDF_EXTENSIONS = (".pdf",)
TEXT_EXTENSIONS = (".txt", ".md")
SUPPORTED_EXTENSIONS = PDF_EXTENSIONS + TEXT_EXTENSIONS

EXTRACTION_PROMPT = (
    "Extract ALL text content from this PDF document. Preserve the structure, "
    "headings, lists and tables as plain text. Return only the extracted text, "
    "with no commentary."
)


@dataclass(frozen=True)
class ExtractedText:
    """Text pulled from an uploaded file."""

    text: str
    method: str
    pages: int | None = None


class PdfTextFallback(Protocol):
    """Remote extractor used when a PDF has no usable text layer."""

    async def extract(self, data: bytes, file_name: str) -> str:
        ...


class OpenAIPdfExtractor:
    """Extracts PDF text by sending the file to an OpenAI model."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", *, max_tokens: int = 16000):
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens

    async def extract(self, data: bytes, file_name: str) -> str:
        """Send the PDF as a base64 file part and return the model's text."""
        encoded = base64.b64encode(data).decode("ascii")

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "file",
                            "file": {
                                "filename": file_name,
                                "file_data": f"data:application/pdf;base64,{encoded}",
                            },
                        },
                        {"type": "text", "text": EXTRACTION_PROMPT},
                    ],
                }
            ],
            temperature=0,
            max_tokens=self.max_tokens,
        )

        return response.choices[0].message.content or ""


def get_pdf_fallback(settings: Settings) -> PdfTextFallback | None:
    """OpenAI extractor if an API key is configured, else None (no fallback)."""
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        return OpenAIPdfExtractor(
            api_key=api_key.get_secret_value(),
            model=settings.extraction_model,
            max_tokens=settings.extraction_max_tokens,
        )
    logger.warning("No OpenAI API key configured, scanned PDFs cannot be extracted")
    return None


def is_supported(file_name: str) -> bool:
    return file_name.lower().endswith(SUPPORTED_EXTENSIONS)


def extract_pdf_text(data: bytes, *, min_chars: int = 100) -> ExtractedText:
    """Extract text from a text-based PDF with pypdf.

    Pages are joined with blank lines. Blocking; call it off the event loop.

    Raises:
        ExtractionError: If pypdf fails for any reason, or the trimmed text
            is min_chars characters or shorter
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        page_texts = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:
        raise ExtractionError(f"Could not read PDF: {e}") from e

    text = "\n\n".join(page_texts)
    if len(text.strip()) <= min_chars:
        raise ExtractionError(
            f"PDF has too little extractable text ({len(text.strip())} chars)"
        )

    logger.info(f"Extracted {len(text)} characters from {len(page_texts)} PDF pages")
    return ExtractedText(text=text, method="pypdf", pages=len(page_texts))


async def _extract_with_fallback(
    fallback: PdfTextFallback, data: bytes, file_name: str
) -> ExtractedText:
    try:
        text = await fallback.extract(data, file_name)
    except Exception as e:
        logger.error(f"Remote PDF extraction failed for {file_name}: {e}")
        raise ExtractionError(f"Could not extract text from {file_name}: {e}") from e

    if not text.strip():
        raise ExtractionError(f"Remote extraction returned no text for {file_name}")

    logger.info(f"Extracted {len(text)} characters from {file_name} with remote model")
    return ExtractedText(text=text, method="openai")


async def extract_text(
    data: bytes,
    file_name: str,
    *,
    min_chars: int = 100,
    fallback: PdfTextFallback | None = None,
) -> ExtractedText:
    """Extract text from an uploaded file, dispatching on its extension.

    Args:
        data: Raw file bytes
        file_name: Original file name (extension selects the extractor)
        min_chars: Trimmed PDF text must be longer than this to skip the fallback
        fallback: Remote extractor for scanned or unparseable PDFs

    Returns:
        ExtractedText with text, method ("pypdf", "openai" or "plain") and
        page count (pypdf only)

    Raises:
        ExtractionError: If the type is unsupported or no text could be read
    """
    name = file_name.lower()

    if name.endswith(PDF_EXTENSIONS):
        try:
            return await run_in_threadpool(extract_pdf_text, data, min_chars=min_chars)
        except ExtractionError as e:
            if fallback is None:
                raise
            logger.info(f"pypdf extraction unusable for {file_name} ({e}), trying remote model")
            return await _extract_with_fallback(fallback, data, file_name)

    if name.endswith(TEXT_EXTENSIONS):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ExtractionError(f"{file_name} is not valid UTF-8 text") from e
        return ExtractedText(text=text, method="plain")

    raise ExtractionError(f"Unsupported file type: {file_name}")
