"""Extraction of candidate form questions from a photo of a paper form.

The vision model's reply is untrusted: every candidate goes through the same
question validation as an API payload before it is offered back to the
organizer. Any failure along the way surfaces as `ExtractionFailed`.
"""
# app/services/ocr.py
import base64
import binascii
import json
import logging
import re
import time
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from mentorfeed.app.core.config import settings, OPENAI_CLIENT
from mentorfeed.app.core.errors import ExtractionFailed, InvalidQuestion
from mentorfeed.app.schemas.question import Question
from mentorfeed.app.services.form_validation import validate_question

logger = logging.getLogger(__name__)

OCR_PROMPT = """You are an expert at analyzing feedback forms and extracting questions in a structured format.

Analyze this feedback form image and extract ALL questions. Return ONLY a JSON array with this exact structure:

[
  {
    "type": "text|textarea|select|radio|rating",
    "label": "the complete question text",
    "required": true/false,
    "options": ["option1", "option2"],
    "minRating": 1,
    "maxRating": 10
  }
]

Question type detection:
- text: short answer fields, single-line inputs
- textarea: long answer fields, multi-line comments
- select: dropdown lists, single selection from many options
- radio: multiple choice with 2-5 options
- rating: star ratings, numeric scales (1-5, 1-10), Likert scales

Mark a question as required only when it shows an asterisk or says required.
Include "options" only for select/radio and copy every visible option verbatim.
Include "minRating"/"maxRating" only for rating questions; default to 1-5 if unclear.
Return valid JSON ONLY, without markdown or explanations. If there are no questions, return []."""

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"
DATA_URL_RE = re.compile(r"^data:image/[\w.+-]+;base64,")
FENCE_RE = re.compile(r"```(?:json)?\s*")


def decode_image(image_data: str, max_bytes: Optional[int] = None) -> tuple[str, bytes]:
    """Decode base64 image data (optionally a data URL).

    Returns:
        tuple: (mime type, raw bytes).

    Raises:
        ExtractionFailed: Not base64, too large, or neither PNG nor JPEG.
    """
    max_bytes = max_bytes or settings.OCR_MAX_IMAGE_BYTES
    payload = DATA_URL_RE.sub("", (image_data or "").strip(), count=1)
    if not payload:
        raise ExtractionFailed("Image data is required", field="imageData")
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ExtractionFailed("Invalid base64 image data", field="imageData")

    if len(raw) > max_bytes:
        size_mb = len(raw) / (1024 * 1024)
        raise ExtractionFailed(
            f"Image size ({size_mb:.2f}MB) exceeds {max_bytes / (1024 * 1024):.0f}MB limit. Please compress the image.",
            field="imageData",
        )

    if raw.startswith(PNG_MAGIC):
        return "image/png", raw
    if raw.startswith(JPEG_MAGIC):
        return "image/jpeg", raw
    raise ExtractionFailed("Only PNG and JPEG images are supported", field="imageData")


def parse_candidates(content: Optional[str]) -> list[Any]:
    if not content:
        raise ExtractionFailed("No content received from AI")
    text = FENCE_RE.sub("", content).strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        raise ExtractionFailed("Failed to parse AI response. The image might be unclear or not contain a valid form.")
    if not isinstance(data, list):
        raise ExtractionFailed("AI response is not an array")
    return data


def normalize_candidate(item: Any, index: int, stamp: int) -> dict:
    if not isinstance(item, dict):
        raise ExtractionFailed(f"Question {index + 1} is not an object")
    out = {
        "id": f"q{stamp}_{index}",
        "type": item.get("type"),
        "label": item["label"].strip() if isinstance(item.get("label"), str) else item.get("label"),
        "required": bool(item.get("required", False)),
    }
    for key in ("options", "minRating", "maxRating"):
        if item.get(key) is not None:
            out[key] = item[key]
    return out


class FormCandidateExtractor:
    """Turns an image of a form into validated candidate questions."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, model_name: Optional[str] = None):
        self.client = client or OPENAI_CLIENT
        self.model_name = model_name or settings.OCR_MODEL_NAME

    async def _complete(self, data_url: str) -> Optional[str]:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model_name,
                messages=[{
                    "role": "user",
                    "content": [
                        {"type": "text", "text": OCR_PROMPT},
                        {"type": "image_url", "image_url": {"url": data_url}},
                    ],
                }],
                max_tokens=2000,
                temperature=0.2,
            )
        except openai.AuthenticationError:
            raise ExtractionFailed("Invalid OCR API key. Please check OPENAI_API_KEY.")
        except openai.RateLimitError:
            raise ExtractionFailed("Rate limit exceeded. Please try again in a few moments.")
        except openai.APIStatusError as e:
            if e.status_code == 402:
                raise ExtractionFailed("Insufficient credits on the OCR provider.")
            raise ExtractionFailed(f"OCR extraction failed: {e.message}")
        except openai.APIError as e:
            raise ExtractionFailed(f"OCR extraction failed: {e}")

        if not completion.choices:
            return None
        return completion.choices[0].message.content

    async def extract(self, image_data: str) -> list[Question]:
        mime, raw = decode_image(image_data)
        if self.client is OPENAI_CLIENT and not settings.OPENAI_API_KEY:
            raise ExtractionFailed("OPENAI_API_KEY is not configured. Please add it to your .env file.")

        data_url = f"data:{mime};base64,{base64.b64encode(raw).decode()}"
        candidates = parse_candidates(await self._complete(data_url))

        stamp = int(time.time() * 1000)
        questions: list[Question] = []
        for index, item in enumerate(candidates):
            candidate = normalize_candidate(item, index, stamp)
            try:
                questions.append(validate_question(candidate, position=index + 1))
            except InvalidQuestion as e:
                logger.warning("Extracted question rejected: %s", e.message)
                raise ExtractionFailed(f"Extracted {e.message[0].lower()}{e.message[1:]}", details=e.details)
        return questions


extractor = None


def get_form_extractor() -> FormCandidateExtractor:
    global extractor
    if extractor is None:
        extractor = FormCandidateExtractor()
    return extractor
