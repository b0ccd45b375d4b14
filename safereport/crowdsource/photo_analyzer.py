"""
Photo analyzer for incident reports
Asks a vision model to suggest a title, category and description for a photo.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from safereport.core.config import settings
from safereport.core.constants import Category, DEFAULT_IMAGE_TYPE, parse_category
from safereport.core.exceptions import ClassificationError
from safereport.ingestion.gemini_client import GeminiClient

logger = logging.getLogger(__name__)

CLASSIFICATION_PROMPT = (
    "Analyze this emergency situation image and respond in this exact format "
    "without any asterisks or bullet points:\n"
    "TITLE: Write a clear, brief title\n"
    "TYPE: Choose one (Theft, Fire Outbreak, Medical Emergency, "
    "Natural Disaster, Violence, or Other)\n"
    "DESCRIPTION: Write a clear, concise description"
)


def _field_pattern(label: str) -> "re.Pattern[str]":
    # Label may follow numbering, markdown or a preamble on the same line
    return re.compile(
        rf"\b{label}[ \t*]*:[ \t*]*(?P<value>.+?)[ \t*]*$",
        re.IGNORECASE | re.MULTILINE,
    )


TITLE_PATTERN = _field_pattern("TITLE")
TYPE_PATTERN = _field_pattern("TYPE")
DESCRIPTION_PATTERN = _field_pattern("DESCRIPTION")


@dataclass
class ClassificationResult:
    """
    Suggested report fields.

    Any field the model did not answer is an empty string. `category` is
    always a Category label or empty; `raw_type` keeps the model's text.
    """
    title: str = ""
    category: str = ""
    description: str = ""
    raw_type: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.title and self.category and self.description)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the classify endpoint's response shape."""
        return {
            "title": self.title,
            "reportType": self.category,
            "description": self.description,
        }


def _extract(pattern: "re.Pattern[str]", text: str) -> str:
    match = pattern.search(text)
    return match.group("value").strip() if match else ""


def parse_classification(text: str) -> ClassificationResult:
    """
    Parse a labeled model answer.

    Each field is extracted independently, so a missing TYPE line still
    yields the title and description. A TYPE answer that is not a known
    category becomes "Other".
    """
    raw_type = _extract(TYPE_PATTERN, text)
    category = parse_category(raw_type, coerce=True)

    return ClassificationResult(
        title=_extract(TITLE_PATTERN, text),
        category=category.value if category else "",
        description=_extract(DESCRIPTION_PATTERN, text),
        raw_type=raw_type,
    )


class ImageClassifier:
    """
    Classifies incident photos with a vision-capable language model.

    Classification is an assist: callers should treat ClassificationError
    as non-fatal and let the reporter fill the fields by hand.
    """

    def __init__(self, client: Optional[GeminiClient] = None, prompt: str = CLASSIFICATION_PROMPT):
        """
        Initialize classifier.

        Args:
            client: Model client (defaults to a GeminiClient built from settings)
            prompt: Instruction sent with every image
        """
        self.client = client or GeminiClient(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.gemini_timeout_seconds,
        )
        self.prompt = prompt

    def classify(self, image_data: bytes, mime_type: str = DEFAULT_IMAGE_TYPE) -> ClassificationResult:
        """
        Suggest title, category and description for an image.

        Args:
            image_data: Raw image bytes
            mime_type: Image MIME type

        Returns:
            ClassificationResult (fields may be empty)

        Raises:
            ClassificationError: model unavailable or call failed
        """
        if not image_data:
            raise ClassificationError("Image is empty")

        text = self.client.generate_from_image(self.prompt, image_data, mime_type)
        result = parse_classification(text)

        if result.raw_type and result.category == Category.OTHER.value \
                and result.raw_type.lower() != Category.OTHER.value.lower():
            logger.info(f"Unrecognized model category {result.raw_type!r} coerced to Other")
        if not result.is_complete:
            logger.warning("Model answer was missing one or more fields")

        return result
