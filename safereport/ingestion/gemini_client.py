"""
Google Gemini API Client for SafeReport

Thin client for the `generateContent` REST endpoint, used to send an image
plus a text prompt to a vision-capable model and read back the text answer.

API Documentation: https://ai.google.dev/api/generate-content
"""

import base64
import logging
from typing import Optional

import httpx

from safereport.core.exceptions import ClassificationError

logger = logging.getLogger(__name__)


class GeminiClient:
    """
    Client for the Google Generative Language API.

    Usage:
        with GeminiClient(api_key="your_key") as client:
            text = client.generate_from_image(prompt, image_bytes, "image/jpeg")
    """

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-pro",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key (calls fail with ClassificationError when missing)
            model: Model name
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self) -> None:
        self._client.close()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def generate_from_image(self, prompt: str, image_data: bytes, mime_type: str) -> str:
        """
        Ask the model about an image.

        Args:
            prompt: Instruction text
            image_data: Raw image bytes
            mime_type: Image MIME type

        Returns:
            Concatenated text parts of the first candidate

        Raises:
            ClassificationError: missing key, HTTP failure or empty answer
        """
        if not self.is_configured:
            raise ClassificationError("Gemini API key not configured")

        url = f"{self.BASE_URL}/{self.model}:generateContent"
        body = {
            "contents": [
                {
                    "parts": [
                        {"text": prompt},
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(image_data).decode("ascii"),
                            }
                        },
                    ]
                }
            ]
        }

        logger.info(f"Requesting image analysis from {self.model} ({len(image_data)} bytes)")
        try:
            response = self._client.post(url, params={"key": self.api_key}, json=body)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini returned HTTP {e.response.status_code}")
            raise ClassificationError() from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Gemini request failed: {e}")
            raise ClassificationError() from e

        return self._extract_text(payload)

    def _extract_text(self, payload: dict) -> str:
        """Pull the answer text out of a generateContent response."""
        candidates = payload.get("candidates") or []
        if not candidates:
            raise ClassificationError("Model returned no candidates")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        if not text.strip():
            raise ClassificationError("Model returned an empty answer")
        return text
