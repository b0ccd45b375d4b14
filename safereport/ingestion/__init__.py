"""
SafeReport - Ingestion Module
HTTP clients for the external services the intake flow relies on.
"""

from safereport.ingestion.gemini_client import GeminiClient
from safereport.ingestion.geocoding_client import GeocodingClient, GeoLocation

__all__ = [
    "GeminiClient",
    "GeocodingClient",
    "GeoLocation",
]
