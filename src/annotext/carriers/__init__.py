"""Carrier recognition and tracking URL templates."""

from annotext.carriers.recognizer import (
    DEFAULT_RECOGNIZER,
    CarrierRecognizer,
    ChecksumRecognizer,
    TrackingCandidate,
)
from annotext.carriers.templates import CARRIER_URL_TEMPLATES, url_for

__all__ = [
    "CARRIER_URL_TEMPLATES",
    "DEFAULT_RECOGNIZER",
    "CarrierRecognizer",
    "ChecksumRecognizer",
    "TrackingCandidate",
    "url_for",
]
