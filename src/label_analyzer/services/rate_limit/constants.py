"""Constants for per-caller rate limiting."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class OperationClass(StrEnum):
    """Operation classes with independent quotas."""

    OCR = "ocr"
    CLASSIFICATION = "classification"
    PHOTO_UPLOAD = "photo_upload"
    GENERAL = "general"


DEFAULT_SWEEP_INTERVAL_SECONDS: Final[float] = 600.0
