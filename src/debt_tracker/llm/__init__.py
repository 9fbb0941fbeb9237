"""LLM second opinion on whether code is machine-generated."""

from .detector import DETECTION_TOOL, SecondOpinionClient
from .models import AIVerdict

__all__ = ["SecondOpinionClient", "AIVerdict", "DETECTION_TOOL"]
