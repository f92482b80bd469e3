"""Prompt analyzers: intent detection and quality assessment."""

from .intent_detector import IntentDetector, IntentAnalysis, IntentCharacteristics, PromptIntent
from .quality_assessor import QualityAssessor, QualityDimension, QualityRating, QualityScore

__all__ = [
    "IntentDetector",
    "IntentAnalysis",
    "IntentCharacteristics",
    "PromptIntent",
    "QualityAssessor",
    "QualityDimension",
    "QualityRating",
    "QualityScore",
]
