"""Prompt intelligence: intent, patterns, quality and escalation."""

from .analyzers import (
    IntentAnalysis,
    IntentDetector,
    PromptIntent,
    QualityAssessor,
    QualityDimension,
    QualityScore,
)
from .patterns import Pattern, PatternContext, PatternLibrary, PatternResult
from .optimizer import (
    AnswerValidation,
    ContextOverride,
    EscalationAnalysis,
    OptimizationResult,
    UniversalOptimizer,
)
from .conversation_tracker import ConversationQualityTracker

__all__ = [
    "IntentAnalysis",
    "IntentDetector",
    "PromptIntent",
    "QualityAssessor",
    "QualityDimension",
    "QualityScore",
    "Pattern",
    "PatternContext",
    "PatternLibrary",
    "PatternResult",
    "AnswerValidation",
    "ContextOverride",
    "EscalationAnalysis",
    "OptimizationResult",
    "UniversalOptimizer",
    "ConversationQualityTracker",
]
