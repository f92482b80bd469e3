"""Core type definitions shared across Clavix."""

from enum import Enum
from typing import Optional


class OptimizationMode(Enum):
    """Workflow context an optimization runs in."""
    FAST = "fast"
    DEEP = "deep"
    PRD = "prd"
    CONVERSATIONAL = "conversational"

    @classmethod
    def parse(cls, value) -> Optional["OptimizationMode"]:
        """Return the matching mode, or None for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None

    @property
    def is_workflow(self) -> bool:
        """True for the PRD and conversational workflows."""
        return self in (OptimizationMode.PRD, OptimizationMode.CONVERSATIONAL)


class PatternMode(Enum):
    """Which of the fast/deep modes a pattern participates in."""
    FAST = "fast"
    DEEP = "deep"
    BOTH = "both"

    def matches(self, mode: OptimizationMode) -> bool:
        """Check whether a pattern with this mode runs in ``mode``."""
        return self is PatternMode.BOTH or self.value == mode.value


class OptimizationPhase(Enum):
    """Phase of a PRD or conversational workflow."""
    QUESTION_VALIDATION = "question-validation"
    OUTPUT_GENERATION = "output-generation"
    SUMMARIZATION = "summarization"


class DocumentType(Enum):
    """Kinds of documents produced by the PRD workflow."""
    FULL_PRD = "full-prd"
    QUICK_PRD = "quick-prd"
    MINI_PRD = "mini-prd"
    PROMPT = "prompt"


class Impact(Enum):
    """Impact tier of a single improvement."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
