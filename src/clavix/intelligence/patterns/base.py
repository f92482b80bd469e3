"""Pattern definitions shared by every optimization rule."""

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional

from ...core.types import DocumentType, Impact, OptimizationMode, OptimizationPhase, PatternMode
from ..analyzers.intent_detector import PromptIntent
from ..analyzers.quality_assessor import QualityDimension


@dataclass(frozen=True)
class PatternContext:
    """What a pattern knows about the prompt it is rewriting."""
    intent: PromptIntent
    mode: OptimizationMode
    original_prompt: str
    phase: Optional[OptimizationPhase] = None
    document_type: Optional[DocumentType] = None
    question_id: Optional[str] = None


@dataclass(frozen=True)
class Improvement:
    """A single change made (or declined) by a pattern."""
    dimension: QualityDimension
    description: str
    impact: Impact

    def to_dict(self) -> dict:
        return {
            "dimension": self.dimension.value,
            "description": self.description,
            "impact": self.impact.value,
        }


@dataclass(frozen=True)
class PatternResult:
    """Output of one pattern application."""
    enhanced_prompt: str
    applied: bool
    improvement: Improvement


Transform = Callable[[str, PatternContext], PatternResult]


@dataclass(frozen=True)
class Pattern:
    """
    A stateless prompt transformation rule.

    The ``transform`` function first checks whether the rule's target
    condition is already met (or does not apply to the content) and returns
    the text unchanged with ``applied=False``; otherwise it returns a new
    string that keeps the input verbatim.
    """
    id: str
    name: str
    description: str
    applicable_intents: FrozenSet[PromptIntent]
    mode: PatternMode
    priority: int
    transform: Transform = field(compare=False, repr=False)
    workflows: FrozenSet[OptimizationMode] = frozenset()
    phases: FrozenSet[OptimizationPhase] = frozenset()

    def apply(self, text: str, context: PatternContext) -> PatternResult:
        return self.transform(text, context)

    def applies_to(self, intent: PromptIntent) -> bool:
        return intent in self.applicable_intents

    def runs_in_phase(self, phase: Optional[OptimizationPhase]) -> bool:
        """No phase, or no declared phases, means every phase."""
        return phase is None or not self.phases or phase in self.phases

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "mode": self.mode.value,
            "priority": self.priority,
            "intents": sorted(intent.value for intent in self.applicable_intents),
            "workflows": sorted(mode.value for mode in self.workflows),
            "phases": sorted(phase.value for phase in self.phases),
        }


def skipped(
    text: str,
    dimension: QualityDimension,
    reason: str
) -> PatternResult:
    """Result for a pattern that leaves the text untouched."""
    return PatternResult(
        enhanced_prompt=text,
        applied=False,
        improvement=Improvement(dimension, reason, Impact.LOW),
    )


def applied(
    enhanced: str,
    dimension: QualityDimension,
    description: str,
    impact: Impact
) -> PatternResult:
    return PatternResult(
        enhanced_prompt=enhanced,
        applied=True,
        improvement=Improvement(dimension, description, impact),
    )


ALL_INTENTS: FrozenSet[PromptIntent] = frozenset(PromptIntent)


def intents(*members: PromptIntent) -> FrozenSet[PromptIntent]:
    return frozenset(members)
