"""Main prompt optimization orchestrator."""

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, List, Union

from ..core.exceptions import PatternError
from ..core.types import DocumentType, Impact, OptimizationMode, OptimizationPhase
from .analyzers.intent_detector import IntentDetector, IntentAnalysis, PromptIntent
from .analyzers.quality_assessor import QualityAssessor, QualityScore
from .patterns.base import Improvement, PatternContext
from .patterns.library import PatternLibrary
from .text import round_half_up

logger = logging.getLogger(__name__)


@dataclass
class ContextOverride:
    """Caller-supplied context for PRD and conversational runs."""
    intent: Optional[Union[PromptIntent, str]] = None
    phase: Optional[OptimizationPhase] = None
    document_type: Optional[DocumentType] = None
    question_id: Optional[str] = None


@dataclass
class PatternSummary:
    """A pattern that changed the prompt."""
    name: str
    description: str
    impact: Impact

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "description": self.description, "impact": self.impact.value}


@dataclass
class OptimizationResult:
    """Result of one optimize() call."""
    original: str
    enhanced: str
    intent: IntentAnalysis
    quality: QualityScore
    mode: OptimizationMode
    improvements: List[Improvement] = field(default_factory=list)
    applied_patterns: List[PatternSummary] = field(default_factory=list)
    errors: List[PatternError] = field(default_factory=list)
    processing_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "original": self.original,
            "enhanced": self.enhanced,
            "intent": self.intent.to_dict(),
            "quality": self.quality.to_dict(),
            "mode": self.mode.value,
            "improvements": [i.to_dict() for i in self.improvements],
            "applied_patterns": [p.to_dict() for p in self.applied_patterns],
            "errors": [{"pattern_id": e.pattern_id, "message": e.message} for e in self.errors],
            "processing_time_ms": self.processing_time_ms,
        }


@dataclass
class EscalationReason:
    """One factor contributing to a deep-mode recommendation."""
    factor: str
    contribution: int
    description: str


@dataclass
class EscalationAnalysis:
    """Whether a fast-mode result should be re-run in deep mode."""
    should_escalate: bool
    escalation_score: int
    escalation_confidence: str
    reasons: List[EscalationReason] = field(default_factory=list)
    deep_mode_value: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "should_escalate": self.should_escalate,
            "escalation_score": self.escalation_score,
            "escalation_confidence": self.escalation_confidence,
            "reasons": [
                {"factor": r.factor, "contribution": r.contribution, "description": r.description}
                for r in self.reasons
            ],
            "deep_mode_value": self.deep_mode_value,
        }


@dataclass
class AnswerValidation:
    """Outcome of validating a single PRD question answer."""
    needs_clarification: bool
    quality: int
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "needs_clarification": self.needs_clarification,
            "quality": self.quality,
        }
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass
class DetailedRecommendation:
    message: str
    quality_level: str
    escalation: Optional[EscalationAnalysis] = None


class UniversalOptimizer:
    """
    Main orchestrator for prompt optimization.

    Detects intent, applies the patterns selected for the mode in priority
    order, and scores the result. Holds no state between calls; a pattern
    that raises is logged and skipped without losing earlier changes.
    """

    ESCALATION_THRESHOLD = 45
    MEDIUM_CONFIDENCE_THRESHOLD = 60
    HIGH_CONFIDENCE_THRESHOLD = 75
    CLARIFICATION_THRESHOLD = 50

    ESCALATION_INTENTS = (PromptIntent.PLANNING, PromptIntent.PRD_GENERATION)
    COMPLEX_INTENTS = (PromptIntent.MIGRATION, PromptIntent.SECURITY_REVIEW)

    ANSWER_SUGGESTIONS = {
        "q1": ["the problem you're solving", "why this matters", "who benefits"],
        "q2": ["specific features", "user actions", "key functionality"],
        "q3": ["technologies", "frameworks", "constraints"],
        "q4": ["what's explicitly out of scope", "features to avoid", "limitations"],
        "q5": ["additional context", "constraints", "timeline considerations"],
    }

    def __init__(
        self,
        intent_detector: Optional[IntentDetector] = None,
        pattern_library: Optional[PatternLibrary] = None,
        quality_assessor: Optional[QualityAssessor] = None
    ):
        self.intent_detector = intent_detector or IntentDetector()
        self.pattern_library = pattern_library or PatternLibrary()
        self.quality_assessor = quality_assessor or QualityAssessor()

    def optimize(
        self,
        prompt: str,
        mode: Union[OptimizationMode, str] = OptimizationMode.FAST,
        context_override: Optional[ContextOverride] = None
    ) -> OptimizationResult:
        """
        Optimize a prompt.

        Args:
            prompt: The prompt to optimize (may be empty)
            mode: fast, deep, prd or conversational
            context_override: Intent, phase, document type or question id

        Returns:
            OptimizationResult with the enhanced prompt and its quality
        """
        start_time = time.time()
        prompt = prompt or ""
        mode = self._resolve_mode(mode)
        override = context_override or ContextOverride()

        intent = self.intent_detector.analyze(prompt)
        if override.intent is not None:
            forced = PromptIntent.parse(override.intent)
            if forced is None:
                logger.warning("Ignoring unknown intent override %r", override.intent)
            else:
                intent = replace(intent, primary_intent=forced)

        if mode.is_workflow:
            patterns = self.pattern_library.select_patterns_for_mode(
                mode, intent.primary_intent, override.phase
            )
        else:
            patterns = self.pattern_library.select_patterns(intent.primary_intent, mode)

        context = PatternContext(
            intent=intent.primary_intent,
            mode=mode,
            original_prompt=prompt,
            phase=override.phase,
            document_type=override.document_type,
            question_id=override.question_id,
        )

        enhanced = prompt
        improvements: List[Improvement] = []
        applied: List[PatternSummary] = []
        errors: List[PatternError] = []

        for pattern in patterns:
            try:
                result = pattern.apply(enhanced, context)
            except Exception as e:
                error = PatternError(f"Error applying pattern {pattern.id}: {e}", pattern_id=pattern.id, cause=e)
                logger.error(error.message, exc_info=True)
                errors.append(error)
                continue

            if result.applied:
                enhanced = result.enhanced_prompt
                improvements.append(result.improvement)
                applied.append(PatternSummary(
                    name=pattern.name,
                    description=pattern.description,
                    impact=result.improvement.impact,
                ))

        quality = self.quality_assessor.assess(prompt, enhanced, intent)
        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug(
            "Optimized prompt in %s mode: intent=%s, %d/%d patterns applied, quality=%d",
            mode.value, intent.primary_intent.value, len(applied), len(patterns), quality.overall
        )

        return OptimizationResult(
            original=prompt,
            enhanced=enhanced,
            intent=intent,
            quality=quality,
            mode=mode,
            improvements=improvements,
            applied_patterns=applied,
            errors=errors,
            processing_time_ms=elapsed_ms,
        )

    def validate_prd_answer(self, answer: str, question_id: str) -> AnswerValidation:
        """
        Check whether a PRD question answer is too vague to use.

        Answers scoring below 50 get a one-line suggestion tailored to the
        question.
        """
        result = self.optimize(
            answer,
            OptimizationMode.PRD,
            ContextOverride(
                intent=PromptIntent.PRD_GENERATION,
                phase=OptimizationPhase.QUESTION_VALIDATION,
                question_id=question_id,
            ),
        )

        if result.quality.overall < self.CLARIFICATION_THRESHOLD:
            return AnswerValidation(
                needs_clarification=True,
                quality=result.quality.overall,
                suggestion=self._friendly_suggestion(result, question_id),
            )
        return AnswerValidation(needs_clarification=False, quality=result.quality.overall)

    def should_recommend_deep_mode(self, result: OptimizationResult) -> bool:
        """Shorthand for ``analyze_escalation(result).should_escalate``."""
        return self.analyze_escalation(result).should_escalate

    def analyze_escalation(self, result: OptimizationResult) -> EscalationAnalysis:
        """
        Score whether a result would benefit from deep mode.

        Quality factors use the original prompt, not the enhanced one. The
        contributions are summed without a cap and only the reported score
        is clamped to 100, so the listed reasons may add up to more than
        ``escalation_score``.
        """
        original_quality = self.quality_assessor.assess_quality(result.original, result.intent)
        intent = result.intent
        primary = intent.primary_intent
        reasons: List[EscalationReason] = []

        if primary in self.ESCALATION_INTENTS:
            reasons.append(EscalationReason(
                "intent-type", 30,
                f"{primary.value} tasks benefit from comprehensive analysis",
            ))

        if intent.confidence < 60:
            reasons.append(EscalationReason(
                "low-confidence", round_half_up((60 - intent.confidence) / 3),
                f"Intent detection confidence is low ({intent.confidence}%)",
            ))

        if original_quality.overall < 65:
            reasons.append(EscalationReason(
                "low-quality", round_half_up((65 - original_quality.overall) / 2.6),
                f"Original prompt quality is below threshold ({original_quality.overall}/100)",
            ))

        if original_quality.completeness < 60:
            reasons.append(EscalationReason(
                "missing-completeness", 15,
                f"Missing required details (completeness: {original_quality.completeness}%)",
            ))

        if original_quality.specificity < 60:
            reasons.append(EscalationReason(
                "low-specificity", 15,
                f"Prompt lacks concrete details (specificity: {original_quality.specificity}%)",
            ))

        if intent.characteristics.is_open_ended and intent.characteristics.needs_structure:
            reasons.append(EscalationReason(
                "high-ambiguity", 20,
                "Open-ended request without clear structure",
            ))

        if len(result.original) < 50 and original_quality.completeness < 70:
            reasons.append(EscalationReason(
                "length-mismatch", 15,
                "Very short prompt with incomplete requirements",
            ))

        if primary in self.COMPLEX_INTENTS:
            reasons.append(EscalationReason(
                "complex-intent", 20,
                f"{primary.value} requires thorough analysis",
            ))

        total = sum(r.contribution for r in reasons)
        if total >= self.HIGH_CONFIDENCE_THRESHOLD:
            confidence = "high"
        elif total >= self.MEDIUM_CONFIDENCE_THRESHOLD:
            confidence = "medium"
        else:
            confidence = "low"

        return EscalationAnalysis(
            should_escalate=total >= self.ESCALATION_THRESHOLD,
            escalation_score=max(0, min(total, 100)),
            escalation_confidence=confidence,
            reasons=reasons,
            deep_mode_value=self._deep_mode_value(primary, reasons),
        )

    def get_recommendation(self, result: OptimizationResult) -> Optional[str]:
        """Short guidance line for the CLI, or None when nothing to say."""
        if result.mode is OptimizationMode.FAST:
            escalation = self.analyze_escalation(result)
            if escalation.should_escalate:
                return f"{escalation.deep_mode_value} Run: clavix deep"

        overall = result.quality.overall
        if overall >= 90:
            return "Excellent! Your prompt is AI-ready."
        if overall >= 80:
            return "Good quality. Ready to use!"
        if overall >= 70:
            return "Decent quality. Consider the improvements listed above."
        return None

    def get_detailed_recommendation(self, result: OptimizationResult) -> DetailedRecommendation:
        escalation = (
            self.analyze_escalation(result)
            if result.mode is OptimizationMode.FAST else None
        )

        overall = result.quality.overall
        if overall >= 90:
            level, message = "excellent", "Excellent! Your prompt is AI-ready."
        elif overall >= 80:
            level, message = "good", "Good quality. Ready to use!"
        elif overall >= 70:
            level, message = "decent", "Decent quality. Consider the improvements listed above."
        else:
            level, message = "needs-work", "This prompt needs improvement for best results."

        if escalation is not None and escalation.should_escalate:
            message = f"{escalation.deep_mode_value} Run: clavix deep"

        return DetailedRecommendation(message=message, quality_level=level, escalation=escalation)

    def get_statistics(self) -> Dict[str, int]:
        return {
            "total_patterns": self.pattern_library.get_pattern_count(),
            "fast_mode_patterns": len(self.pattern_library.get_patterns_by_mode(OptimizationMode.FAST)),
            "deep_mode_patterns": len(self.pattern_library.get_patterns_by_mode(OptimizationMode.DEEP)),
        }

    def _resolve_mode(self, mode: Union[OptimizationMode, str]) -> OptimizationMode:
        resolved = OptimizationMode.parse(mode)
        if resolved is None:
            logger.warning("Unknown optimization mode %r, falling back to fast", mode)
            return OptimizationMode.FAST
        return resolved

    def _friendly_suggestion(self, result: OptimizationResult, question_id: str) -> str:
        options = self.ANSWER_SUGGESTIONS.get(question_id, self.ANSWER_SUGGESTIONS["q5"])

        if result.quality.completeness < 40:
            detail = options[min(1, len(options) - 1)]
        elif result.quality.specificity < 40:
            detail = options[min(2, len(options) - 1)]
        else:
            detail = options[0]

        return f"adding {detail} would help"

    @staticmethod
    def _deep_mode_value(primary: PromptIntent, reasons: List[EscalationReason]) -> str:
        factors = {r.factor for r in reasons}
        benefits = []

        if primary in UniversalOptimizer.ESCALATION_INTENTS:
            benefits.append("structured implementation plan")
        if factors & {"low-quality", "missing-completeness"}:
            benefits.append("comprehensive requirements extraction")
        if "high-ambiguity" in factors:
            benefits.append("alternative approaches and trade-offs")
        if "low-specificity" in factors:
            benefits.append("concrete examples and specifications")
        if primary is PromptIntent.MIGRATION:
            benefits.append("migration checklist and risk assessment")
        if primary is PromptIntent.SECURITY_REVIEW:
            benefits.append("security checklist and threat analysis")
        benefits.append("validation checklist")

        return f"Deep mode would provide: {', '.join(benefits)}."
