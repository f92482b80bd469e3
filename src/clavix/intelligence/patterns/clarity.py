"""Patterns that sharpen what the prompt is asking for."""

from ...core.types import Impact, OptimizationMode, OptimizationPhase, PatternMode
from ..analyzers.intent_detector import PromptIntent
from ..analyzers.quality_assessor import (
    HEDGE_WORDS,
    OBJECTIVE_RE,
    VAGUE_REQUESTS,
    QualityDimension,
)
from ..text import extract_sentences, matched_keywords
from .base import ALL_INTENTS, Pattern, PatternContext, PatternResult, applied, intents, skipped

MAX_LISTED = 5


def clarify_objective(text: str, context: PatternContext) -> PatternResult:
    """Lead with an explicit objective taken from the first sentence."""
    if not text.strip():
        return skipped(text, QualityDimension.CLARITY, "Empty prompt")
    if OBJECTIVE_RE.search(text):
        return skipped(text, QualityDimension.CLARITY, "Objective already stated")

    sentences = extract_sentences(text)
    if len(sentences) <= 1:
        enhanced = "**Objective:** " + text
    else:
        enhanced = f"**Objective:** {sentences[0]}\n\n{text}"

    return applied(
        enhanced,
        QualityDimension.CLARITY,
        "Stated the objective explicitly",
        Impact.MEDIUM,
    )


def enhance_actionability(text: str, context: PatternContext) -> PatternResult:
    """Ask for concrete replacements of vague requests."""
    if "### Make It Actionable" in text:
        return skipped(text, QualityDimension.ACTIONABILITY, "Actionability guidance already present")

    vague = matched_keywords(text, VAGUE_REQUESTS)
    if not vague:
        return skipped(text, QualityDimension.ACTIONABILITY, "No vague requests found")

    lines = [f'- Replace "{phrase}" with the concrete change you expect' for phrase in vague[:MAX_LISTED]]
    lines.append("- Name the deliverable (file, component, endpoint or document)")
    enhanced = text + "\n\n### Make It Actionable\n" + "\n".join(lines)

    return applied(
        enhanced,
        QualityDimension.ACTIONABILITY,
        f"Flagged {len(vague[:MAX_LISTED])} vague request(s) for concrete wording",
        Impact.MEDIUM,
    )


def detect_ambiguity(text: str, context: PatternContext) -> PatternResult:
    """Turn hedging words into explicit open questions."""
    if "### Open Questions" in text:
        return skipped(text, QualityDimension.CLARITY, "Open questions already listed")

    hedges = matched_keywords(text, HEDGE_WORDS)
    if not hedges:
        return skipped(text, QualityDimension.CLARITY, "No ambiguous wording found")

    lines = [f'- "{hedge}": what exactly is intended here?' for hedge in hedges[:MAX_LISTED]]
    enhanced = text + "\n\n### Open Questions\n" + "\n".join(lines)

    return applied(
        enhanced,
        QualityDimension.CLARITY,
        f"Surfaced {len(lines)} ambiguous phrase(s) as open questions",
        Impact.MEDIUM,
    )


OBJECTIVE_CLARIFIER = Pattern(
    id="objective-clarifier",
    name="ObjectiveClarifier",
    description="Leads the prompt with an explicit objective",
    applicable_intents=ALL_INTENTS - intents(PromptIntent.PRD_GENERATION, PromptIntent.SUMMARIZATION),
    mode=PatternMode.BOTH,
    priority=10,
    transform=clarify_objective,
)

ACTIONABILITY_ENHANCER = Pattern(
    id="actionability-enhancer",
    name="ActionabilityEnhancer",
    description="Replaces vague requests with concrete asks",
    applicable_intents=ALL_INTENTS,
    mode=PatternMode.BOTH,
    priority=6,
    transform=enhance_actionability,
)

AMBIGUITY_DETECTOR = Pattern(
    id="ambiguity-detector",
    name="AmbiguityDetector",
    description="Lists hedged or ambiguous wording as open questions",
    applicable_intents=ALL_INTENTS,
    mode=PatternMode.DEEP,
    priority=5,
    transform=detect_ambiguity,
    workflows=frozenset({OptimizationMode.PRD, OptimizationMode.CONVERSATIONAL}),
    phases=frozenset({OptimizationPhase.QUESTION_VALIDATION, OptimizationPhase.SUMMARIZATION}),
)
