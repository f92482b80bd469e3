"""Patterns that give shapeless prompts a layout."""

import re

from ...core.types import Impact, PatternMode
from ..analyzers.intent_detector import PromptIntent
from ..analyzers.quality_assessor import QualityDimension
from ..text import clean_fragment, extract_sentences, has_any, has_bullets, has_headers, is_single_line, word_count
from .base import ALL_INTENTS, Pattern, PatternContext, PatternResult, applied, intents, skipped

MAX_KEY_POINTS = 8
MAX_STEPS = 6
STRUCTURE_WORD_THRESHOLD = 40

_CLAUSE_SPLIT_RE = re.compile(
    r"\s*(?:,\s*and then|\band then|,\s*then|\bafter that|,\s*also|;|,\s*and)\s+",
    re.IGNORECASE,
)
_NUMBERED_RE = re.compile(r"^\s*\d+[.)]\s", re.MULTILINE)

FORMAT_MARKERS = [
    "format", "json", "markdown", "table", "bullet", "yaml", "csv",
    "expected output", "output:", "respond with", "return a",
]

OUTPUT_FORMATS = {
    PromptIntent.DOCUMENTATION: "Markdown with headings, a short overview and usage examples",
    PromptIntent.SUMMARIZATION: "A short bulleted summary followed by open questions",
    PromptIntent.LEARNING: "A plain-language explanation, then a small worked example",
    PromptIntent.PLANNING: "A numbered plan with milestones and risks",
    PromptIntent.PRD_GENERATION: "A markdown document with one heading per section",
}


def organize_structure(text: str, context: PatternContext) -> PatternResult:
    """Pull the key points of a long single-paragraph prompt into a list."""
    unstructured = is_single_line(text) and not has_bullets(text) and not has_headers(text)
    if word_count(text) <= STRUCTURE_WORD_THRESHOLD or not unstructured:
        return skipped(text, QualityDimension.STRUCTURE, "Prompt already has a workable structure")

    points = [f"- {sentence}" for sentence in extract_sentences(text)[:MAX_KEY_POINTS]]
    enhanced = "### Key Points\n" + "\n".join(points) + "\n\n### Full Request\n" + text

    return applied(
        enhanced,
        QualityDimension.STRUCTURE,
        f"Organized the request into {len(points)} key points",
        Impact.HIGH,
    )


def _action_clauses(text: str):
    clauses = []
    for sentence in extract_sentences(text):
        for part in _CLAUSE_SPLIT_RE.split(sentence):
            clause = clean_fragment(part)
            if word_count(clause) >= 2:
                clauses.append(clause[0].upper() + clause[1:])
    return clauses


def decompose_steps(text: str, context: PatternContext) -> PatternResult:
    """Break a multi-part request into numbered steps."""
    if "### Suggested Steps" in text or _NUMBERED_RE.search(text):
        return skipped(text, QualityDimension.ACTIONABILITY, "Steps already listed")

    clauses = _action_clauses(text)
    if len(clauses) < 2:
        return skipped(text, QualityDimension.ACTIONABILITY, "Single-step request")

    steps = clauses[:MAX_STEPS]
    lines = [f"{number}. {step}" for number, step in enumerate(steps, start=1)]
    lines.append(f"{len(steps) + 1}. Verify the result works end to end")
    enhanced = text + "\n\n### Suggested Steps\n" + "\n".join(lines)

    return applied(
        enhanced,
        QualityDimension.ACTIONABILITY,
        f"Decomposed the request into {len(steps)} steps",
        Impact.HIGH,
    )


def enforce_output_format(text: str, context: PatternContext) -> PatternResult:
    """State the shape of the expected answer."""
    if not text.strip():
        return skipped(text, QualityDimension.CLARITY, "Empty prompt")
    if has_any(text, FORMAT_MARKERS):
        return skipped(text, QualityDimension.CLARITY, "Output format already specified")

    fmt = OUTPUT_FORMATS.get(context.intent)
    if fmt is None:
        return skipped(text, QualityDimension.CLARITY, "No default output format for this intent")

    return applied(
        text + f"\n\n**Expected Output:** {fmt}",
        QualityDimension.CLARITY,
        "Specified the expected output format",
        Impact.LOW,
    )


STRUCTURE_ORGANIZER = Pattern(
    id="structure-organizer",
    name="StructureOrganizer",
    description="Pulls key points out of long unstructured prompts",
    applicable_intents=ALL_INTENTS,
    mode=PatternMode.BOTH,
    priority=9,
    transform=organize_structure,
)

STEP_DECOMPOSER = Pattern(
    id="step-decomposer",
    name="StepDecomposer",
    description="Breaks multi-part requests into numbered steps",
    applicable_intents=intents(
        PromptIntent.CODE_GENERATION,
        PromptIntent.PLANNING,
        PromptIntent.MIGRATION,
        PromptIntent.REFINEMENT,
        PromptIntent.TESTING,
    ),
    mode=PatternMode.DEEP,
    priority=5,
    transform=decompose_steps,
)

OUTPUT_FORMAT_ENFORCER = Pattern(
    id="output-format-enforcer",
    name="OutputFormatEnforcer",
    description="States the expected shape of the answer",
    applicable_intents=frozenset(OUTPUT_FORMATS),
    mode=PatternMode.BOTH,
    priority=5,
    transform=enforce_output_format,
)
