"""Patterns that fill in the context a prompt leaves out."""

import re

from ...core.types import Impact, OptimizationMode, OptimizationPhase, PatternMode
from ..analyzers.intent_detector import TECH_TERMS, PromptIntent
from ..analyzers.quality_assessor import SUCCESS_RE, QualityDimension
from ..text import first_sentence, has_any, matched_keywords
from .base import Pattern, PatternContext, PatternResult, applied, intents, skipped

MAX_EDGE_CASES = 5

_CODE_CONTEXT_RE = re.compile(r"`|\b[\w/-]+\.(py|ts|js|tsx|jsx|go|rs|java|rb|json|ya?ml|md)\b")

ERROR_DETAIL_MARKERS = [
    "stack trace", "traceback", "error:", "exception:", "steps to reproduce",
    "expected", "actual", "log output", "error message",
]

SCOPE_MARKERS = ["scope", "out of scope", "non-goal", "not include", "won't", "will not"]

SUCCESS_CRITERIA = {
    PromptIntent.DEBUGGING: [
        "The original error no longer occurs",
        "A regression test covers the failing case",
        "No other behavior changes",
    ],
    PromptIntent.TESTING: [
        "Tests cover the main path and the failure paths",
        "The suite runs green locally and in CI",
        "Each test asserts one observable behavior",
    ],
    PromptIntent.MIGRATION: [
        "All existing behavior is preserved after the move",
        "The old and new versions produce the same results",
        "A rollback path has been exercised",
    ],
    PromptIntent.PLANNING: [
        "Every milestone has a clear deliverable",
        "Risks and dependencies are named",
        "The plan can be reviewed in one sitting",
    ],
    PromptIntent.PRD_GENERATION: [
        "Each feature maps to a user problem",
        "Success metrics are measurable",
        "Out-of-scope items are listed",
    ],
}
DEFAULT_SUCCESS_CRITERIA = [
    "The feature works for the main user flow",
    "Invalid input is handled with a clear message",
    "The change is covered by tests",
]

# (trigger keywords, edge case to consider)
EDGE_CASE_DOMAINS = [
    (["form", "input", "field"], "Empty, overly long or malformed input"),
    (["login", "auth", "password", "sign in", "signup", "sign up"],
     "Invalid credentials, locked accounts and expired sessions"),
    (["api", "endpoint", "request", "webhook"], "Timeouts, rate limits and error responses"),
    (["file", "upload", "download"], "Missing, empty or very large files"),
    (["list", "table", "search", "results", "pagination"], "Empty results and very large result sets"),
    (["payment", "checkout", "price", "cart"], "Failed or duplicated payments and currency rounding"),
    (["date", "time", "schedule", "calendar"], "Time zones, daylight saving changes and invalid dates"),
    (["concurrent", "parallel", "real-time", "realtime"], "Concurrent updates and out-of-order events"),
]


def enrich_technical_context(text: str, context: PatternContext) -> PatternResult:
    """Ask for the technical details a code task depends on."""
    if not text.strip():
        return skipped(text, QualityDimension.COMPLETENESS, "Empty prompt")
    if "**Technical Details:**" in text:
        return skipped(text, QualityDimension.COMPLETENESS, "Technical details already requested")
    if has_any(text, TECH_TERMS) or _CODE_CONTEXT_RE.search(text):
        return skipped(text, QualityDimension.COMPLETENESS, "Technical context already present")

    enhanced = (
        text
        + "\n\n**Technical Details:**\n"
        + "- Language / framework: [specify]\n"
        + "- Versions: [specify]\n"
        + "- Related files or modules: [specify]"
    )
    return applied(
        enhanced,
        QualityDimension.COMPLETENESS,
        "Requested missing technical details",
        Impact.MEDIUM,
    )


def enrich_error_context(text: str, context: PatternContext) -> PatternResult:
    """Ask for the error, reproduction steps and expected behavior."""
    if not text.strip():
        return skipped(text, QualityDimension.COMPLETENESS, "Empty prompt")
    if "```" in text or has_any(text, ERROR_DETAIL_MARKERS):
        return skipped(text, QualityDimension.COMPLETENESS, "Error details already provided")

    enhanced = (
        text
        + "\n\n### Debugging Details\n"
        + "- Exact error message or stack trace: [paste it here]\n"
        + "- Steps to reproduce: [list them]\n"
        + "- Expected vs. actual behavior: [describe both]\n"
        + "- What changed recently: [describe]"
    )
    return applied(
        enhanced,
        QualityDimension.COMPLETENESS,
        "Requested error details and reproduction steps",
        Impact.HIGH,
    )


def enforce_success_criteria(text: str, context: PatternContext) -> PatternResult:
    """Append a checklist describing when the work is done."""
    if not text.strip():
        return skipped(text, QualityDimension.COMPLETENESS, "Empty prompt")
    if SUCCESS_RE.search(text):
        return skipped(text, QualityDimension.COMPLETENESS, "Success criteria already defined")

    criteria = SUCCESS_CRITERIA.get(context.intent, DEFAULT_SUCCESS_CRITERIA)
    enhanced = text + "\n\n### Success Criteria\n" + "\n".join(f"- [ ] {item}" for item in criteria)

    return applied(
        enhanced,
        QualityDimension.COMPLETENESS,
        "Added success criteria",
        Impact.HIGH,
    )


def define_scope(text: str, context: PatternContext) -> PatternResult:
    """Make in-scope and out-of-scope explicit."""
    if not text.strip():
        return skipped(text, QualityDimension.COMPLETENESS, "Empty prompt")
    if has_any(text, SCOPE_MARKERS):
        return skipped(text, QualityDimension.COMPLETENESS, "Scope already defined")

    enhanced = (
        text
        + "\n\n### Scope\n"
        + f"**In scope:** {first_sentence(text)}\n"
        + "**Out of scope:** [List what this work will not cover]"
    )
    return applied(
        enhanced,
        QualityDimension.COMPLETENESS,
        "Defined the scope boundaries",
        Impact.MEDIUM,
    )


def identify_edge_cases(text: str, context: PatternContext) -> PatternResult:
    """List edge cases suggested by the domain of the request."""
    if has_any(text, ["edge case", "corner case"]):
        return skipped(text, QualityDimension.COMPLETENESS, "Edge cases already considered")

    cases = [case for keywords, case in EDGE_CASE_DOMAINS if matched_keywords(text, keywords)]
    if not cases:
        return skipped(text, QualityDimension.COMPLETENESS, "No domain-specific edge cases identified")

    cases = cases[:MAX_EDGE_CASES]
    enhanced = text + "\n\n### Edge Cases to Consider\n" + "\n".join(f"- {case}" for case in cases)

    return applied(
        enhanced,
        QualityDimension.COMPLETENESS,
        f"Identified {len(cases)} edge case(s)",
        Impact.MEDIUM,
    )


TECHNICAL_CONTEXT_ENRICHER = Pattern(
    id="technical-context-enricher",
    name="TechnicalContextEnricher",
    description="Requests language, framework and version details",
    applicable_intents=intents(
        PromptIntent.CODE_GENERATION,
        PromptIntent.DEBUGGING,
        PromptIntent.REFINEMENT,
        PromptIntent.MIGRATION,
        PromptIntent.TESTING,
    ),
    mode=PatternMode.BOTH,
    priority=8,
    transform=enrich_technical_context,
)

ERROR_CONTEXT_ENRICHER = Pattern(
    id="error-context-enricher",
    name="ErrorContextEnricher",
    description="Requests error output and reproduction steps for bugs",
    applicable_intents=intents(PromptIntent.DEBUGGING),
    mode=PatternMode.BOTH,
    priority=9,
    transform=enrich_error_context,
)

SUCCESS_CRITERIA_ENFORCER = Pattern(
    id="success-criteria-enforcer",
    name="SuccessCriteriaEnforcer",
    description="Adds a definition of done",
    applicable_intents=intents(
        PromptIntent.CODE_GENERATION,
        PromptIntent.PLANNING,
        PromptIntent.REFINEMENT,
        PromptIntent.DEBUGGING,
        PromptIntent.MIGRATION,
        PromptIntent.TESTING,
        PromptIntent.PRD_GENERATION,
    ),
    mode=PatternMode.DEEP,
    priority=7,
    transform=enforce_success_criteria,
    workflows=frozenset({OptimizationMode.PRD}),
    phases=frozenset({OptimizationPhase.OUTPUT_GENERATION}),
)

SCOPE_DEFINER = Pattern(
    id="scope-definer",
    name="ScopeDefiner",
    description="Separates what is in scope from what is not",
    applicable_intents=intents(
        PromptIntent.PLANNING,
        PromptIntent.PRD_GENERATION,
        PromptIntent.CODE_GENERATION,
        PromptIntent.MIGRATION,
    ),
    mode=PatternMode.DEEP,
    priority=6,
    transform=define_scope,
    workflows=frozenset({OptimizationMode.PRD}),
    phases=frozenset({OptimizationPhase.OUTPUT_GENERATION}),
)

EDGE_CASE_IDENTIFIER = Pattern(
    id="edge-case-identifier",
    name="EdgeCaseIdentifier",
    description="Lists edge cases implied by the domain",
    applicable_intents=intents(
        PromptIntent.CODE_GENERATION,
        PromptIntent.REFINEMENT,
        PromptIntent.TESTING,
        PromptIntent.DEBUGGING,
    ),
    mode=PatternMode.DEEP,
    priority=4,
    transform=identify_edge_cases,
)
