"""
Patterns for product requirement documents.

These run in deep mode for PRD and planning prompts and inside the PRD
workflow, where the caller passes the workflow phase.
"""

import re

from ...core.types import Impact, OptimizationMode, OptimizationPhase, PatternMode
from ..analyzers.intent_detector import PromptIntent
from ..analyzers.quality_assessor import QualityDimension
from ..text import has_any
from .base import Pattern, PatternContext, PatternResult, applied, intents, skipped

# (section, keywords that show it is covered, placeholder)
PRD_SECTIONS = [
    ("Problem", ["problem", "pain point", "why"], "What problem does this solve, and for whom?"),
    ("Target Users", ["user", "persona", "audience", "customer"], "Who is this for?"),
    ("Core Features", ["feature", "functionality", "capability"], "What must the product do?"),
    ("Out of Scope", ["out of scope", "non-goal", "not include"], "What is explicitly excluded?"),
    ("Success Metrics", ["metric", "kpi", "success", "measure"], "How will success be measured?"),
]

USER_CONTEXT_KEYWORDS = [
    "user persona", "target user", "end user", "user profile", "audience",
    "stakeholder", "as a user", "users can", "users will", "for users",
    "customer", "developer", "admin", "target audience",
]

FEATURE_KEYWORDS = [
    "feature", "build", "create", "implement", "functionality", "should",
    "must", "requirement",
]

PRIORITIZABLE_KEYWORDS = [
    "feature", "requirement", "functionality", "capability", "should",
    "must", "need", "want", "implement",
]

PRIORITY_KEYWORDS = [
    "must-have", "must have", "nice-to-have", "nice to have", "p0", "p1",
    "p2", "priority:", "mvp", "phase 1", "phase 2", "critical", "optional",
]

# (keywords, inferred primary user), first match wins
USER_TYPES = [
    (["api", "sdk", "library"], "Developers integrating with the system"),
    (["admin", "manage", "management", "dashboard"], "Administrators managing the system"),
    (["e-commerce", "ecommerce", "shop", "buy"], "Customers making purchases"),
    (["content", "blog", "cms"], "Content creators and editors"),
    (["mobile", "app"], "Mobile app users"),
]
DEFAULT_USER_TYPE = "[Define primary user type]"

_SECTION_END = r"(?=\n##|\n\*\*[A-Z]|\Z)"
FEATURE_SECTION_PATTERNS = [
    re.compile(r"features?:?\s*\n([\s\S]*?)" + _SECTION_END, re.IGNORECASE),
    re.compile(r"requirements?:?\s*\n([\s\S]*?)" + _SECTION_END, re.IGNORECASE),
    re.compile(r"what we(?:'re| are) building:?\s*\n([\s\S]*?)" + _SECTION_END, re.IGNORECASE),
]


def enforce_prd_structure(text: str, context: PatternContext) -> PatternResult:
    """Add placeholders for the PRD sections the text does not cover."""
    if not text.strip():
        return skipped(text, QualityDimension.STRUCTURE, "Empty prompt")

    missing = [
        (section, hint) for section, keywords, hint in PRD_SECTIONS
        if not has_any(text, keywords)
    ]
    if not missing:
        return skipped(text, QualityDimension.STRUCTURE, "All PRD sections present")

    blocks = [f"#### {section}\n[{hint}]" for section, hint in missing]
    enhanced = text + "\n\n### PRD Sections to Complete\n" + "\n\n".join(blocks)

    return applied(
        enhanced,
        QualityDimension.STRUCTURE,
        f"Added {len(missing)} missing PRD section(s)",
        Impact.HIGH,
    )


def infer_user_type(text: str) -> str:
    for keywords, user_type in USER_TYPES:
        if has_any(text, keywords):
            return user_type
    return DEFAULT_USER_TYPE


def enrich_user_persona(text: str, context: PatternContext) -> PatternResult:
    """Add a Target Users section when features are discussed without users."""
    if has_any(text, USER_CONTEXT_KEYWORDS):
        return skipped(text, QualityDimension.COMPLETENESS, "User context already present")
    if not has_any(text, FEATURE_KEYWORDS):
        return skipped(text, QualityDimension.COMPLETENESS, "Content does not require user persona")

    enhanced = (
        text
        + "\n\n### Target Users\n"
        + f"**Primary User:** {infer_user_type(text)}\n"
        + "- Goals: [What they want to achieve]\n"
        + "- Pain Points: [Current frustrations]\n"
        + "- Context: [When and how they'll use this]"
    )
    return applied(
        enhanced,
        QualityDimension.COMPLETENESS,
        "Added user persona context (who will use this)",
        Impact.MEDIUM,
    )


def extract_feature_section(text: str):
    for pattern in FEATURE_SECTION_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def prioritize_requirements(text: str, context: PatternContext) -> PatternResult:
    """Separate must-have from nice-to-have requirements."""
    if not has_any(text, PRIORITIZABLE_KEYWORDS):
        return skipped(text, QualityDimension.STRUCTURE, "No feature content to prioritize")
    if has_any(text, PRIORITY_KEYWORDS):
        return skipped(text, QualityDimension.STRUCTURE, "Requirements already prioritized")

    if extract_feature_section(text) is None:
        enhanced = (
            text
            + "\n\n### Requirement Priorities\n"
            + "**Must-Have (MVP):**\n- [Core features required for launch]\n\n"
            + "**Nice-to-Have (Post-MVP):**\n- [Features to add after initial release]"
        )
    else:
        enhanced = (
            text
            + "\n\n> **Priority Framework:** Consider categorizing features as:\n"
            + "> - **Must-Have (P0):** Required for MVP, blocking issues\n"
            + "> - **Should-Have (P1):** Important but not blocking\n"
            + "> - **Nice-to-Have (P2):** Enhancements for future iterations"
        )

    return applied(
        enhanced,
        QualityDimension.STRUCTURE,
        "Added requirement prioritization (must-have vs nice-to-have)",
        Impact.HIGH,
    )


PRD_STRUCTURE_ENFORCER = Pattern(
    id="prd-structure-enforcer",
    name="PRDStructureEnforcer",
    description="Ensures problem, users, features, scope and metrics are covered",
    applicable_intents=intents(PromptIntent.PRD_GENERATION),
    mode=PatternMode.DEEP,
    priority=9,
    transform=enforce_prd_structure,
    workflows=frozenset({OptimizationMode.PRD}),
    phases=frozenset({OptimizationPhase.OUTPUT_GENERATION}),
)

USER_PERSONA_ENRICHER = Pattern(
    id="user-persona-enricher",
    name="UserPersonaEnricher",
    description="Adds missing user context and personas",
    applicable_intents=intents(PromptIntent.PRD_GENERATION, PromptIntent.PLANNING),
    mode=PatternMode.DEEP,
    priority=6,
    transform=enrich_user_persona,
    workflows=frozenset({OptimizationMode.PRD}),
)

REQUIREMENT_PRIORITIZER = Pattern(
    id="requirement-prioritizer",
    name="RequirementPrioritizer",
    description="Separates must-have from nice-to-have requirements",
    applicable_intents=intents(PromptIntent.PRD_GENERATION, PromptIntent.PLANNING),
    mode=PatternMode.DEEP,
    priority=7,
    transform=prioritize_requirements,
    workflows=frozenset({OptimizationMode.PRD}),
)
