"""
Patterns for free-form conversation transcripts.

They turn a rambling discussion into requirements: extract what was asked
for, surface what was implied, and group the discussion by topic. The
original text is always kept below the generated sections.
"""

import re
from typing import List

from ...core.types import Impact, OptimizationMode, PatternMode
from ..analyzers.intent_detector import PromptIntent
from ..analyzers.quality_assessor import QualityDimension
from ..text import clean_fragment, dedupe, extract_sentences, has_any, has_keyword, matched_keywords
from .base import Pattern, PatternContext, PatternResult, applied, intents, skipped

MAX_REQUIREMENTS = 10
MAX_CONSTRAINTS = 5
MAX_GOALS = 3
MAX_IMPLICIT = 8
MAX_TOPIC_SENTENCES = 3

CONVERSATIONAL_MARKERS = [
    "i want", "i need", "we need", "should be able to", "would like",
    "thinking about", "maybe we could", "what if", "how about", "let me",
    "let's", "also", "and then", "basically", "so basically",
]

STRUCTURE_INDICATORS = [
    "##", "###", "**Requirements:**", "**Features:**", "- [ ]", "1.", "2.", "3.",
]

REQUIREMENT_PATTERNS = [
    re.compile(r"(?:need|want|should|must|require)\s+(?:to\s+)?(.+)", re.IGNORECASE),
    re.compile(r"(?:should be able to|needs to)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:feature|functionality):\s*(.+)", re.IGNORECASE),
]

CONSTRAINT_PATTERNS = [
    re.compile(r"\b(?:can't|cannot|shouldn't|must not)\s+(.+)", re.IGNORECASE),
    re.compile(r"\b(?:limited to|restricted to|only)\s+(.+)", re.IGNORECASE),
    re.compile(r"\b(?:within|budget|deadline|timeline):\s*(.+)", re.IGNORECASE),
    re.compile(r"\b(?:no more than|at most|maximum)\s+(.+)", re.IGNORECASE),
]

GOAL_PATTERNS = [
    re.compile(r"(?:goal is to|aim to|objective is to)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:trying to|looking to|hoping to)\s+(.+)", re.IGNORECASE),
    re.compile(r"(?:so that|in order to)\s+(.+)", re.IGNORECASE),
]

_LIKE_RE = re.compile(r"(?<!would )(?<!i'd )\b(?:like|similar to|same as)\s+([A-Za-z0-9][A-Za-z0-9 ]*)", re.IGNORECASE)
_ALWAYS_NEVER_RE = re.compile(r"\b(?:always|never|must always|must never)\s+([^.!?\n]+)", re.IGNORECASE)

# (keywords, inferred requirement), checked in order
IMPLICIT_SIGNALS = [
    (["mobile"], "Mobile-responsive design required"),
    (["real-time", "realtime"], "Real-time updates infrastructure needed"),
    (["scale", "thousands", "millions"], "Scalability architecture required"),
    (["secure", "security"], "Security audit and compliance requirements"),
    (["fast", "quick"], "Performance optimization requirements"),
]

LATER_SIGNALS = [
    (["easy", "simple", "intuitive"], "User experience priority (simplicity mentioned)"),
    (["notify", "alert", "email", "notification"], "Notification system infrastructure"),
    (["search", "find"], "Search functionality and indexing"),
    (["report", "analytics", "dashboard"], "Analytics and reporting infrastructure"),
    (["integrate", "connect", "sync"], "Integration APIs and webhooks"),
]

TOPIC_INDICATORS = {
    "User Interface": ["ui", "interface", "design", "layout", "button", "form", "page", "screen"],
    "Backend/API": ["api", "backend", "server", "endpoint", "route", "controller"],
    "Database": ["database", "db", "schema", "table", "query", "migration"],
    "Authentication": ["auth", "login", "password", "session", "token", "permission"],
    "Performance": ["performance", "speed", "cache", "optimize", "latency"],
    "Testing": ["test", "spec", "coverage", "qa", "validation"],
    "Deployment": ["deploy", "ci/cd", "pipeline", "release", "environment"],
    "User Experience": ["ux", "usability", "accessibility", "user flow", "journey"],
    "Business Logic": ["business", "workflow", "process", "rule", "logic"],
    "Integration": ["integration", "third-party", "external", "webhook", "sync"],
}

# Sentence matching is a little wider than detection.
TOPIC_CONTENT_EXTRAS = {
    "User Interface": ["component"],
    "Backend/API": ["service"],
    "Database": ["model"],
    "Authentication": ["user"],
    "Performance": ["fast", "slow"],
    "Testing": ["verify"],
    "Deployment": ["production"],
    "User Experience": ["experience"],
    "Business Logic": ["requirement"],
    "Integration": ["connect"],
}

_TOPIC_HEADER_RE = re.compile(
    r"##\s*(user interface|backend|database|auth|performance|testing|deploy)",
    re.IGNORECASE,
)


def _capture_all(patterns, text: str) -> List[str]:
    found = []
    for pattern in patterns:
        for match in pattern.finditer(text):
            fragment = clean_fragment(match.group(1))
            if fragment:
                found.append(fragment)
    return dedupe(found)


def is_already_structured(text: str) -> bool:
    return sum(1 for indicator in STRUCTURE_INDICATORS if indicator in text) >= 3


def is_conversational(text: str) -> bool:
    markers = matched_keywords(text, CONVERSATIONAL_MARKERS)
    has_bullet_points = "- " in text or "* " in text
    return len(markers) >= 2 or (len(extract_sentences(text)) > 3 and not has_bullet_points)


def extract_requirements(text: str) -> List[str]:
    requirements = []
    for sentence in extract_sentences(text):
        for pattern in REQUIREMENT_PATTERNS:
            match = pattern.search(sentence)
            if match:
                requirement = clean_fragment(match.group(1))
                if requirement:
                    requirements.append(requirement)
    return dedupe(requirements)[:MAX_REQUIREMENTS]


def extract_constraints(text: str) -> List[str]:
    constraints = _capture_all(CONSTRAINT_PATTERNS, text)
    if has_keyword(text, "performance"):
        constraints.append("Performance requirements to be defined")
    if has_keyword(text, "security"):
        constraints.append("Security requirements to be defined")
    if has_keyword(text, "mobile") and has_keyword(text, "desktop"):
        constraints.append("Must work on both mobile and desktop")
    return dedupe(constraints)[:MAX_CONSTRAINTS]


def extract_goals(text: str) -> List[str]:
    return _capture_all(GOAL_PATTERNS, text)[:MAX_GOALS]


def summarize_conversation(text: str, context: PatternContext) -> PatternResult:
    """Extract goals, requirements and constraints from a conversation."""
    if "### Extracted Requirements" in text or is_already_structured(text):
        return skipped(text, QualityDimension.STRUCTURE, "Content already well-structured")
    if not is_conversational(text):
        return skipped(text, QualityDimension.STRUCTURE, "Not conversational content")

    sections = ["### Extracted Requirements\n"]
    for label, items in (
        ("Goals", extract_goals(text)),
        ("Requirements", extract_requirements(text)),
        ("Constraints", extract_constraints(text)),
    ):
        if items:
            sections.append(f"**{label}:**\n" + "\n".join(f"- {item}" for item in items) + "\n")

    enhanced = "\n".join(sections) + "\n---\n\n**Original Context:**\n" + text

    return applied(
        enhanced,
        QualityDimension.STRUCTURE,
        "Extracted structured requirements from conversation",
        Impact.HIGH,
    )


def extract_implicit_requirements(text: str) -> List[str]:
    found = [f'Feature parity with "{m.group(1).strip()}" (implied)' for m in _LIKE_RE.finditer(text)]

    found.extend(requirement for keywords, requirement in IMPLICIT_SIGNALS if has_any(text, keywords))

    if has_any(text, ["user", "admin"]) and not has_keyword(text, "authentication"):
        found.append("User authentication system (implied by user roles)")
    if has_any(text, ["save", "store", "data"]) and not has_keyword(text, "database"):
        found.append("Data persistence/storage (implied by data operations)")

    found.extend(requirement for keywords, requirement in LATER_SIGNALS if has_any(text, keywords))

    found.extend(
        f'Business rule: "{m.group(1).strip()}" (implied constraint)'
        for m in _ALWAYS_NEVER_RE.finditer(text)
    )
    return dedupe(found)[:MAX_IMPLICIT]


def surface_implicit_requirements(text: str, context: PatternContext) -> PatternResult:
    """Append requirements the discussion implies but never states."""
    if "### Implicit Requirements (Inferred)" in text:
        return skipped(text, QualityDimension.COMPLETENESS, "Implicit requirements already listed")

    found = extract_implicit_requirements(text)
    if not found:
        return skipped(text, QualityDimension.COMPLETENESS, "No implicit requirements detected")

    enhanced = (
        text
        + "\n\n### Implicit Requirements (Inferred)\n"
        + "*The following requirements are implied by the discussion:*\n\n"
        + "\n".join(f"- {item}" for item in found)
        + "\n\n> **Note:** Please verify these inferred requirements are accurate."
    )
    return applied(
        enhanced,
        QualityDimension.COMPLETENESS,
        f"Surfaced {len(found)} implicit requirements",
        Impact.MEDIUM,
    )


def detect_topics(text: str) -> List[str]:
    return [topic for topic, keywords in TOPIC_INDICATORS.items() if has_any(text, keywords)]


def topic_content(text: str, topic: str) -> str:
    keywords = TOPIC_INDICATORS[topic] + TOPIC_CONTENT_EXTRAS[topic]
    relevant = [s for s in extract_sentences(text) if has_any(s, keywords)]
    if not relevant:
        return f"- Discussion related to {topic}"
    return "\n".join(f"- {s}" for s in relevant[:MAX_TOPIC_SENTENCES])


def analyze_topic_coherence(text: str, context: PatternContext) -> PatternResult:
    """Group a multi-topic discussion under per-topic headings."""
    topics = detect_topics(text)
    if len(topics) <= 1:
        return skipped(text, QualityDimension.STRUCTURE, "Single coherent topic detected")
    if "### Topics Covered" in text or _TOPIC_HEADER_RE.search(text):
        return skipped(text, QualityDimension.STRUCTURE, "Topics already organized")

    parts = [
        "### Topics Covered\n",
        "This conversation touches on multiple areas:\n",
        "\n".join(f"{number}. **{topic}**" for number, topic in enumerate(topics, start=1)),
        "\n\n---\n\n### Discussion by Topic\n\n",
    ]
    for topic in topics:
        parts.append(f"#### {topic}\n{topic_content(text, topic)}\n\n")
    parts.append("---\n\n**Full Context:**\n" + text)

    return applied(
        "".join(parts),
        QualityDimension.STRUCTURE,
        f"Organized {len(topics)} distinct topics for clarity",
        Impact.MEDIUM,
    )


CONVERSATION_SUMMARIZER = Pattern(
    id="conversation-summarizer",
    name="ConversationSummarizer",
    description="Extracts structured requirements from messages",
    applicable_intents=intents(PromptIntent.SUMMARIZATION, PromptIntent.PLANNING, PromptIntent.PRD_GENERATION),
    mode=PatternMode.DEEP,
    priority=8,
    transform=summarize_conversation,
    workflows=frozenset({OptimizationMode.CONVERSATIONAL}),
)

IMPLICIT_REQUIREMENT_EXTRACTOR = Pattern(
    id="implicit-requirement-extractor",
    name="ImplicitRequirementExtractor",
    description="Surfaces requirements mentioned indirectly",
    applicable_intents=intents(PromptIntent.SUMMARIZATION, PromptIntent.PLANNING, PromptIntent.PRD_GENERATION),
    mode=PatternMode.DEEP,
    priority=7,
    transform=surface_implicit_requirements,
    workflows=frozenset({OptimizationMode.CONVERSATIONAL}),
)

TOPIC_COHERENCE_ANALYZER = Pattern(
    id="topic-coherence-analyzer",
    name="TopicCoherenceAnalyzer",
    description="Detects topic shifts and multi-topic conversations",
    applicable_intents=intents(PromptIntent.SUMMARIZATION, PromptIntent.PLANNING),
    mode=PatternMode.DEEP,
    priority=6,
    transform=analyze_topic_coherence,
    workflows=frozenset({OptimizationMode.CONVERSATIONAL}),
)
