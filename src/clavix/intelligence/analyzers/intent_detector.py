"""Intent detection for prompts."""

import re
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Tuple

from ..text import has_bullets, has_headers, matched_keywords, round_half_up, word_count


class PromptIntent(Enum):
    """Why a prompt was written."""
    CODE_GENERATION = "code-generation"
    PLANNING = "planning"
    REFINEMENT = "refinement"
    DEBUGGING = "debugging"
    DOCUMENTATION = "documentation"
    PRD_GENERATION = "prd-generation"
    SUMMARIZATION = "summarization"
    MIGRATION = "migration"
    SECURITY_REVIEW = "security-review"
    TESTING = "testing"
    LEARNING = "learning"

    @classmethod
    def parse(cls, value) -> Optional["PromptIntent"]:
        """Return the matching intent, or None for unknown tags."""
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower().replace("_", "-"))
        except ValueError:
            return None


@dataclass(frozen=True)
class IntentCharacteristics:
    """Shape of the prompt, independent of its category."""
    is_open_ended: bool = False
    needs_structure: bool = False
    has_code_context: bool = False
    is_technical: bool = False


@dataclass(frozen=True)
class IntentAnalysis:
    """Result of intent detection."""
    primary_intent: PromptIntent
    confidence: int
    characteristics: IntentCharacteristics = field(default_factory=IntentCharacteristics)
    secondary_intents: Tuple[Tuple[PromptIntent, int], ...] = ()
    signals: Dict[str, List[str]] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> Dict:
        return {
            "primary_intent": self.primary_intent.value,
            "confidence": self.confidence,
            "characteristics": {
                "is_open_ended": self.characteristics.is_open_ended,
                "needs_structure": self.characteristics.needs_structure,
                "has_code_context": self.characteristics.has_code_context,
                "is_technical": self.characteristics.is_technical,
            },
            "secondary_intents": [
                {"intent": intent.value, "score": score}
                for intent, score in self.secondary_intents
            ],
        }


# Concrete things a prompt can ask for
DELIVERABLE_NOUNS = [
    "page", "endpoint", "function", "component", "api", "script", "test",
    "document", "report", "schema", "class", "module", "cli", "service",
    "dashboard", "form", "button", "table", "query", "migration", "file",
    "app", "application", "website", "feature", "prd", "plan", "readme",
    "docs", "summary", "bug", "error", "database", "server", "library",
]

TECH_TERMS = [
    "python", "javascript", "typescript", "react", "vue", "angular", "svelte",
    "node", "node.js", "next.js", "django", "flask", "fastapi", "rails",
    "golang", "rust", "java", "kotlin", "swift", "c#", ".net", "php",
    "postgres", "postgresql", "mysql", "sqlite", "mongodb", "redis",
    "docker", "kubernetes", "aws", "gcp", "azure", "graphql", "rest",
    "tailwind", "tech stack", "sql", "html", "css",
]

EXPLORATORY_PHRASES = [
    "maybe", "thinking about", "what if", "not sure", "how about", "ideas",
    "brainstorm", "explore", "could we", "wondering", "perhaps",
]


class IntentDetector:
    """
    Detects the intent of a prompt.

    Weighted keyword and phrase tally per intent category. The winner is the
    category with the highest weighted count; confidence combines the
    strength of that count with its margin over the runner-up.
    """

    # (keyword, weight) per intent. Declaration order breaks ties.
    INTENT_KEYWORDS: Dict[PromptIntent, List[Tuple[str, int]]] = {
        PromptIntent.CODE_GENERATION: [
            ("build", 2), ("create", 2), ("implement", 2), ("write", 1),
            ("generate", 1), ("add", 1), ("develop", 2), ("code", 1),
            ("function", 1), ("component", 1), ("endpoint", 1), ("page", 1),
            ("class", 1), ("script", 1), ("make a", 1),
        ],
        PromptIntent.PLANNING: [
            ("plan", 3), ("planning", 3), ("roadmap", 3), ("architecture", 2),
            ("design a system", 3), ("how should i structure", 3),
            ("approach", 1), ("strategy", 2), ("i need", 2), ("we need", 2),
            ("i want", 2), ("we want", 2), ("dashboard", 1),
            ("user management", 1), ("milestones", 2), ("break down", 2),
        ],
        PromptIntent.REFINEMENT: [
            ("refactor", 3), ("improve", 2), ("optimize", 2), ("clean up", 2),
            ("simplify", 2), ("make it better", 2), ("restructure", 2),
            ("polish", 1), ("performance", 1),
        ],
        PromptIntent.DEBUGGING: [
            ("bug", 3), ("fix", 2), ("error", 2), ("debug", 3), ("crash", 3),
            ("exception", 2), ("broken", 2), ("not working", 3),
            ("doesn't work", 3), ("stack trace", 3), ("failing", 2),
            ("issue", 1),
        ],
        PromptIntent.DOCUMENTATION: [
            ("document", 3), ("documentation", 3), ("readme", 3),
            ("docstring", 3), ("explain the code", 2), ("comments", 2),
            ("api reference", 3), ("guide", 1), ("tutorial", 2),
        ],
        PromptIntent.PRD_GENERATION: [
            ("prd", 4), ("product requirements", 4), ("requirements document", 4),
            ("user stories", 3), ("mvp", 2), ("product spec", 3),
            ("acceptance criteria", 2), ("feature list", 2), ("personas", 2),
        ],
        PromptIntent.SUMMARIZATION: [
            ("summarize", 4), ("summary", 3), ("tl;dr", 3), ("tldr", 3),
            ("recap", 3), ("key points", 2), ("condense", 2),
            ("extract requirements", 3), ("conversation", 1),
        ],
        PromptIntent.MIGRATION: [
            ("migrate", 4), ("migration", 4), ("upgrade", 3), ("port", 2),
            ("convert from", 3), ("move from", 2), ("switch from", 2),
            ("legacy", 2), ("deprecated", 2),
        ],
        PromptIntent.SECURITY_REVIEW: [
            ("security", 3), ("vulnerability", 4), ("vulnerabilities", 4),
            ("audit", 2), ("xss", 4), ("csrf", 4), ("sql injection", 4),
            ("owasp", 4), ("penetration", 3), ("secure", 2), ("threat", 2),
        ],
        PromptIntent.TESTING: [
            ("test", 2), ("unit test", 3), ("testing", 2),
            ("coverage", 2), ("pytest", 3), ("jest", 3), ("e2e", 2),
            ("integration test", 3), ("mock", 1),
        ],
        PromptIntent.LEARNING: [
            ("explain", 2), ("what is", 2), ("how does", 2), ("why does", 2),
            ("teach me", 3), ("understand", 2), ("difference between", 3),
            ("learn", 2),
        ],
    }

    MIN_SIGNAL = 2
    DEFAULT_INTENT = PromptIntent.CODE_GENERATION
    STRUCTURE_WORD_THRESHOLD = 40

    def analyze(self, prompt: str) -> IntentAnalysis:
        """
        Detect the intent of a prompt.

        Args:
            prompt: The prompt to analyze (may be empty)

        Returns:
            IntentAnalysis with primary intent, confidence and characteristics
        """
        text = prompt or ""
        scores: Dict[PromptIntent, int] = {}
        signals: Dict[str, List[str]] = {}

        for intent, keywords in self.INTENT_KEYWORDS.items():
            weights = dict(keywords)
            hits = matched_keywords(text, weights)
            scores[intent] = sum(weights[kw] for kw in hits)
            if hits:
                signals[intent.value] = hits

        ranked = sorted(
            scores.items(),
            key=lambda item: item[1],
            reverse=True
        )
        top_intent, top_score = ranked[0]
        runner_up = ranked[1][1] if len(ranked) > 1 else 0

        if top_score < self.MIN_SIGNAL:
            primary = self.DEFAULT_INTENT
            confidence = min(40, 20 + 10 * top_score)
        else:
            primary = top_intent
            confidence = self._confidence(top_score, runner_up)

        secondary = tuple(
            (intent, score) for intent, score in ranked
            if intent is not primary and score >= self.MIN_SIGNAL
        )[:3]

        return IntentAnalysis(
            primary_intent=primary,
            confidence=confidence,
            characteristics=self._characteristics(text),
            secondary_intents=secondary,
            signals=signals,
        )

    def analyze_many(self, prompts: List[str]) -> List[IntentAnalysis]:
        """Detect intent for multiple prompts."""
        return [self.analyze(p) for p in prompts]

    def _confidence(self, top: int, runner_up: int) -> int:
        strength = min(top, 6) / 6
        uniqueness = (top - runner_up) / top
        return min(100, round_half_up(40 + 35 * uniqueness + 25 * strength))

    def _characteristics(self, text: str) -> IntentCharacteristics:
        words_total = word_count(text)
        lacks_deliverable = not matched_keywords(text, DELIVERABLE_NOUNS)
        exploratory = bool(matched_keywords(text, EXPLORATORY_PHRASES))

        unstructured = (
            "\n" not in text.strip()
            and not has_bullets(text)
            and not has_headers(text)
        )

        return IntentCharacteristics(
            is_open_ended=exploratory or lacks_deliverable,
            needs_structure=words_total > self.STRUCTURE_WORD_THRESHOLD and unstructured,
            has_code_context=bool(
                "```" in text
                or "`" in text
                or re.search(r"\b[\w/-]+\.(py|ts|js|tsx|jsx|go|rs|java|rb|json|ya?ml|md)\b", text)
            ),
            is_technical=bool(matched_keywords(text, TECH_TERMS)),
        )
