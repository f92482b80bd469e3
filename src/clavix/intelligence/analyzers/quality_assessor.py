"""Quality assessment for prompts."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional

from ..text import (
    clamp,
    count_occurrences,
    extract_sentences,
    has_any,
    has_bullets,
    has_headers,
    is_single_line,
    round_half_up,
    word_count,
    words,
)
from .intent_detector import DELIVERABLE_NOUNS, TECH_TERMS, PromptIntent


class QualityDimension(Enum):
    """Independent axes a prompt is scored on."""
    CLARITY = "clarity"
    EFFICIENCY = "efficiency"
    STRUCTURE = "structure"
    COMPLETENESS = "completeness"
    ACTIONABILITY = "actionability"
    SPECIFICITY = "specificity"


class QualityRating(Enum):
    """Rating band derived from the overall score."""
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needs-improvement"
    POOR = "poor"

    @classmethod
    def from_overall(cls, overall: int) -> "QualityRating":
        if overall >= 80:
            return cls.EXCELLENT
        if overall >= 65:
            return cls.GOOD
        if overall >= 50:
            return cls.NEEDS_IMPROVEMENT
        return cls.POOR


# Weights for overall score (percent, sums to 100)
DIMENSION_WEIGHTS: Dict[QualityDimension, int] = {
    QualityDimension.COMPLETENESS: 25,
    QualityDimension.CLARITY: 20,
    QualityDimension.ACTIONABILITY: 20,
    QualityDimension.STRUCTURE: 15,
    QualityDimension.EFFICIENCY: 10,
    QualityDimension.SPECIFICITY: 10,
}


@dataclass
class QualityScore:
    """Scores for a prompt, 0-100 per dimension."""
    clarity: int = 0
    efficiency: int = 0
    structure: int = 0
    completeness: int = 0
    actionability: int = 0
    specificity: int = 0
    overall: int = 0
    rating: QualityRating = QualityRating.POOR
    strengths: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @classmethod
    def from_dimensions(
        cls,
        scores: Dict[QualityDimension, int],
        strengths: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None
    ) -> "QualityScore":
        """Build a score, deriving ``overall`` and ``rating`` from the dimensions."""
        overall = weighted_overall(scores)
        return cls(
            clarity=scores[QualityDimension.CLARITY],
            efficiency=scores[QualityDimension.EFFICIENCY],
            structure=scores[QualityDimension.STRUCTURE],
            completeness=scores[QualityDimension.COMPLETENESS],
            actionability=scores[QualityDimension.ACTIONABILITY],
            specificity=scores[QualityDimension.SPECIFICITY],
            overall=overall,
            rating=QualityRating.from_overall(overall),
            strengths=strengths or [],
            suggestions=suggestions or [],
        )

    def dimensions(self) -> Dict[QualityDimension, int]:
        return {dim: getattr(self, dim.value) for dim in QualityDimension}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {dim.value: score for dim, score in self.dimensions().items()}
        data.update({
            "overall": self.overall,
            "rating": self.rating.value,
            "strengths": self.strengths,
            "suggestions": self.suggestions,
        })
        return data


def weighted_overall(scores: Dict[QualityDimension, int]) -> int:
    """Weighted average of the six dimensions, rounded half-up."""
    total = sum(scores[dim] * weight for dim, weight in DIMENSION_WEIGHTS.items())
    return round_half_up(total / 100)


ACTION_VERBS = [
    "build", "create", "write", "implement", "add", "fix", "debug", "refactor",
    "design", "plan", "document", "summarize", "migrate", "review", "explain",
    "generate", "update", "optimize", "test", "deploy", "analyze", "convert",
    "remove", "replace", "configure", "set up", "integrate", "validate",
    "audit", "list", "extract", "rename", "upgrade", "develop", "make",
]

HEDGE_WORDS = [
    "maybe", "perhaps", "probably", "somehow", "kind of", "sort of",
    "i guess", "i think", "might", "whatever", "something", "stuff", "things",
]

FILLER_WORDS = [
    "please", "kindly", "thank you", "thanks", "just", "really", "very",
    "basically", "actually", "literally", "honestly", "i was wondering",
    "i would like you to", "could you possibly", "if you don't mind",
]

VAGUE_PLACEHOLDERS = [
    "whatever", "anything", "tbd", "not sure", "no idea", "doesn't matter",
]

VAGUE_REQUESTS = [
    "help me", "something", "make it better", "improve it", "do stuff",
    "figure out", "look into", "deal with", "some stuff",
]

VAGUE_QUALIFIERS = [
    "good", "nice", "better", "some", "various", "several", "proper",
    "appropriate", "etc", "stuff", "things", "something",
]

OBJECTIVE_RE = re.compile(
    r"\b(objective|goal|purpose)\s*:|\bthe (goal|aim|objective) is\b|"
    r"\bi want to\b|\bwe need to\b|\bso that\b|^#+\s*(objective|goal)",
    re.IGNORECASE | re.MULTILINE,
)
CONSTRAINT_RE = re.compile(
    r"\b(must|must not|should not|shouldn't|cannot|can't|without|limit|limited|"
    r"within|at most|no more than|maximum|minimum|constraints?|deadline|budget|only)\b",
    re.IGNORECASE,
)
SUCCESS_RE = re.compile(
    r"success criteria|acceptance criteria|definition of done|\bdone when\b|"
    r"\bshould (return|result in|display|show)\b|"
    r"\bexpected (output|result|behaviou?r)\b|\btests? pass|- \[[ x]\]",
    re.IGNORECASE,
)
CONTEXT_RE = re.compile(
    r"\b(context|background|currently|existing|because|so that|"
    r"our (app|team|users|codebase|project|product)|we are|we're using|i'm using|using)\b",
    re.IGNORECASE,
)
_STEP_RE = re.compile(r"^\s*\d+[.)]\s|- \[[ x]\]", re.MULTILINE)
_BOLD_LABEL_RE = re.compile(r"\*\*[^*\n]+\*\*")
_PARAGRAPH_RE = re.compile(r"\n\s*\n")
_VERSION_RE = re.compile(r"\bv?\d+\.\d+")
_PATH_RE = re.compile(
    r"[\w.-]+/[\w./-]+|\b\w+\.(py|ts|tsx|js|jsx|go|rs|java|rb|json|ya?ml|md|toml|sql|css|html)\b"
)
_IDENTIFIER_RE = re.compile(r"\b[a-z]+[A-Z]\w*\b|\b[A-Z][a-z]+[A-Z]\w*\b|\b[a-z]+_[a-z_]+\b|`[^`]+`")
_QUOTED_RE = re.compile(r"\"[^\"\n]+\"")


class QualityAssessor:
    """
    Scores prompt quality across six weighted dimensions.

    Heuristics only; identical text and intent always produce identical
    scores. Empty or whitespace-only text scores zero everywhere.
    """

    STRENGTH_THRESHOLD = 75
    SUGGESTION_THRESHOLD = 50

    SUGGESTIONS = {
        QualityDimension.CLARITY: "State the objective explicitly and drop hedging words",
        QualityDimension.EFFICIENCY: "Remove pleasantries and filler words",
        QualityDimension.STRUCTURE: "Organize the prompt into sections or bullet points",
        QualityDimension.COMPLETENESS: "Add tech stack, constraints, success criteria and context",
        QualityDimension.ACTIONABILITY: "Start with a concrete action and name the deliverable",
        QualityDimension.SPECIFICITY: "Name concrete files, versions, identifiers or examples",
    }

    def assess(
        self,
        original: str,
        enhanced: str,
        intent: Any = None
    ) -> QualityScore:
        """
        Score the enhanced prompt, noting dimensions that did not improve.

        Args:
            original: The prompt as written
            enhanced: The prompt after pattern application
            intent: IntentAnalysis or PromptIntent (reserved for intent-aware tuning)

        Returns:
            QualityScore for the enhanced prompt
        """
        before = self.assess_quality(original, intent)
        after = self.assess_quality(enhanced, intent)

        stalled = [
            dim for dim, score in after.dimensions().items()
            if score < self.SUGGESTION_THRESHOLD and score <= before.dimensions()[dim]
        ]
        suggestions = list(after.suggestions)
        for dim in stalled:
            note = f"{dim.value.capitalize()} was not improved automatically; consider revising by hand"
            if note not in suggestions:
                suggestions.append(note)

        after.suggestions = suggestions
        return after

    def assess_quality(self, text: str, intent: Any = None) -> QualityScore:
        """
        Score a single text.

        Args:
            text: The text to score
            intent: IntentAnalysis or PromptIntent (optional)

        Returns:
            QualityScore with per-dimension scores
        """
        text = text or ""
        if not text.strip():
            zero = {dim: 0 for dim in QualityDimension}
            return QualityScore.from_dimensions(
                zero,
                suggestions=["Provide a prompt to assess"]
            )

        scores = {
            QualityDimension.CLARITY: self._score_clarity(text),
            QualityDimension.EFFICIENCY: self._score_efficiency(text),
            QualityDimension.STRUCTURE: self._score_structure(text),
            QualityDimension.COMPLETENESS: self._score_completeness(text),
            QualityDimension.ACTIONABILITY: self._score_actionability(text),
            QualityDimension.SPECIFICITY: self._score_specificity(text),
        }

        strengths = [
            f"Strong {dim.value}" for dim, score in scores.items()
            if score >= self.STRENGTH_THRESHOLD
        ]
        suggestions = [
            self.SUGGESTIONS[dim] for dim, score in scores.items()
            if score < self.SUGGESTION_THRESHOLD
        ]

        return QualityScore.from_dimensions(scores, strengths, suggestions)

    def compare(
        self,
        original: str,
        enhanced: str,
        intent: Any = None
    ) -> Dict[str, int]:
        """
        Compare quality scores between original and enhanced prompts.

        Returns dict with score differences.
        """
        before = self.assess_quality(original, intent)
        after = self.assess_quality(enhanced, intent)
        diff = {
            f"{dim.value}_improvement": after.dimensions()[dim] - score
            for dim, score in before.dimensions().items()
        }
        diff["overall_improvement"] = after.overall - before.overall
        return diff

    def _score_clarity(self, text: str) -> int:
        """Explicit objective, leading action, no hedging."""
        score = 50
        total = word_count(text)

        if OBJECTIVE_RE.search(text):
            score += 15
        if self._starts_with_action(text):
            score += 15

        hedges = count_occurrences(text, HEDGE_WORDS)
        score -= min(30, hedges * 8)

        if total < 3:
            score -= 15
        elif total >= 8:
            score += 10

        return clamp(score)

    def _score_efficiency(self, text: str) -> int:
        """Share of filler and pleasantries in the text."""
        total = word_count(text)
        if total == 0:
            return 0

        filler = count_occurrences(text, FILLER_WORDS)
        score = 100 - min(60, round_half_up(filler / total * 250))

        if total > 300:
            score -= 10

        return clamp(score)

    def _score_structure(self, text: str) -> int:
        """Section markers, lists and their placement."""
        score = 30
        total = word_count(text)

        if has_headers(text):
            score += 25
        if has_bullets(text):
            score += 20
        if _BOLD_LABEL_RE.search(text):
            score += 10
        if _PARAGRAPH_RE.search(text.strip()):
            score += 10

        leading = text.lstrip()
        if leading.startswith("#") or leading.startswith("**") or OBJECTIVE_RE.match(leading):
            score += 5

        if is_single_line(text) and not has_bullets(text):
            if total <= 15:
                score += 10
            elif total > 40:
                score -= 15

        return clamp(score)

    def _score_completeness(self, text: str) -> int:
        """Tech stack, constraints, success criteria and context."""
        score = 40

        if has_any(text, TECH_TERMS):
            score += 15
        if CONSTRAINT_RE.search(text):
            score += 15
        if SUCCESS_RE.search(text):
            score += 15
        if CONTEXT_RE.search(text):
            score += 15

        placeholders = count_occurrences(text, VAGUE_PLACEHOLDERS)
        score -= min(30, placeholders * 10)

        return clamp(score)

    def _score_actionability(self, text: str) -> int:
        """Concrete verbs and deliverables, no vague requests."""
        score = 40
        total = word_count(text)

        if has_any(text, ACTION_VERBS):
            score += 20
        if self._starts_with_action(text):
            score += 10
        if _STEP_RE.search(text):
            score += 10
        if has_any(text, DELIVERABLE_NOUNS):
            score += 10

        vague = count_occurrences(text, VAGUE_REQUESTS)
        score -= min(30, vague * 10)

        if total < 3:
            score -= 20

        return clamp(score)

    def _score_specificity(self, text: str) -> int:
        """Numbers, versions, paths, identifiers and named technology."""
        score = 40

        if re.search(r"\d", text):
            score += 10
        if _VERSION_RE.search(text):
            score += 10
        if _PATH_RE.search(text):
            score += 10
        if _IDENTIFIER_RE.search(text):
            score += 10
        if has_any(text, TECH_TERMS):
            score += 10
        if _QUOTED_RE.search(text):
            score += 10

        vague = count_occurrences(text, VAGUE_QUALIFIERS)
        score -= min(24, vague * 8)

        return clamp(score)

    def _starts_with_action(self, text: str) -> bool:
        """True when any sentence opens with an action verb."""
        for sentence in extract_sentences(text):
            tokens = [w.lower().strip(".,:;") for w in words(sentence)[:2]]
            if not tokens:
                continue
            if tokens[0] in ACTION_VERBS or " ".join(tokens) in ACTION_VERBS:
                return True
        return False
