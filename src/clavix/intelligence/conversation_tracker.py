"""Per-session quality tracking for conversational mode."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .text import matched_keywords, round_half_up

logger = logging.getLogger(__name__)


@dataclass
class TrackedTopic:
    name: str
    confidence: int
    first_mentioned: int


@dataclass
class ConversationQuality:
    topics: List[TrackedTopic]
    overall_completeness: int
    ambiguity_level: float
    message_count: int


@dataclass
class NudgeResult:
    should_nudge: bool
    message: Optional[str] = None
    gap: Optional[str] = None


class ConversationQualityTracker:
    """
    Quietly tracks topic coverage across a conversation.

    Encourages progress with periodic checkpoints and nudges about a
    missing critical topic at most once per session.
    """

    TOPIC_KEYWORDS: Dict[str, List[str]] = {
        "features": ["feature", "functionality", "should", "must", "need", "want", "capability"],
        "tech stack": ["react", "node", "typescript", "python", "database", "api", "backend", "frontend"],
        "constraints": ["constraint", "limitation", "budget", "timeline", "deadline", "must not", "cannot"],
        "users": ["user", "customer", "audience", "persona", "who will"],
        "goals": ["goal", "objective", "purpose", "why", "problem", "solve"],
        "scope": ["scope", "out of scope", "not include", "exclude", "later", "mvp"],
        "success": ["success", "metric", "kpi", "measure", "criteria"],
        "design": ["design", "ui", "ux", "layout", "interface", "look"],
    }
    CRITICAL_TOPICS = ["features", "goals"]

    CHECKPOINT_INTERVAL = 5
    MIN_MESSAGES_BEFORE_NUDGE = 3
    NUDGE_COMPLETENESS_THRESHOLD = 40
    COVERED_CONFIDENCE = 30
    GAP_CONFIDENCE = 20
    CONFIDENCE_PER_KEYWORD = 25

    def __init__(self):
        self._topics: Dict[str, TrackedTopic] = {}
        self._message_count = 0
        self._has_nudged = False
        self._last_checkpoint_at = 0

    @property
    def message_count(self) -> int:
        return self._message_count

    def track_message(self, content: str) -> None:
        """Record a message and update topic confidence."""
        self._message_count += 1
        for topic, keywords in self.TOPIC_KEYWORDS.items():
            hits = matched_keywords(content or "", keywords)
            if not hits:
                continue
            existing = self._topics.get(topic)
            previous = existing.confidence if existing else 0
            self._topics[topic] = TrackedTopic(
                name=topic,
                confidence=min(100, len(hits) * self.CONFIDENCE_PER_KEYWORD + previous),
                first_mentioned=existing.first_mentioned if existing else self._message_count,
            )

    def get_positive_checkpoint(self) -> Optional[str]:
        """Encouraging progress note, at most once every five messages."""
        if (
            self._message_count < self.CHECKPOINT_INTERVAL
            or self._message_count - self._last_checkpoint_at < self.CHECKPOINT_INTERVAL
        ):
            return None

        self._last_checkpoint_at = self._message_count
        covered = self.covered_topics()
        if not covered:
            return None

        return f"Shaping up nicely! Covered: {', '.join(covered[:3])}. Continue or summarize anytime."

    def should_nudge(self) -> NudgeResult:
        """Suggest one missing critical topic, once per session, when coverage is low."""
        if self._has_nudged or self._message_count < self.MIN_MESSAGES_BEFORE_NUDGE:
            return NudgeResult(should_nudge=False)

        if self.calculate_quality().overall_completeness >= self.NUDGE_COMPLETENESS_THRESHOLD:
            return NudgeResult(should_nudge=False)

        gap = self._critical_gap()
        if gap is None:
            return NudgeResult(should_nudge=False)

        self._has_nudged = True
        logger.debug("Nudging about missing topic %s", gap)
        return NudgeResult(
            should_nudge=True,
            gap=gap,
            message=(
                f"One thought: a note about {gap} would help. "
                "No worries, Clavix will fill gaps when you summarize."
            ),
        )

    def get_end_message(self) -> str:
        covered = self.covered_topics()
        if not covered:
            return "Session recorded! Clavix Intelligence will help structure your requirements."
        if len(covered) >= 3:
            return "Great session! You covered several key areas. Clavix Intelligence will enhance your summary."
        return "Great session! Clavix Intelligence will enhance your summary with any missing pieces."

    def calculate_quality(self) -> ConversationQuality:
        topics = list(self._topics.values())
        covered = sum(1 for t in topics if t.confidence >= self.COVERED_CONFIDENCE)
        completeness = min(100, round_half_up(covered / len(self.TOPIC_KEYWORDS) * 100))

        mean_confidence = sum(t.confidence for t in topics) / len(topics) if topics else 0
        return ConversationQuality(
            topics=topics,
            overall_completeness=completeness,
            ambiguity_level=max(0, 100 - mean_confidence),
            message_count=self._message_count,
        )

    def covered_topics(self) -> List[str]:
        """Covered topic names, most confident first."""
        covered = [t for t in self._topics.values() if t.confidence >= self.COVERED_CONFIDENCE]
        return [t.name for t in sorted(covered, key=lambda t: t.confidence, reverse=True)]

    def reset(self) -> None:
        self._topics.clear()
        self._message_count = 0
        self._has_nudged = False
        self._last_checkpoint_at = 0

    def get_summary(self) -> str:
        quality = self.calculate_quality()
        return (
            f"Messages: {self._message_count}, "
            f"Topics: [{', '.join(self.covered_topics())}], "
            f"Completeness: {quality.overall_completeness}%"
        )

    def _critical_gap(self) -> Optional[str]:
        for topic in self.CRITICAL_TOPICS:
            tracked = self._topics.get(topic)
            if tracked is None or tracked.confidence < self.GAP_CONFIDENCE:
                return topic
        return None
