"""Registry of optimization patterns."""

import logging
from typing import Dict, List, Optional, Union

from ...core.exceptions import ConfigurationError
from ...core.types import OptimizationMode, OptimizationPhase, PatternMode
from ..analyzers.intent_detector import PromptIntent
from .base import Pattern
from .clarity import ACTIONABILITY_ENHANCER, AMBIGUITY_DETECTOR, OBJECTIVE_CLARIFIER
from .completeness import (
    EDGE_CASE_IDENTIFIER,
    ERROR_CONTEXT_ENRICHER,
    SCOPE_DEFINER,
    SUCCESS_CRITERIA_ENFORCER,
    TECHNICAL_CONTEXT_ENRICHER,
)
from .conversational import (
    CONVERSATION_SUMMARIZER,
    IMPLICIT_REQUIREMENT_EXTRACTOR,
    TOPIC_COHERENCE_ANALYZER,
)
from .domain import DOCUMENTATION_AUDIENCE, MIGRATION_SAFETY_CHECKLIST, SECURITY_REVIEW_SCOPE
from .prd import PRD_STRUCTURE_ENFORCER, REQUIREMENT_PRIORITIZER, USER_PERSONA_ENRICHER
from .structure import OUTPUT_FORMAT_ENFORCER, STEP_DECOMPOSER, STRUCTURE_ORGANIZER

logger = logging.getLogger(__name__)

# Registration order breaks priority ties.
DEFAULT_PATTERNS: List[Pattern] = [
    OBJECTIVE_CLARIFIER,
    STRUCTURE_ORGANIZER,
    ERROR_CONTEXT_ENRICHER,
    MIGRATION_SAFETY_CHECKLIST,
    SECURITY_REVIEW_SCOPE,
    PRD_STRUCTURE_ENFORCER,
    CONVERSATION_SUMMARIZER,
    TECHNICAL_CONTEXT_ENRICHER,
    IMPLICIT_REQUIREMENT_EXTRACTOR,
    REQUIREMENT_PRIORITIZER,
    SUCCESS_CRITERIA_ENFORCER,
    DOCUMENTATION_AUDIENCE,
    TOPIC_COHERENCE_ANALYZER,
    USER_PERSONA_ENRICHER,
    SCOPE_DEFINER,
    ACTIONABILITY_ENHANCER,
    STEP_DECOMPOSER,
    OUTPUT_FORMAT_ENFORCER,
    AMBIGUITY_DETECTOR,
    EDGE_CASE_IDENTIFIER,
]


class PatternLibrary:
    """
    Holds the registered patterns and selects them per mode and intent.

    Selection always returns patterns sorted by descending priority;
    patterns with equal priority keep their registration order.
    """

    def __init__(self, register_defaults: bool = True):
        self._patterns: Dict[str, Pattern] = {}
        if register_defaults:
            for pattern in DEFAULT_PATTERNS:
                self.register(pattern)

    def register(self, pattern: Pattern) -> None:
        """Register a pattern. Ids must be unique."""
        if pattern.id in self._patterns:
            raise ConfigurationError(
                f"Pattern '{pattern.id}' is already registered",
                config_key="patterns",
            )
        self._patterns[pattern.id] = pattern
        logger.debug("Registered pattern %s (priority %d)", pattern.id, pattern.priority)

    def replace(self, pattern: Pattern) -> None:
        """Swap an already registered pattern, keeping its position."""
        if pattern.id not in self._patterns:
            raise ConfigurationError(
                f"Pattern '{pattern.id}' is not registered",
                config_key="patterns",
            )
        self._patterns[pattern.id] = pattern

    def select_patterns(
        self,
        intent: PromptIntent,
        mode: Union[OptimizationMode, str]
    ) -> List[Pattern]:
        """Patterns for a fast or deep run on a prompt with ``intent``."""
        mode = OptimizationMode(mode) if isinstance(mode, str) else mode
        if mode.is_workflow:
            return self.select_patterns_for_mode(mode, intent)

        return self._by_priority(
            p for p in self._patterns.values()
            if p.mode.matches(mode) and p.applies_to(intent)
        )

    def select_patterns_for_mode(
        self,
        mode: Union[OptimizationMode, str],
        intent: PromptIntent,
        phase: Optional[OptimizationPhase] = None
    ) -> List[Pattern]:
        """
        Patterns for a PRD or conversational workflow.

        Args:
            mode: The workflow (prd or conversational)
            intent: Intent the patterns must accept
            phase: Workflow phase; None selects patterns for every phase

        Returns:
            Matching patterns, highest priority first
        """
        mode = OptimizationMode(mode) if isinstance(mode, str) else mode
        if not mode.is_workflow:
            return self.select_patterns(intent, mode)

        return self._by_priority(
            p for p in self._patterns.values()
            if mode in p.workflows and p.applies_to(intent) and p.runs_in_phase(phase)
        )

    def get_pattern(self, pattern_id: str) -> Optional[Pattern]:
        return self._patterns.get(pattern_id)

    def get_pattern_count(self) -> int:
        return len(self._patterns)

    def get_patterns_by_mode(self, mode: Union[OptimizationMode, PatternMode, str]) -> List[Pattern]:
        """All patterns that take part in ``mode``, in registration order."""
        if isinstance(mode, str):
            mode = OptimizationMode.parse(mode) or PatternMode(mode)
        if isinstance(mode, PatternMode):
            return [p for p in self._patterns.values() if p.mode is mode]
        if mode.is_workflow:
            return [p for p in self._patterns.values() if mode in p.workflows]
        return [p for p in self._patterns.values() if p.mode.matches(mode)]

    def list_patterns(self) -> List[Pattern]:
        return list(self._patterns.values())

    @staticmethod
    def _by_priority(patterns) -> List[Pattern]:
        return sorted(patterns, key=lambda p: p.priority, reverse=True)
