"""
Clavix - prompt intelligence for AI-assisted development.

Detects what a prompt is for, rewrites it with deterministic patterns,
scores its quality and recommends a deeper workflow when it needs one.

Basic Usage:
    >>> from clavix import Clavix
    >>> cx = Clavix()
    >>>
    >>> result = cx.optimize("Build a login page")
    >>> print(result.enhanced)
    >>>
    >>> cx.analyze_escalation(result).should_escalate
    True
    >>>
    >>> cx.validate_answer("idk", "q1").suggestion
    "adding the problem you're solving would help"

For more control, use the individual modules:
    - clavix.intelligence: Intent detection, patterns, quality and the optimizer
    - clavix.workspace: The .clavix directory, config and saved prompts
    - clavix.cli: Command-line interface
"""

from typing import Optional, Union

from .core.types import OptimizationMode, OptimizationPhase, DocumentType, Impact
from .core.exceptions import ClavixError, PatternError, ConfigurationError, WorkspaceError
from .core.config import Settings, get_settings
from .intelligence import (
    AnswerValidation,
    ContextOverride,
    ConversationQualityTracker,
    EscalationAnalysis,
    IntentAnalysis,
    OptimizationResult,
    PatternLibrary,
    PromptIntent,
    QualityScore,
    UniversalOptimizer,
)
from .workspace import Workspace

__all__ = [
    # Main class
    "Clavix",
    # Enums
    "OptimizationMode",
    "OptimizationPhase",
    "DocumentType",
    "Impact",
    "PromptIntent",
    # Exceptions
    "ClavixError",
    "PatternError",
    "ConfigurationError",
    "WorkspaceError",
    # Components
    "UniversalOptimizer",
    "PatternLibrary",
    "ConversationQualityTracker",
    "Workspace",
    "Settings",
    # Result types
    "AnswerValidation",
    "ContextOverride",
    "EscalationAnalysis",
    "IntentAnalysis",
    "OptimizationResult",
    "QualityScore",
]


class Clavix:
    """
    Main interface for prompt optimization.

    Example:
        >>> cx = Clavix()
        >>> result = cx.optimize("Plan a billing migration", mode="deep")
        >>> cx.save(result)
    """

    def __init__(
        self,
        root: str = ".",
        settings: Optional[Settings] = None
    ):
        """
        Args:
            root: Project directory holding the .clavix workspace
            settings: Settings (defaults to environment-derived values)
        """
        self.root = root
        self.settings = settings or get_settings()
        self._optimizer: Optional[UniversalOptimizer] = None
        self._workspace: Optional[Workspace] = None

    @property
    def optimizer(self) -> UniversalOptimizer:
        """Get or create the optimizer instance."""
        if self._optimizer is None:
            self._optimizer = UniversalOptimizer()
        return self._optimizer

    @property
    def workspace(self) -> Workspace:
        """Get or create the workspace instance."""
        if self._workspace is None:
            self._workspace = Workspace(self.root, self.settings.workspace, version=self.settings.version)
        return self._workspace

    @property
    def version(self) -> str:
        return self.settings.version

    def optimize(
        self,
        prompt: str,
        mode: Union[str, OptimizationMode, None] = None,
        context_override: Optional[ContextOverride] = None
    ) -> OptimizationResult:
        """Optimize a prompt; ``mode`` defaults to the configured default mode."""
        return self.optimizer.optimize(
            prompt,
            mode or self.settings.intelligence.default_mode,
            context_override,
        )

    def analyze_escalation(self, result: OptimizationResult) -> EscalationAnalysis:
        return self.optimizer.analyze_escalation(result)

    def validate_answer(self, answer: str, question_id: str) -> AnswerValidation:
        return self.optimizer.validate_prd_answer(answer, question_id)

    def save(self, result: OptimizationResult):
        """Persist a result to the workspace."""
        return self.workspace.save_prompt(result)

    def list_prompts(self):
        return self.workspace.list_prompts()
