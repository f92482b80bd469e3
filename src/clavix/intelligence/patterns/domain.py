"""Checklists for intents with well-known failure modes."""

from ...core.types import Impact, PatternMode
from ..analyzers.intent_detector import PromptIntent
from ..analyzers.quality_assessor import QualityDimension
from ..text import has_any
from .base import Pattern, PatternContext, PatternResult, applied, intents, skipped

MIGRATION_CHECKLIST = [
    "Back up data and configuration before starting",
    "Define a rollback plan",
    "Run old and new versions side by side where possible",
    "Verify behavior with the existing test suite after each step",
]

SECURITY_FOCUS = [
    "Input validation and injection (SQL, command, XSS)",
    "Authentication and session management",
    "Authorization and access control",
    "Secrets handling and configuration",
    "Vulnerable or outdated dependencies",
    "Sensitive data in logs and error messages",
]

AUDIENCE_MARKERS = [
    "audience", "for developers", "for beginners", "end users", "readers",
    "maintainers", "contributors", "for newcomers", "non-technical",
]


def add_migration_safety(text: str, context: PatternContext) -> PatternResult:
    if not text.strip():
        return skipped(text, QualityDimension.COMPLETENESS, "Empty prompt")
    if "### Migration Safety" in text or has_any(text, ["rollback", "roll back"]):
        return skipped(text, QualityDimension.COMPLETENESS, "Migration safety already covered")

    enhanced = text + "\n\n### Migration Safety\n" + "\n".join(f"- [ ] {item}" for item in MIGRATION_CHECKLIST)
    return applied(
        enhanced,
        QualityDimension.COMPLETENESS,
        "Added a migration safety checklist",
        Impact.HIGH,
    )


def scope_security_review(text: str, context: PatternContext) -> PatternResult:
    if not text.strip():
        return skipped(text, QualityDimension.COMPLETENESS, "Empty prompt")
    if "### Security Review Focus" in text or has_any(text, ["owasp", "threat model"]):
        return skipped(text, QualityDimension.COMPLETENESS, "Security review scope already defined")

    enhanced = (
        text
        + "\n\n### Security Review Focus\n"
        + "\n".join(f"- {item}" for item in SECURITY_FOCUS)
        + "\n\nReport each finding with severity, location and a suggested fix."
    )
    return applied(
        enhanced,
        QualityDimension.COMPLETENESS,
        "Scoped the security review to concrete areas",
        Impact.HIGH,
    )


def define_documentation_audience(text: str, context: PatternContext) -> PatternResult:
    if not text.strip():
        return skipped(text, QualityDimension.COMPLETENESS, "Empty prompt")
    if "**Audience:**" in text or has_any(text, AUDIENCE_MARKERS):
        return skipped(text, QualityDimension.COMPLETENESS, "Audience already specified")

    enhanced = (
        text
        + "\n\n**Audience:** [Who will read this: new contributors, API consumers or end users]"
        + "\n**Depth:** [Overview, reference or step-by-step guide]"
    )
    return applied(
        enhanced,
        QualityDimension.COMPLETENESS,
        "Asked for the intended audience and depth",
        Impact.MEDIUM,
    )


MIGRATION_SAFETY_CHECKLIST = Pattern(
    id="migration-safety-checklist",
    name="MigrationSafetyChecklist",
    description="Adds backup, rollback and verification steps to migrations",
    applicable_intents=intents(PromptIntent.MIGRATION),
    mode=PatternMode.BOTH,
    priority=9,
    transform=add_migration_safety,
)

SECURITY_REVIEW_SCOPE = Pattern(
    id="security-review-scope",
    name="SecurityReviewScope",
    description="Lists the areas a security review must cover",
    applicable_intents=intents(PromptIntent.SECURITY_REVIEW),
    mode=PatternMode.BOTH,
    priority=9,
    transform=scope_security_review,
)

DOCUMENTATION_AUDIENCE = Pattern(
    id="documentation-audience",
    name="DocumentationAudience",
    description="Asks who the documentation is for",
    applicable_intents=intents(PromptIntent.DOCUMENTATION),
    mode=PatternMode.BOTH,
    priority=7,
    transform=define_documentation_audience,
)
