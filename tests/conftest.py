"""Shared pytest fixtures for Clavix tests."""

import logging
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clavix.core.config import get_settings  # noqa: E402
from clavix.core.types import OptimizationMode  # noqa: E402
from clavix.intelligence import (  # noqa: E402
    IntentDetector,
    PatternLibrary,
    QualityAssessor,
    UniversalOptimizer,
)
from clavix.intelligence.analyzers.intent_detector import PromptIntent  # noqa: E402
from clavix.intelligence.patterns import PatternContext  # noqa: E402
from clavix.workspace import Workspace  # noqa: E402


LOGIN_PROMPT = "Build a login page"
CONVERSATION_PROMPT = (
    "I need a dashboard, also I want real-time updates, "
    "and we need user management with admin roles"
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate settings and logging state between tests."""
    for key in list(__import__("os").environ):
        if key.startswith("CLAVIX_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()
    logger = logging.getLogger("clavix")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# Sample prompts
@pytest.fixture
def login_prompt():
    """A short prompt missing most details."""
    return LOGIN_PROMPT


@pytest.fixture
def vague_answer():
    """A PRD answer with no content."""
    return "idk"


@pytest.fixture
def conversation_prompt():
    """Free-form requirements from a conversation."""
    return CONVERSATION_PROMPT


@pytest.fixture
def prioritized_prd():
    """PRD content that already separates priorities."""
    return (
        "## Must-Have\n"
        "- Users should log in with email\n\n"
        "## Nice-to-Have\n"
        "- Dark mode\n"
    )


@pytest.fixture
def long_prompt():
    """A long single-paragraph prompt."""
    return (
        "We are building an internal tool for the support team and it has to pull tickets "
        "from the helpdesk, group them by customer, show how long each one has been open, "
        "let agents assign tickets to each other, and send a daily digest to the team lead "
        "so nothing gets forgotten over the weekend"
    )


@pytest.fixture
def sample_prompts(login_prompt, vague_answer, conversation_prompt, prioritized_prd, long_prompt):
    """Collection of sample prompts, including degenerate ones."""
    return {
        "empty": "",
        "whitespace": "   \n ",
        "login": login_prompt,
        "vague": vague_answer,
        "conversation": conversation_prompt,
        "prioritized": prioritized_prd,
        "long": long_prompt,
        "debug": "Fix the crash in `app.py` when the config file is missing",
        "hedged": "Maybe add something for caching, help me make it better",
        "migration": "Migrate our database from MySQL to PostgreSQL and then update the API",
        "docs": "Write a README for the billing module",
        "security": "Audit the auth module for security vulnerabilities",
    }


# Components
@pytest.fixture
def detector():
    return IntentDetector()


@pytest.fixture
def assessor():
    return QualityAssessor()


@pytest.fixture
def library():
    return PatternLibrary()


@pytest.fixture
def optimizer():
    return UniversalOptimizer()


@pytest.fixture
def make_context():
    """Build a PatternContext for direct pattern calls."""
    def _make(text="", intent=PromptIntent.PLANNING, mode=OptimizationMode.DEEP, **kwargs):
        return PatternContext(intent=intent, mode=mode, original_prompt=text, **kwargs)
    return _make


@pytest.fixture
def workspace(tmp_path):
    """A workspace rooted in a temporary directory."""
    return Workspace(tmp_path, version="1.2.3")
