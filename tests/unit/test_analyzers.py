"""Tests for intent detection and quality assessment."""

import pytest

from clavix.intelligence.analyzers import (
    IntentDetector,
    PromptIntent,
    QualityAssessor,
    QualityDimension,
)
from clavix.intelligence.analyzers.quality_assessor import (
    QualityRating,
    weighted_overall,
)


class TestIntentDetector:
    """Tests for IntentDetector."""

    def test_code_generation(self, detector, login_prompt):
        analysis = detector.analyze(login_prompt)
        assert analysis.primary_intent is PromptIntent.CODE_GENERATION
        assert analysis.confidence == 88

    @pytest.mark.parametrize("prompt,expected", [
        ("Fix the crash when uploading files", PromptIntent.DEBUGGING),
        ("Migrate our database from MySQL to PostgreSQL", PromptIntent.MIGRATION),
        ("Write a PRD for a habit tracker app", PromptIntent.PRD_GENERATION),
        ("Summarize this conversation", PromptIntent.SUMMARIZATION),
        ("Audit the login flow for XSS vulnerabilities", PromptIntent.SECURITY_REVIEW),
        ("Refactor the billing module to simplify it", PromptIntent.REFINEMENT),
        ("Explain the difference between threads and processes", PromptIntent.LEARNING),
    ])
    def test_detects_intent(self, detector, prompt, expected):
        assert detector.analyze(prompt).primary_intent is expected

    def test_conversation_is_planning(self, detector, conversation_prompt):
        analysis = detector.analyze(conversation_prompt)
        assert analysis.primary_intent is PromptIntent.PLANNING
        assert analysis.confidence == 100

    def test_no_signal_defaults(self, detector):
        analysis = detector.analyze("idk")
        assert analysis.primary_intent is PromptIntent.CODE_GENERATION
        assert analysis.confidence == 20
        assert analysis.characteristics.is_open_ended

    def test_empty_prompt(self, detector):
        analysis = detector.analyze("")
        assert analysis.primary_intent is PromptIntent.CODE_GENERATION
        assert 0 <= analysis.confidence <= 100

    def test_tie_keeps_declaration_order(self, detector):
        analysis = detector.analyze("Fix the bug and add unit tests")
        assert analysis.primary_intent is PromptIntent.DEBUGGING
        assert analysis.confidence == 61
        assert (PromptIntent.TESTING, 5) in analysis.secondary_intents

    def test_characteristics(self, detector, long_prompt):
        assert detector.analyze(long_prompt).characteristics.needs_structure
        assert detector.analyze("Fix `parse_config` in config.py").characteristics.has_code_context
        assert detector.analyze("Build a React dashboard").characteristics.is_technical
        assert not detector.analyze("Build a login page").characteristics.is_open_ended

    def test_exploratory_is_open_ended(self, detector):
        analysis = detector.analyze("Maybe we could brainstorm a new page")
        assert analysis.characteristics.is_open_ended

    def test_deterministic(self, detector, conversation_prompt):
        assert detector.analyze(conversation_prompt) == detector.analyze(conversation_prompt)

    def test_to_dict(self, detector, login_prompt):
        data = detector.analyze(login_prompt).to_dict()
        assert data["primary_intent"] == "code-generation"
        assert set(data["characteristics"]) == {
            "is_open_ended", "needs_structure", "has_code_context", "is_technical"
        }

    def test_parse_intent(self):
        assert PromptIntent.parse("PRD_GENERATION") is PromptIntent.PRD_GENERATION
        assert PromptIntent.parse("nonsense") is None


class TestQualityAssessor:
    """Tests for QualityAssessor."""

    def test_short_prompt_scores(self, assessor, login_prompt):
        score = assessor.assess_quality(login_prompt)
        assert score.clarity == 65
        assert score.efficiency == 100
        assert score.structure == 40
        assert score.completeness == 40
        assert score.actionability == 80
        assert score.specificity == 40
        assert score.overall == 59
        assert score.rating is QualityRating.NEEDS_IMPROVEMENT

    def test_vague_answer_scores(self, assessor):
        score = assessor.assess_quality("idk")
        assert (score.clarity, score.actionability) == (35, 20)
        assert score.overall == 41
        assert score.rating is QualityRating.POOR

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_empty_scores_zero(self, assessor, text):
        score = assessor.assess_quality(text)
        assert all(value == 0 for value in score.dimensions().values())
        assert score.overall == 0
        assert score.suggestions == ["Provide a prompt to assess"]

    def test_overall_is_weighted_average(self, assessor, sample_prompts):
        for text in sample_prompts.values():
            score = assessor.assess_quality(text)
            assert score.overall == weighted_overall(score.dimensions())
            assert all(0 <= value <= 100 for value in score.dimensions().values())

    def test_deterministic(self, assessor, long_prompt):
        assert assessor.assess_quality(long_prompt) == assessor.assess_quality(long_prompt)

    def test_hedging_lowers_clarity(self, assessor):
        hedged = assessor.assess_quality("maybe do something with the things somehow")
        direct = assessor.assess_quality("Implement the export endpoint for invoices")
        assert hedged.clarity < direct.clarity

    def test_filler_lowers_efficiency(self, assessor):
        score = assessor.assess_quality("Please just really basically help with the report")
        assert score.efficiency < 100

    def test_structure_rewards_sections(self, assessor):
        flat = assessor.assess_quality(
            "build the api and the database and the frontend and the tests and deploy it "
            "to production with monitoring and alerts and dashboards and docs for the team "
            "and make sure it scales and is secure and fast and cheap to run"
        )
        structured = assessor.assess_quality(
            "## Goal\nShip the API\n\n## Tasks\n- Database\n- Frontend\n- Tests"
        )
        assert structured.structure > flat.structure

    def test_specificity_rewards_details(self, assessor):
        vague = assessor.assess_quality("Update some things in the app")
        precise = assessor.assess_quality("Update `load_config` in src/app/config.py for Python 3.12")
        assert precise.specificity > vague.specificity

    def test_strengths_and_suggestions(self, assessor, login_prompt):
        score = assessor.assess_quality(login_prompt)
        assert "Strong efficiency" in score.strengths
        assert QualityAssessor.SUGGESTIONS[QualityDimension.STRUCTURE] in score.suggestions

    def test_assess_notes_stalled_dimensions(self, assessor):
        score = assessor.assess("idk", "idk")
        assert any("not improved automatically" in s for s in score.suggestions)

    def test_compare(self, assessor, login_prompt):
        diff = assessor.compare(login_prompt, "**Objective:** " + login_prompt)
        assert "overall_improvement" in diff
        assert diff["efficiency_improvement"] == 0

    @pytest.mark.parametrize("overall,rating", [
        (80, QualityRating.EXCELLENT),
        (79, QualityRating.GOOD),
        (65, QualityRating.GOOD),
        (64, QualityRating.NEEDS_IMPROVEMENT),
        (50, QualityRating.NEEDS_IMPROVEMENT),
        (49, QualityRating.POOR),
    ])
    def test_rating_bands(self, overall, rating):
        assert QualityRating.from_overall(overall) is rating

    def test_to_dict(self, assessor, login_prompt):
        data = assessor.assess_quality(login_prompt).to_dict()
        assert data["overall"] == 59
        assert data["rating"] == "needs-improvement"
