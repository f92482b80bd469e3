"""Tests for the UniversalOptimizer."""

import dataclasses
import logging

import pytest

from clavix.core import OptimizationMode, OptimizationPhase, PatternError
from clavix.intelligence import (
    ContextOverride,
    OptimizationResult,
    PatternLibrary,
    PromptIntent,
    QualityAssessor,
    QualityScore,
    UniversalOptimizer,
)
from clavix.intelligence.analyzers import IntentAnalysis, QualityDimension
from clavix.intelligence.analyzers.intent_detector import IntentCharacteristics


class FixedAssessor(QualityAssessor):
    """Assessor that always returns the same score."""

    def __init__(self, score):
        self.score = score

    def assess_quality(self, text, intent=None):
        return self.score


def _score(**overrides):
    dims = {dim: 60 for dim in QualityDimension}
    dims.update({QualityDimension(name): value for name, value in overrides.items()})
    return QualityScore.from_dimensions(dims)


def _names(result):
    return [p.name for p in result.applied_patterns]


class TestOptimize:
    """Tests for optimize()."""

    def test_fast_mode(self, optimizer, login_prompt):
        result = optimizer.optimize(login_prompt, OptimizationMode.FAST)
        assert result.mode is OptimizationMode.FAST
        assert result.original == login_prompt
        assert result.intent.primary_intent is PromptIntent.CODE_GENERATION
        assert _names(result) == ["ObjectiveClarifier", "TechnicalContextEnricher"]
        assert result.enhanced.startswith("**Objective:** Build a login page\n\n**Technical Details:**")
        assert len(result.improvements) == 2
        assert result.quality.completeness < 60
        assert result.processing_time_ms >= 0

    def test_mode_as_string(self, optimizer, login_prompt):
        assert optimizer.optimize(login_prompt, "deep").mode is OptimizationMode.DEEP

    def test_unknown_mode_falls_back_to_fast(self, optimizer, login_prompt, caplog):
        with caplog.at_level(logging.WARNING, logger="clavix"):
            result = optimizer.optimize(login_prompt, "turbo")
        assert result.mode is OptimizationMode.FAST
        assert "Unknown optimization mode" in caplog.text

    @pytest.mark.parametrize("mode", list(OptimizationMode))
    def test_empty_prompt(self, optimizer, mode):
        result = optimizer.optimize("", mode)
        assert result.enhanced == ""
        assert result.applied_patterns == []
        assert result.quality.overall == 0

    def test_deterministic(self, optimizer, conversation_prompt):
        first = optimizer.optimize(conversation_prompt, "deep")
        second = optimizer.optimize(conversation_prompt, "deep")
        assert first.enhanced == second.enhanced
        assert first.quality.to_dict() == second.quality.to_dict()
        assert first.intent == second.intent
        assert _names(first) == _names(second)

    def test_result_keeps_original_text(self, optimizer, sample_prompts):
        for text in sample_prompts.values():
            for mode in OptimizationMode:
                assert text in optimizer.optimize(text, mode).enhanced

    def test_intent_override(self, optimizer, login_prompt):
        result = optimizer.optimize(login_prompt, "fast", ContextOverride(intent="planning"))
        assert result.intent.primary_intent is PromptIntent.PLANNING
        assert result.intent.confidence == 88

    def test_unknown_intent_override_ignored(self, optimizer, login_prompt, caplog):
        with caplog.at_level(logging.WARNING, logger="clavix"):
            result = optimizer.optimize(login_prompt, "fast", ContextOverride(intent="nonsense"))
        assert result.intent.primary_intent is PromptIntent.CODE_GENERATION
        assert "Ignoring unknown intent override" in caplog.text

    def test_failing_pattern_is_skipped(self, login_prompt, caplog):
        def boom(text, context):
            raise RuntimeError("pattern exploded")

        library = PatternLibrary()
        library.replace(dataclasses.replace(library.get_pattern("objective-clarifier"), transform=boom))
        optimizer = UniversalOptimizer(pattern_library=library)

        with caplog.at_level(logging.ERROR, logger="clavix"):
            result = optimizer.optimize(login_prompt, "fast")

        assert _names(result) == ["TechnicalContextEnricher"]
        assert result.enhanced.startswith(login_prompt + "\n\n**Technical Details:**")
        assert "Error applying pattern objective-clarifier" in caplog.text

        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error, PatternError)
        assert error.pattern_id == "objective-clarifier"
        assert isinstance(error.cause, RuntimeError)
        assert result.to_dict()["errors"] == [{
            "pattern_id": "objective-clarifier",
            "message": "Error applying pattern objective-clarifier: pattern exploded",
        }]

    def test_to_dict(self, optimizer, login_prompt):
        data = optimizer.optimize(login_prompt).to_dict()
        assert data["mode"] == "fast"
        assert data["applied_patterns"][0]["name"] == "ObjectiveClarifier"
        assert data["improvements"][0]["dimension"] == "clarity"
        assert data["errors"] == []


class TestScenarios:
    """End-to-end optimization scenarios."""

    def test_conversation_in_deep_mode(self, optimizer, conversation_prompt):
        result = optimizer.optimize(conversation_prompt, OptimizationMode.DEEP)
        assert result.intent.primary_intent is PromptIntent.PLANNING
        assert "ConversationSummarizer" in _names(result)
        assert "ImplicitRequirementExtractor" in _names(result)
        assert "Real-time updates infrastructure needed" in result.enhanced
        assert "User authentication system (implied by user roles)" in result.enhanced

    def test_conversational_mode(self, optimizer, conversation_prompt):
        result = optimizer.optimize(
            conversation_prompt,
            OptimizationMode.CONVERSATIONAL,
            ContextOverride(phase=OptimizationPhase.SUMMARIZATION),
        )
        names = _names(result)
        assert names[:2] == ["ConversationSummarizer", "ImplicitRequirementExtractor"]
        assert "ObjectiveClarifier" not in names
        assert "### Extracted Requirements" in result.enhanced

    def test_prioritized_prd_left_alone(self, optimizer, prioritized_prd):
        result = optimizer.optimize(
            prioritized_prd,
            OptimizationMode.PRD,
            ContextOverride(intent=PromptIntent.PRD_GENERATION),
        )
        assert "RequirementPrioritizer" not in _names(result)
        assert "PRDStructureEnforcer" in _names(result)

    def test_prd_question_phase_skips_output_patterns(self, optimizer):
        result = optimizer.optimize(
            "A habit tracker app with streaks",
            OptimizationMode.PRD,
            ContextOverride(intent="prd-generation", phase=OptimizationPhase.QUESTION_VALIDATION),
        )
        names = _names(result)
        assert "PRDStructureEnforcer" not in names
        assert "SuccessCriteriaEnforcer" not in names


class TestValidation:
    """Tests for validate_prd_answer()."""

    def test_vague_answer(self, optimizer, vague_answer):
        validation = optimizer.validate_prd_answer(vague_answer, "q1")
        assert validation.needs_clarification
        assert validation.quality == 41
        assert validation.suggestion == "adding the problem you're solving would help"

    def test_placeholder_answer(self, optimizer):
        validation = optimizer.validate_prd_answer("whatever, anything works", "q2")
        assert validation.needs_clarification
        assert validation.suggestion == "adding user actions would help"

    def test_unknown_question_uses_default(self, optimizer, vague_answer):
        validation = optimizer.validate_prd_answer(vague_answer, "q9")
        assert validation.suggestion == "adding additional context would help"

    def test_detailed_answer(self, optimizer):
        validation = optimizer.validate_prd_answer(
            "Small clinics lose 20% of appointments because reminders are manual; "
            "we need automated SMS reminders so that no-shows drop below 5%",
            "q1",
        )
        assert not validation.needs_clarification
        assert validation.suggestion is None
        assert "suggestion" not in validation.to_dict()


class TestEscalation:
    """Tests for deep mode escalation."""

    def test_short_prompt_escalates(self, optimizer, login_prompt):
        result = optimizer.optimize(login_prompt, "fast")
        analysis = optimizer.analyze_escalation(result)

        assert [(r.factor, r.contribution) for r in analysis.reasons] == [
            ("low-quality", 2),
            ("missing-completeness", 15),
            ("low-specificity", 15),
            ("length-mismatch", 15),
        ]
        assert analysis.escalation_score == 47
        assert analysis.should_escalate
        assert analysis.escalation_confidence == "low"
        assert analysis.deep_mode_value == (
            "Deep mode would provide: comprehensive requirements extraction, "
            "concrete examples and specifications, validation checklist."
        )
        assert optimizer.should_recommend_deep_mode(result)

    def test_reported_score_is_capped(self, optimizer):
        result = OptimizationResult(
            original="",
            enhanced="",
            intent=IntentAnalysis(
                PromptIntent.PLANNING,
                0,
                IntentCharacteristics(is_open_ended=True, needs_structure=True),
            ),
            quality=QualityScore(),
            mode=OptimizationMode.FAST,
        )
        analysis = optimizer.analyze_escalation(result)
        assert sum(r.contribution for r in analysis.reasons) == 140
        assert analysis.escalation_score == 100
        assert analysis.escalation_confidence == "high"
        assert "structured implementation plan" in analysis.deep_mode_value
        assert "alternative approaches and trade-offs" in analysis.deep_mode_value

    def test_complex_intent(self, optimizer):
        result = optimizer.optimize("Migrate our database from MySQL to PostgreSQL", "fast")
        factors = [r.factor for r in optimizer.analyze_escalation(result).reasons]
        assert "complex-intent" in factors

    def test_lower_completeness_never_lowers_score(self, detector):
        intent = detector.analyze("Build a login page with React")
        scores = []
        for completeness in (59, 40, 10):
            optimizer = UniversalOptimizer(quality_assessor=FixedAssessor(_score(completeness=completeness)))
            result = OptimizationResult(
                original="Build a login page with React",
                enhanced="",
                intent=intent,
                quality=QualityScore(),
                mode=OptimizationMode.FAST,
            )
            scores.append(optimizer.analyze_escalation(result).escalation_score)
        assert scores == sorted(scores)

    def test_to_dict(self, optimizer, login_prompt):
        data = optimizer.analyze_escalation(optimizer.optimize(login_prompt)).to_dict()
        assert data["escalation_score"] == 47
        assert data["reasons"][0]["factor"] == "low-quality"


class TestRecommendations:
    """Tests for recommendation text."""

    def test_fast_recommends_deep(self, optimizer, login_prompt):
        result = optimizer.optimize(login_prompt, "fast")
        assert optimizer.get_recommendation(result).endswith("Run: clavix deep")

        detailed = optimizer.get_detailed_recommendation(result)
        assert detailed.escalation is not None
        assert detailed.message.endswith("Run: clavix deep")

    @pytest.mark.parametrize("overall,expected", [
        (92, "Excellent! Your prompt is AI-ready."),
        (85, "Good quality. Ready to use!"),
        (72, "Decent quality. Consider the improvements listed above."),
        (40, None),
    ])
    def test_quality_messages(self, optimizer, detector, overall, expected):
        result = OptimizationResult(
            original="x",
            enhanced="x",
            intent=detector.analyze("x"),
            quality=QualityScore(overall=overall),
            mode=OptimizationMode.DEEP,
        )
        assert optimizer.get_recommendation(result) == expected

    def test_detailed_needs_work(self, optimizer):
        detailed = optimizer.get_detailed_recommendation(optimizer.optimize("", "deep"))
        assert detailed.quality_level == "needs-work"
        assert detailed.message == "This prompt needs improvement for best results."
        assert detailed.escalation is None

    def test_statistics(self, optimizer):
        assert optimizer.get_statistics() == {
            "total_patterns": 20,
            "fast_mode_patterns": 9,
            "deep_mode_patterns": 20,
        }
