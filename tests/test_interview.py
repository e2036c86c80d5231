"""Tests for the CV interview state machine and its question table."""

from typing import List

import pytest

from jobpath_bot.cv_schema import CVDocument, ProjectEntry
from jobpath_bot.interview import (
    InterviewEngine,
    InterviewMode,
    InterviewSession,
    InterviewStateError,
    StepKind,
)
from jobpath_bot.questions import (
    DEFAULT_QUESTIONS,
    KEEP_CURRENT,
    InterviewQuestion,
    parse_project,
    skippable_text,
    split_skills,
)

LINKEDIN_STEP = 4
PORTFOLIO_STEP = 5


def _advance_to(engine: InterviewEngine, session: InterviewSession, step: int) -> None:
    engine.start(session)
    for _ in range(step):
        engine.submit(session, "answer")


class TestTransforms:
    """Tests for the per-step answer transforms."""

    def test_skills_keep_trailing_empty_token(self) -> None:
        assert split_skills("Go, Rust,  C++ ,") == ["Go", "Rust", "C++", ""]

    def test_skills_keep_inner_empty_token(self) -> None:
        assert split_skills("a,,b") == ["a", "", "b"]

    def test_project_parse(self) -> None:
        project = parse_project("Tracker, Tracks tasks, Go, Postgres")

        assert project == ProjectEntry(
            name="Tracker",
            description="Tracks tasks",
            tech_stack=["Go", "Postgres"],
        )

    def test_project_missing_segments_default_empty(self) -> None:
        project = parse_project("  Solo  ")

        assert project.name == "Solo"
        assert project.description == ""
        assert project.tech_stack == []

    @pytest.mark.parametrize("raw", ["skip", "SKIP", "  Skip  "])
    def test_skip_keyword_any_case(self, raw: str) -> None:
        assert skippable_text(raw) is KEEP_CURRENT

    def test_skippable_keeps_other_text(self) -> None:
        assert skippable_text(" https://x.com ") == "https://x.com"


class TestQuestionTable:
    """Tests for the default question configuration."""

    def test_has_eighteen_steps(self) -> None:
        assert len(DEFAULT_QUESTIONS) == 18

    def test_first_prompt_opens_the_cv_flow(self) -> None:
        assert "full name" in DEFAULT_QUESTIONS[0].prompt

    def test_table_is_immutable(self) -> None:
        assert isinstance(DEFAULT_QUESTIONS, tuple)
        with pytest.raises(AttributeError):
            DEFAULT_QUESTIONS[0].prompt = "changed"  # type: ignore[misc]


class TestInterviewEngine:
    """Tests for InterviewEngine.start/submit."""

    def test_start_returns_first_prompt(self) -> None:
        engine = InterviewEngine()
        session = InterviewSession()

        result = engine.start(session)

        assert result.kind is StepKind.NEXT_PROMPT
        assert result.text == DEFAULT_QUESTIONS[0].prompt
        assert session.mode is InterviewMode.COLLECTING
        assert session.current_step == 0

    def test_start_resets_previous_state(self) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        _advance_to(engine, session, 7)
        session.document.skills = ["stale"]

        engine.start(session)

        assert session.current_step == 0
        assert session.document == CVDocument.empty()

    def test_each_submit_advances_exactly_one(self) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        engine.start(session)

        for expected in range(1, engine.total_steps):
            result = engine.submit(session, "value")
            assert session.current_step == expected
            assert result.kind is StepKind.NEXT_PROMPT
            assert result.text == DEFAULT_QUESTIONS[expected].prompt

    def test_completion_after_all_steps(self, answers: List[str]) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        engine.start(session)

        results = [engine.submit(session, answer) for answer in answers]

        assert all(not result.complete for result in results[:-1])
        final = results[-1]
        assert final.complete
        assert final.document is session.document
        assert session.mode is InterviewMode.IDLE
        assert session.current_step == engine.total_steps

    def test_no_submit_after_completion(self, answers: List[str]) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        engine.start(session)
        for answer in answers:
            engine.submit(session, answer)

        with pytest.raises(InterviewStateError):
            engine.submit(session, "extra")
        assert engine.current_prompt(session) is None

    def test_submit_without_start_raises(self) -> None:
        with pytest.raises(InterviewStateError):
            InterviewEngine().submit(InterviewSession(), "hello")

    def test_answers_land_in_document(self, answers: List[str]) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        engine.start(session)
        for answer in answers:
            engine.submit(session, answer)

        document = session.document
        assert document.personal_info.full_name == "Ada Lovelace"
        assert document.personal_info.linkedin == "https://linkedin.com/in/ada"
        assert document.personal_info.portfolio == ""
        assert document.skills == ["Go", "Rust", "C++", ""]
        assert document.experience[0].job_title == "Analyst"
        assert document.experience[0].end_date == "Present"
        assert document.education[0].degree == "BSc Mathematics"
        assert document.education[0].end_date == "1839"
        assert document.projects[0].tech_stack == ["Go", "Postgres"]
        assert len(document.experience) == 1

    def test_answers_are_trimmed(self) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        engine.start(session)

        engine.submit(session, "   Grace Hopper  ")

        assert session.document.personal_info.full_name == "Grace Hopper"

    @pytest.mark.parametrize("raw", ["skip", "SKIP", "sKiP "])
    def test_linkedin_skip(self, raw: str) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        _advance_to(engine, session, LINKEDIN_STEP)

        engine.submit(session, raw)

        assert session.document.personal_info.linkedin == ""
        assert session.current_step == LINKEDIN_STEP + 1

    def test_linkedin_url_stored_verbatim(self) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        _advance_to(engine, session, LINKEDIN_STEP)

        engine.submit(session, "https://x.com")

        assert session.document.personal_info.linkedin == "https://x.com"

    def test_portfolio_skip(self) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        _advance_to(engine, session, PORTFOLIO_STEP)

        engine.submit(session, "Skip")

        assert session.document.personal_info.portfolio == ""

    def test_empty_input_is_accepted(self) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        engine.start(session)

        result = engine.submit(session, "")

        assert result.kind is StepKind.NEXT_PROMPT
        assert session.document.personal_info.full_name == ""

    def test_abandon_returns_to_idle(self) -> None:
        engine = InterviewEngine()
        session = InterviewSession()
        _advance_to(engine, session, 3)

        engine.abandon(session)

        assert session.mode is InterviewMode.IDLE
        assert session.current_step == 0
        assert session.document == CVDocument.empty()

    def test_sessions_are_isolated(self) -> None:
        engine = InterviewEngine()
        first, second = InterviewSession(), InterviewSession()
        engine.start(first)
        engine.start(second)

        engine.submit(first, "First User")

        assert second.document.personal_info.full_name == ""
        assert second.current_step == 0

    def test_custom_question_table(self) -> None:
        engine = InterviewEngine(
            [InterviewQuestion("Summary?", ("summary",))]
        )
        session = InterviewSession()
        engine.start(session)

        result = engine.submit(session, "Short and sweet")

        assert result.complete
        assert session.document.summary == "Short and sweet"

    def test_empty_question_table_rejected(self) -> None:
        with pytest.raises(ValueError):
            InterviewEngine([])
