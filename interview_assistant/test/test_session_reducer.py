"""
Test Session Reducer Module

Covers the pure session transitions: detail gathering, the question rounds,
the countdown, evaluation and reset, plus the legal status table.

Dependencies:
- pytest: For testing framework
- interview_assistant.services.interview_session.tools: The modules being tested
"""

import itertools

import pytest
from pydantic import ValidationError

from interview_assistant.constants.interview_constants import (
    DETAILS_CONFIRMED_MESSAGE,
    GREETING_MESSAGE,
    MISSING_DETAIL_MESSAGE,
    TIMEOUT_ANSWER_TEXT,
    TOTAL_QUESTIONS,
)
from interview_assistant.errors.exceptions import IllegalTransitionError
from interview_assistant.schemas.session_schemas import (
    Answer,
    AnswerCommitted,
    BotNotice,
    CandidateDetails,
    DetailProvided,
    EvaluationFailed,
    EvaluationStarted,
    EvaluationSucceeded,
    FinalResult,
    QuestionFailed,
    QuestionReceived,
    ResumeParsed,
    Sender,
    SessionEvent,
    SessionReset,
    SessionState,
    SessionStatus,
    TimerTicked,
    initial_session_state,
)
from interview_assistant.services.interview_session.tools import (
    TRANSITIONS,
    can_transition,
    reduce_session,
    transition,
)
from interview_assistant.test.session_fakes import (
    DETAILS,
    awaiting_answer,
    finished_state,
    in_progress_state,
    question,
    reduce_all,
)


class TestStatusMachine:
    """Test the legal status table."""

    def test_forward_path_is_legal(self):
        path = [
            SessionStatus.GATHERING_INFO,
            SessionStatus.DETAILS_CONFIRMED,
            SessionStatus.IN_PROGRESS,
            SessionStatus.FINISHED,
            SessionStatus.EVALUATING,
            SessionStatus.COMPLETED,
            SessionStatus.GATHERING_INFO,
        ]
        for current, target in zip(path, path[1:]):
            assert can_transition(current, target)

    def test_generation_failure_shortcut_is_legal(self):
        assert can_transition(SessionStatus.IN_PROGRESS, SessionStatus.COMPLETED)

    def test_every_other_edge_is_illegal(self):
        for current, target in itertools.product(SessionStatus, SessionStatus):
            if target not in TRANSITIONS[current]:
                assert not can_transition(current, target)

    def test_illegal_transition_raises(self):
        state = initial_session_state()
        with pytest.raises(IllegalTransitionError):
            transition(state, SessionStatus.IN_PROGRESS)
        assert state.status == SessionStatus.GATHERING_INFO


class TestDetailGathering:
    """Test resume details and the conversational fallback."""

    @pytest.mark.parametrize(
        "parsed_fields",
        [fields for size in range(4) for fields in itertools.combinations(DETAILS, size)],
    )
    def test_details_confirmed_only_once_all_fields_known(self, parsed_fields):
        parsed = {field: DETAILS[field] for field in parsed_fields}
        state = reduce_session(initial_session_state(), ResumeParsed(details=CandidateDetails(**parsed)))
        assert state.resumeUploaded
        assert state.messages[0].text == GREETING_MESSAGE

        missing = [field for field in DETAILS if field not in parsed]
        for field in missing:
            assert state.status == SessionStatus.GATHERING_INFO
            assert state.messages[-1].text == MISSING_DETAIL_MESSAGE.format(field=field)
            state = reduce_session(state, DetailProvided(text=DETAILS[field]))

        assert state.status == SessionStatus.DETAILS_CONFIRMED
        assert state.candidateDetails.model_dump() == DETAILS
        assert state.messages[-1].text == DETAILS_CONFIRMED_MESSAGE

    def test_provided_detail_is_recorded_as_user_message(self):
        state = reduce_session(initial_session_state(), ResumeParsed(details=CandidateDetails(email="jane@example.com")))
        state = reduce_session(state, DetailProvided(text="  Jane Doe "))
        assert state.candidateDetails.name == "Jane Doe"
        user_messages = [message for message in state.messages if message.sender == Sender.USER]
        assert [message.text for message in user_messages] == ["Jane Doe"]

    def test_detail_before_resume_is_ignored(self):
        state = initial_session_state()
        assert reduce_session(state, DetailProvided(text="Jane Doe")) == state

    def test_second_resume_is_ignored(self):
        state = reduce_session(initial_session_state(), ResumeParsed(details=CandidateDetails(name="Jane Doe")))
        again = reduce_session(state, ResumeParsed(details=CandidateDetails(name="John Roe", phone="1")))
        assert again == state

    def test_blank_detail_is_ignored(self):
        state = reduce_session(initial_session_state(), ResumeParsed(details=CandidateDetails()))
        assert reduce_session(state, DetailProvided(text="   ")) == state


class TestQuestionRounds:
    """Test question delivery, answers and the countdown."""

    def test_interview_starts_from_confirmed_details(self):
        state = in_progress_state()
        assert state.status == SessionStatus.IN_PROGRESS
        assert state.questions == [] and state.currentQuestionIndex == 0

    def test_question_sets_timer_and_bot_message(self):
        state = awaiting_answer(0, timer=60)
        assert state.timer == 60
        assert state.messages[-1].text == "Question 1"
        assert state.is_awaiting_answer()

    def test_stale_question_is_dropped(self):
        state = awaiting_answer(0)
        late = QuestionReceived(question_index=0, question=question(9), time_limit_seconds=60)
        assert reduce_session(state, late) == state

    def test_commit_advances_and_stops_timer(self):
        state = reduce_session(awaiting_answer(0), AnswerCommitted(question_index=0, text="A hash map"))
        assert state.answers == [Answer(text="A hash map")]
        assert state.currentQuestionIndex == 1
        assert state.timer == 0
        assert state.messages[-1].sender == Sender.USER

    def test_duplicate_commit_is_ignored(self):
        commit = AnswerCommitted(question_index=0, text="A hash map")
        once = reduce_session(awaiting_answer(0), commit)
        assert reduce_session(once, commit) == once

    def test_empty_voice_commit_records_answer_without_user_message(self):
        state = awaiting_answer(0)
        committed = reduce_session(state, AnswerCommitted(question_index=0, text=""))
        assert committed.answers == [Answer(text="")]
        assert committed.messages == state.messages

    def test_timer_counts_down(self):
        state = reduce_session(awaiting_answer(0, timer=3), TimerTicked(question_index=0))
        assert state.timer == 2
        assert state.answers == []

    def test_expiry_commits_exactly_one_timeout_answer(self):
        state = awaiting_answer(2, timer=2)
        state = reduce_all(state, TimerTicked(question_index=2), TimerTicked(question_index=2))
        assert state.answers[-1].text == TIMEOUT_ANSWER_TEXT
        assert len(state.answers) == 3
        assert state.currentQuestionIndex == 3

        # A late tick for the expired round changes nothing
        assert reduce_session(state, TimerTicked(question_index=2)) == state

    def test_tick_without_question_is_ignored(self):
        state = in_progress_state()
        assert reduce_session(state, TimerTicked(question_index=0)) == state

    def test_sixth_answer_finishes_interview(self):
        state = finished_state()
        assert state.status == SessionStatus.FINISHED
        assert len(state.questions) == len(state.answers) == TOTAL_QUESTIONS
        assert state.currentQuestionIndex == TOTAL_QUESTIONS

    def test_question_failure_completes_with_error(self):
        state = reduce_session(in_progress_state(), QuestionFailed(question_index=0, reason="Service down"))
        assert state.status == SessionStatus.COMPLETED
        assert state.lastError == "Service down"
        assert state.finalResult is None
        assert "Service down" in state.messages[-1].text

    def test_bot_notice_is_appended(self):
        state = reduce_session(awaiting_answer(0), BotNotice(text="Could not analyze audio."))
        assert state.messages[-1].text == "Could not analyze audio."
        assert state.messages[-1].sender == Sender.BOT


class TestEvaluation:
    """Test evaluation start and results."""

    def test_success_completes_with_score_and_summary(self):
        result = FinalResult(score=75, summary="Solid answers.")
        state = reduce_all(finished_state(), EvaluationStarted(), EvaluationSucceeded(result=result))
        assert state.status == SessionStatus.COMPLETED
        assert state.finalResult == result
        assert [message.text for message in state.messages[-2:]] == ["**Final Score: 75/100**", "Solid answers."]

    def test_failure_completes_with_error(self):
        state = reduce_all(finished_state(), EvaluationStarted(), EvaluationFailed(reason="Evaluator down"))
        assert state.status == SessionStatus.COMPLETED
        assert state.finalResult is None
        assert state.lastError == "Evaluator down"

    def test_result_outside_evaluation_is_ignored(self):
        state = finished_state()
        result = EvaluationSucceeded(result=FinalResult(score=10, summary="x"))
        assert reduce_session(state, result) == state


class TestResetAndPurity:
    """Test reset and that the reducer never mutates its input."""

    def test_reset_from_every_status_yields_initial_state(self):
        states = [
            initial_session_state(),
            reduce_session(initial_session_state(), ResumeParsed(details=CandidateDetails(name="Jane Doe"))),
            awaiting_answer(3),
            finished_state(),
            reduce_all(finished_state(), EvaluationStarted()),
            reduce_all(finished_state(), EvaluationStarted(), EvaluationFailed(reason="x")),
        ]
        for state in states:
            reset = reduce_session(state, SessionReset())
            assert reset == SessionState()
            assert reduce_session(reset, SessionReset()) == reset

    def test_input_state_is_not_mutated(self):
        state = awaiting_answer(0)
        before = state.model_dump()
        reduce_session(state, AnswerCommitted(question_index=0, text="Answer"))
        assert state.model_dump() == before

    def test_misaligned_state_is_rejected(self):
        with pytest.raises(ValidationError):
            SessionState(status=SessionStatus.IN_PROGRESS, currentQuestionIndex=1, questions=[question(1)])
        with pytest.raises(ValidationError):
            SessionState(
                status=SessionStatus.IN_PROGRESS,
                questions=[question(1), question(2)],
            )

    def test_unknown_event_raises(self):
        class Unknown(SessionEvent):
            pass

        with pytest.raises(ValueError):
            reduce_session(initial_session_state(), Unknown())
