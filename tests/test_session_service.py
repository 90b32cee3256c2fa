import pytest
from sqlalchemy.exc import OperationalError

from app.db.base import SessionLocal
from app.errors import ConflictError, NotFoundError, StoreError, ValidationError
from app.models.sessions import InterviewSession
from app.models.user_profile import UserProfile
from app.services.generator import DEFAULT_FEEDBACK
from app.services.session_service import SessionLifecycleManager


# ---- create ----

def test_create_session_defaults(manager):
    s = manager.create("user-1", "React", "Medium")

    assert s.id
    assert s.user_id == "user-1"
    assert s.topic == "React"
    assert s.difficulty == "Medium"
    assert s.questions == []
    assert s.score == 0
    assert s.status == "active"
    assert s.version == 1
    assert s.created_at == s.updated_at


@pytest.mark.parametrize(
    "user_id, topic, difficulty",
    [
        ("", "React", "Easy"),
        ("user-1", "   ", "Easy"),
        ("user-1", "React", "Impossible"),
        ("user-1", "React", ""),
    ],
)
def test_create_rejects_missing_fields(manager, db, user_id, topic, difficulty):
    with pytest.raises(ValidationError):
        manager.create(user_id, topic, difficulty)

    assert db.query(InterviewSession).count() == 0


def test_create_allows_duplicate_sessions(manager):
    a = manager.create("user-1", "React", "Easy")
    b = manager.create("user-1", "React", "Easy")

    assert a.id != b.id


def test_create_with_user_check(db, generator, clock):
    strict = SessionLifecycleManager(db, generator, require_existing_user=True, clock=clock)

    with pytest.raises(NotFoundError):
        strict.create("ghost", "React", "Easy")

    prof = UserProfile(name="Kim", email="kim@example.com")
    db.add(prof)
    db.commit()

    assert strict.create(prof.id, "React", "Easy").user_id == prof.id


# ---- next question ----

def test_next_question_passes_previous_questions(manager, generator):
    s = manager.create("user-1", "React", "Medium")
    manager.submit_answer(s, "What is JSX?", "Syntax sugar")

    question = manager.next_question_for(s)

    assert question == "Q2 about React (Medium)"
    assert generator.question_calls[-1] == ("React", "Medium", ["What is JSX?"])


def test_next_question_does_not_touch_session(manager):
    s = manager.create("user-1", "React", "Medium")
    before = (len(s.questions), s.version, s.updated_at)

    manager.next_question_for(s)

    assert (len(s.questions), s.version, s.updated_at) == before


def test_next_question_falls_back_on_failure(db, failing_generator, clock):
    m = SessionLifecycleManager(db, failing_generator, clock=clock)

    assert m.next_question("Docker", "Hard") == "What is Docker? Explain with examples. (Hard level)"


class BlankGenerator:
    def generate_question(self, topic, difficulty, previous_questions):
        return "  "

    def generate_feedback(self, question, answer, topic, difficulty):
        return ""


def test_blank_generator_output_falls_back(db, clock):
    m = SessionLifecycleManager(db, BlankGenerator(), clock=clock)
    s = m.create("user-1", "Go", "Easy")

    assert m.next_question_for(s) == "What is Go? Explain with examples. (Easy level)"
    m.submit_answer(s, "What is a goroutine?", "A lightweight thread")
    assert s.questions[0].feedback == DEFAULT_FEEDBACK


# ---- submit answer ----

def test_submit_answer_is_append_only(manager, generator):
    s = manager.create("user-1", "React", "Medium")

    manager.submit_answer(s, "Q1", "A1")
    first = [(q.question, q.answer, q.feedback, q.timestamp) for q in s.questions]

    manager.submit_answer(s, "Q2", "A2")
    manager.submit_answer(s, "Q3", "A3")

    assert len(s.questions) == 3
    assert [(q.question, q.answer, q.feedback, q.timestamp) for q in s.questions[:1]] == first
    assert [q.question for q in s.questions] == ["Q1", "Q2", "Q3"]
    assert s.questions[1].feedback == "Feedback on: A2"
    assert generator.feedback_calls[0] == ("Q1", "A1", "React", "Medium")


def test_submit_answer_refreshes_updated_at_and_version(manager):
    s = manager.create("user-1", "React", "Medium")
    created_at = s.created_at

    manager.submit_answer(s, "Q1", "A1")

    assert s.created_at == created_at
    assert s.updated_at > created_at
    assert s.version == 2


@pytest.mark.parametrize("answer", ["", "   ", "\n\t"])
def test_submit_answer_rejects_blank_answer(manager, generator, answer):
    s = manager.create("user-1", "React", "Medium")

    with pytest.raises(ValidationError):
        manager.submit_answer(s, "Q1", answer)

    assert s.questions == []
    assert generator.feedback_calls == []


def test_submit_answer_rejects_blank_question(manager):
    s = manager.create("user-1", "React", "Medium")

    with pytest.raises(ValidationError):
        manager.submit_answer(s, " ", "answer")


def test_submit_answer_uses_default_feedback_on_failure(db, failing_generator, clock):
    m = SessionLifecycleManager(db, failing_generator, clock=clock)
    s = m.create("user-1", "React", "Medium")

    m.submit_answer(s, "What is a hook?", "A function...")

    assert len(s.questions) == 1
    assert s.questions[0].feedback == "Great answer! Keep practicing to improve further."


def test_submit_answer_checks_expected_version(manager):
    s = manager.create("user-1", "React", "Medium")
    manager.submit_answer(s, "Q1", "A1", expected_version=1)

    with pytest.raises(ConflictError):
        manager.submit_answer(s, "Q2", "A2", expected_version=1)

    assert len(s.questions) == 1


# ---- end session ----

def test_end_to_end_score(manager):
    s = manager.create("user-1", "React", "Medium")
    manager.submit_answer(s, "What is a hook?", "A function...")
    manager.submit_answer(s, "What is state?", "Data that changes")
    manager.submit_answer(s, "What is a prop?", "An input")

    manager.end_session(s)

    assert s.score == 75
    assert s.status == "scored"


def test_end_session_without_answers_scores_zero(manager):
    s = manager.create("user-1", "React", "Medium")
    assert manager.end_session(s).score == 0


def test_end_session_is_recomputed_after_more_answers(manager):
    s = manager.create("user-1", "React", "Medium")
    manager.submit_answer(s, "Q1", "A1")
    assert manager.end_session(s).score == 50
    assert manager.end_session(s).score == 50

    # 기본 정책: 채점 후에도 답변 추가 가능
    manager.submit_answer(s, "Q2", "A2")
    assert manager.end_session(s).score == 67


def test_locked_scored_session_rejects_answers(db, generator, clock):
    m = SessionLifecycleManager(db, generator, lock_scored=True, clock=clock)
    s = m.create("user-1", "React", "Medium")
    m.submit_answer(s, "Q1", "A1")
    m.end_session(s)

    with pytest.raises(ConflictError):
        m.submit_answer(s, "Q2", "A2")

    assert len(s.questions) == 1


def test_record_score_stores_client_value(manager):
    s = manager.create("user-1", "React", "Medium")

    manager.record_score(s, 42)
    assert s.score == 42

    manager.submit_answer(s, "Q1", "A1")
    manager.record_score(s, None)
    assert s.score == 50


# ---- list / get / delete ----

def test_list_is_newest_first(manager):
    old = manager.create("user-1", "React", "Easy")
    mid = manager.create("user-1", "Vue", "Medium")
    manager.create("user-2", "Go", "Hard")

    assert [s.id for s in manager.list_for_user("user-1")] == [mid.id, old.id]

    new = manager.create("user-1", "Svelte", "Hard")
    assert manager.list_for_user("user-1")[0].id == new.id


def test_list_unknown_user_is_empty(manager):
    assert manager.list_for_user("nobody") == []


def test_get_missing_session(manager):
    with pytest.raises(NotFoundError) as exc:
        manager.get("missing")
    assert exc.value.message == "Session not found"


def test_delete_removes_session_and_records(manager, db):
    keep = manager.create("user-1", "React", "Easy")
    s = manager.create("user-1", "Vue", "Easy")
    manager.submit_answer(s, "Q1", "A1")

    manager.delete(s.id)

    assert db.get(InterviewSession, s.id) is None
    assert [x.id for x in manager.list_for_user("user-1")] == [keep.id]


def test_delete_missing_session_does_not_raise(manager):
    manager.delete("does-not-exist")


def test_record_score_rejects_out_of_range(manager):
    s = manager.create("user-1", "React", "Medium")

    with pytest.raises(ValidationError):
        manager.record_score(s, 101)

    assert s.score == 0


def test_store_failure_raises_store_error(manager, db, monkeypatch):
    def broken_commit():
        raise OperationalError("UPDATE interview_sessions SET score=?", {}, Exception("locked"))

    s = manager.create("user-1", "React", "Medium")
    monkeypatch.setattr(db, "commit", broken_commit)

    with pytest.raises(StoreError) as exc:
        manager.end_session(s)

    assert exc.value.message == "Database error"
    assert exc.value.status_code == 500


# ---- 동시 수정 (version_id_col) ----

def test_concurrent_answers_conflict(generator, clock):
    db_a, db_b, db_check = SessionLocal(), SessionLocal(), SessionLocal()
    try:
        a = SessionLifecycleManager(db_a, generator, clock=clock)
        b = SessionLifecycleManager(db_b, generator, clock=clock)

        stale = a.create("user-1", "React", "Medium")
        fresh = b.get(stale.id)

        b.submit_answer(fresh, "Q1", "A1")

        # a는 아직 version 1 상태를 들고 있음
        with pytest.raises(ConflictError) as exc:
            a.submit_answer(stale, "Q2", "A2")
        assert exc.value.status_code == 409

        stored = db_check.get(InterviewSession, stale.id)
        assert stored.version == 2
        assert [q.question for q in stored.questions] == ["Q1"]
    finally:
        db_a.close()
        db_b.close()
        db_check.close()
