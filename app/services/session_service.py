# app/services/session_service.py
# 면접 세션 생명주기: 생성 → 질문/답변 반복 → 채점 → 삭제

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.db.base import utcnow
from app.errors import STORE_ERROR_MESSAGE, ConflictError, NotFoundError, StoreError, ValidationError
from app.models.session_question import QuestionRecord
from app.models.sessions import DIFFICULTIES, STATUS_ACTIVE, STATUS_SCORED, InterviewSession
from app.models.user_profile import UserProfile
from app.services.generator import DEFAULT_FEEDBACK, QuestionFeedbackGenerator, fallback_question

logger = logging.getLogger(__name__)


def compute_score(answered: int) -> int:
    """
    round(100 * n / (n + 1)), 반올림은 half-up (n=1 → 50, n=2 → 67, n=3 → 75).
    답변 개수만 반영하며 피드백 내용과는 무관하다.
    """
    if answered < 0:
        raise ValueError("answered must be >= 0")
    # 정수 연산으로 half-up 반올림
    return (200 * answered + answered + 1) // (2 * (answered + 1))


def _require_text(value: Optional[str], field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required")
    return text


class SessionLifecycleManager:

    def __init__(
        self,
        db: Session,
        generator: QuestionFeedbackGenerator,
        *,
        lock_scored: bool = False,
        require_existing_user: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.generator = generator
        self.lock_scored = lock_scored
        self.require_existing_user = require_existing_user
        self.clock = clock

    # ---- 저장 공통 ----

    def _commit(self, session: Optional[InterviewSession] = None) -> None:
        try:
            self.db.commit()
        except StaleDataError as e:
            self.db.rollback()
            logger.warning("[SESSION] concurrent update rejected: %s", e)
            raise ConflictError("Session was modified by another request") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("[SESSION] store failure")
            raise StoreError(STORE_ERROR_MESSAGE) from e

        if session is not None:
            self.db.refresh(session)

    # ---- 생성 / 조회 ----

    def create(self, user_id: str, topic: str, difficulty: str) -> InterviewSession:
        user_id = _require_text(user_id, "userId")
        topic = _require_text(topic, "topic")
        if difficulty not in DIFFICULTIES:
            raise ValidationError(f"difficulty must be one of: {', '.join(DIFFICULTIES)}")

        if self.require_existing_user and self.db.get(UserProfile, user_id) is None:
            raise NotFoundError("User not found")

        now = self.clock()
        session = InterviewSession(
            user_id=user_id,
            topic=topic,
            difficulty=difficulty,
            status=STATUS_ACTIVE,
            score=0,
            created_at=now,
            updated_at=now,
        )
        self.db.add(session)
        self._commit(session)

        logger.info("[SESSION] created id=%s user=%s topic=%r difficulty=%s",
                    session.id, user_id, topic, difficulty)
        return session

    def get(self, session_id: str) -> InterviewSession:
        session = self.db.get(InterviewSession, session_id)
        if session is None:
            raise NotFoundError("Session not found")
        return session

    def list_for_user(self, user_id: str) -> List[InterviewSession]:
        # 최신순, 페이지네이션 없음
        return (
            self.db.query(InterviewSession)
            .filter(InterviewSession.user_id == user_id)
            .order_by(InterviewSession.created_at.desc())
            .all()
        )

    # ---- 질문 생성 (저장 상태 변경 없음) ----

    def next_question(
        self,
        topic: str,
        difficulty: str,
        previous_questions: Optional[List[str]] = None,
    ) -> str:
        previous_questions = list(previous_questions or [])
        try:
            question = self.generator.generate_question(topic, difficulty, previous_questions)
        except Exception as e:
            logger.warning("[SESSION] question generation failed, using default: %r", e)
            return fallback_question(topic, difficulty)

        question = (question or "").strip()
        return question or fallback_question(topic, difficulty)

    def next_question_for(self, session: InterviewSession) -> str:
        previous = [q.question for q in session.questions]
        return self.next_question(session.topic, session.difficulty, previous)

    # ---- 답변 제출 (questions의 유일한 변경 경로, append-only) ----

    def _feedback(self, session: InterviewSession, question: str, answer: str) -> str:
        try:
            feedback = self.generator.generate_feedback(
                question, answer, session.topic, session.difficulty
            )
        except Exception as e:
            logger.warning("[SESSION] feedback generation failed, using default: %r", e)
            return DEFAULT_FEEDBACK

        feedback = (feedback or "").strip()
        return feedback or DEFAULT_FEEDBACK

    def submit_answer(
        self,
        session: InterviewSession,
        question: str,
        answer: str,
        expected_version: Optional[int] = None,
    ) -> InterviewSession:
        if self.lock_scored and session.status == STATUS_SCORED:
            raise ConflictError("Session already scored")
        if expected_version is not None and expected_version != session.version:
            raise ConflictError(
                f"Session version mismatch (expected {expected_version}, current {session.version})"
            )

        question = _require_text(question, "question")
        answer = _require_text(answer, "answer")

        feedback = self._feedback(session, question, answer)

        now = self.clock()
        session.questions.append(
            QuestionRecord(
                order_no=len(session.questions),
                question=question,
                answer=answer,
                feedback=feedback,
                timestamp=now,
            )
        )
        session.updated_at = now
        self._commit(session)

        logger.info("[SESSION] answer appended id=%s count=%d", session.id, len(session.questions))
        return session

    # ---- 채점 ----

    def _set_score(self, session: InterviewSession, score: int) -> InterviewSession:
        session.score = score
        session.status = STATUS_SCORED
        session.updated_at = self.clock()
        self._commit(session)

        logger.info("[SESSION] scored id=%s score=%d", session.id, score)
        return session

    def end_session(self, session: InterviewSession) -> InterviewSession:
        # 다시 호출하면 현재 질문 수로 재계산
        return self._set_score(session, compute_score(len(session.questions)))

    def record_score(self, session: InterviewSession, score: Optional[int]) -> InterviewSession:
        """클라이언트가 보낸 점수를 그대로 저장. 없으면 서버가 계산."""
        if score is None:
            return self.end_session(session)
        if not 0 <= score <= 100:
            raise ValidationError("score must be between 0 and 100")
        return self._set_score(session, score)

    # ---- 삭제 ----

    def delete(self, session_id: str) -> None:
        session = self.db.get(InterviewSession, session_id)
        if session is None:
            # 없는 id 삭제는 에러 없이 성공 처리
            logger.debug("[SESSION] delete skipped, id=%s not found", session_id)
            return

        self.db.delete(session)
        self._commit()
        logger.info("[SESSION] deleted id=%s", session_id)
