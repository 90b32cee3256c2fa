# app/models/sessions.py
from sqlalchemy import Column, Integer, String, Enum, Index
from sqlalchemy.orm import relationship
from app.db.base import Base, UTCDateTime, new_id, utcnow
from app.models.session_question import QuestionRecord  # noqa: F401  relationship 대상 등록

DIFFICULTIES = ("Easy", "Medium", "Hard")

STATUS_ACTIVE = "active"
STATUS_SCORED = "scored"


class InterviewSession(Base):
    __tablename__ = "interview_sessions"

    id = Column(String(32), primary_key=True, default=new_id)
    # user_profiles.id 를 값으로만 참조 (FK 없음)
    user_id = Column(String(64), nullable=False, index=True)
    topic = Column(String(200), nullable=False)
    difficulty = Column(
        Enum(*DIFFICULTIES, name="session_difficulty", native_enum=False),
        nullable=False,
    )
    status = Column(String(20), nullable=False, default=STATUS_ACTIVE)  # active|scored
    score = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow)

    # 관계 (질문 기록은 세션에 종속, 세션 삭제 시 함께 삭제)
    questions = relationship(
        "QuestionRecord",
        back_populates="session",
        order_by="QuestionRecord.order_no",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_interview_sessions_user_id_created_at", "user_id", "created_at"),
    )

    # UPDATE 마다 version 자동 증가, 동시 수정 시 StaleDataError
    __mapper_args__ = {"version_id_col": version}
