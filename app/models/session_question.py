# app/models/session_question.py
from sqlalchemy import Column, BigInteger, Integer, String, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.db.base import Base, UTCDateTime, utcnow


class QuestionRecord(Base):
    __tablename__ = "session_question"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    session_id = Column(
        String(32),
        ForeignKey("interview_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    order_no = Column(Integer, nullable=False)  # 0부터, 추가 순서
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    feedback = Column(Text, nullable=False)
    timestamp = Column(UTCDateTime(), nullable=False, default=utcnow)

    session = relationship("InterviewSession", back_populates="questions")

    __table_args__ = (
        Index("ix_session_question_session_id_order_no", "session_id", "order_no"),
    )
