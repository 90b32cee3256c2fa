from pydantic import Field
from datetime import datetime
from typing import Optional, List

from app.schemas.base import CamelModel

# -- Request --

# 세션 생성 - 요청
class SessionCreateRequest(CamelModel):
    user_id: str = Field(..., description="사용자 ID (검증하지 않는 약한 참조)")
    topic: str = Field(..., description="면접 주제")
    difficulty: str = Field(..., description="Easy | Medium | Hard")

# 질문/답변 추가 - 요청
class AnswerSubmitRequest(CamelModel):
    question: str
    answer: str
    expected_version: Optional[int] = Field(None, description="낙관적 동시성 체크용 세션 version")

# 점수 저장 - 요청 (score 생략 시 서버가 공식으로 계산)
class ScoreUpdateRequest(CamelModel):
    score: Optional[int] = Field(None, ge=0, le=100)

# 질문 생성 - 요청
class GenerateQuestionRequest(CamelModel):
    topic: str
    difficulty: str
    previous_questions: List[str] = Field(default_factory=list)


# -- Response --

class QuestionRecordResponse(CamelModel):
    question: str
    answer: str
    feedback: str
    timestamp: datetime

class SessionResponse(CamelModel):
    id: str
    user_id: str
    topic: str
    difficulty: str
    questions: List[QuestionRecordResponse]
    score: int
    status: str
    version: int
    created_at: datetime
    updated_at: datetime

class GenerateQuestionResponse(CamelModel):
    question: str

# 대시보드 통계 - 응답
class SessionStatsResponse(CamelModel):
    total_sessions: int
    average_score: float
    total_questions: int
    recent_sessions: List[SessionResponse]

class MessageResponse(CamelModel):
    message: str
