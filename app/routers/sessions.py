from fastapi import APIRouter, Depends, Query
from typing import Optional, List

from app.deps import get_session_manager
from app.services.session_service import SessionLifecycleManager
from app.services import stats
from app.schemas.session import (
    SessionCreateRequest,
    AnswerSubmitRequest,
    ScoreUpdateRequest,
    SessionResponse,
    SessionStatsResponse,
    GenerateQuestionResponse,
    MessageResponse,
)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


# 세션 생성
@router.post("", response_model=SessionResponse, status_code=201)
def create_session(
    payload: SessionCreateRequest,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    session = manager.create(payload.user_id, payload.topic, payload.difficulty)
    return SessionResponse.model_validate(session)

# 세션 상세 조회 (질문 목록 포함)
@router.get("/detail/{session_id}", response_model=SessionResponse)
def get_session(
    session_id: str,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    return SessionResponse.model_validate(manager.get(session_id))

# 사용자별 세션 목록 조회 (기본: 최신순)
@router.get("/{user_id}", response_model=List[SessionResponse])
def list_sessions(
    user_id: str,
    difficulty: str = Query("all", description="all | Easy | Medium | Hard"),
    sort_by: str = Query("date", alias="sortBy", description="date | score | questions"),
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    sessions = manager.list_for_user(user_id)
    sessions = stats.filter_by_difficulty(sessions, difficulty)
    sessions = stats.sort_sessions(sessions, sort_by)
    return [SessionResponse.model_validate(s) for s in sessions]

# 대시보드 통계
@router.get("/{user_id}/stats", response_model=SessionStatsResponse)
def session_stats(
    user_id: str,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    summary = stats.summarize(manager.list_for_user(user_id))
    summary["recent_sessions"] = [
        SessionResponse.model_validate(s) for s in summary["recent_sessions"]
    ]
    return SessionStatsResponse(**summary)

# 질문/답변 추가 (피드백 생성 포함)
@router.put("/{session_id}/question", response_model=SessionResponse)
def add_question(
    session_id: str,
    payload: AnswerSubmitRequest,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    session = manager.get(session_id)
    session = manager.submit_answer(
        session,
        payload.question,
        payload.answer,
        expected_version=payload.expected_version,
    )
    return SessionResponse.model_validate(session)

# 점수 저장 (score 생략 시 서버가 답변 수로 계산)
@router.put("/{session_id}/score", response_model=SessionResponse)
def update_score(
    session_id: str,
    payload: Optional[ScoreUpdateRequest] = None,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    session = manager.get(session_id)
    score = payload.score if payload is not None else None
    return SessionResponse.model_validate(manager.record_score(session, score))

# 저장된 세션 기준 다음 질문 생성 (세션은 변경하지 않음)
@router.post("/{session_id}/next-question", response_model=GenerateQuestionResponse)
def next_question(
    session_id: str,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    session = manager.get(session_id)
    return GenerateQuestionResponse(question=manager.next_question_for(session))

# 세션 삭제 (없는 id도 성공)
@router.delete("/{session_id}", response_model=MessageResponse)
def delete_session(
    session_id: str,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    manager.delete(session_id)
    return MessageResponse(message="Session deleted successfully")
