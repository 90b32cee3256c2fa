# app/routers/generation.py
# 세션 없이 주제/난이도만으로 질문 생성 (상태 변경 없음)

from fastapi import APIRouter, Depends

from app.deps import get_session_manager
from app.errors import ValidationError
from app.schemas.session import GenerateQuestionRequest, GenerateQuestionResponse
from app.services.session_service import SessionLifecycleManager

router = APIRouter(prefix="/api", tags=["generation"])


@router.post("/generate-question", response_model=GenerateQuestionResponse)
def generate_question(
    payload: GenerateQuestionRequest,
    manager: SessionLifecycleManager = Depends(get_session_manager),
):
    if not payload.topic.strip() or not payload.difficulty.strip():
        raise ValidationError("topic and difficulty are required")

    question = manager.next_question(
        payload.topic,
        payload.difficulty,
        payload.previous_questions,
    )
    return GenerateQuestionResponse(question=question)
