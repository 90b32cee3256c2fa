# app/services/stats.py
# 대시보드 / 히스토리 화면용 파생 통계. 저장하지 않고 조회 시점에 계산한다.

from typing import Any, Dict, List, Sequence

from app.models.sessions import InterviewSession

RECENT_LIMIT = 5
SORT_KEYS = ("date", "score", "questions")


def _score(s: InterviewSession) -> int:
    return s.score or 0


def total_sessions(sessions: Sequence[InterviewSession]) -> int:
    return len(sessions)


def average_score(sessions: Sequence[InterviewSession]) -> float:
    # 세션이 없으면 0 (0으로 나누기 방지)
    if not sessions:
        return 0
    return sum(_score(s) for s in sessions) / len(sessions)


def filter_by_difficulty(sessions: Sequence[InterviewSession], difficulty: str = "all") -> List[InterviewSession]:
    if not difficulty or difficulty == "all":
        return list(sessions)
    return [s for s in sessions if s.difficulty == difficulty]


def sort_sessions(sessions: Sequence[InterviewSession], sort_by: str = "date") -> List[InterviewSession]:
    """date: 최신순, score: 점수 높은 순, questions: 답변 많은 순. 그 외 키는 순서 유지."""
    if sort_by == "date":
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)
    if sort_by == "score":
        return sorted(sessions, key=_score, reverse=True)
    if sort_by == "questions":
        return sorted(sessions, key=lambda s: len(s.questions), reverse=True)
    return list(sessions)


def summarize(sessions: Sequence[InterviewSession]) -> Dict[str, Any]:
    """sessions는 최신순으로 정렬되어 있다고 가정"""
    return {
        "total_sessions": total_sessions(sessions),
        "average_score": round(average_score(sessions), 1),
        "total_questions": sum(len(s.questions) for s in sessions),
        "recent_sessions": list(sessions[:RECENT_LIMIT]),
    }
