# app/errors.py
# 도메인 에러. main.py의 exception_handler가 {"error": message} 형태로 변환한다.

# 클라이언트에 내보내는 고정 문구 (SQL, 파라미터는 로그에만 남긴다)
STORE_ERROR_MESSAGE = "Database error"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """필수 필드 누락 / 허용되지 않는 값"""
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    """동시 수정(version 불일치), 중복 email, 채점 완료 세션 수정"""
    status_code = 409


class StoreError(AppError):
    """DB 저장 실패. 로컬 복구 불가 → 500"""
    status_code = 500


class CollaboratorError(AppError):
    """
    질문/피드백 생성기 호출 실패.
    항상 fallback 문구로 대체되므로 클라이언트에는 노출되지 않는다.
    """
    status_code = 502
