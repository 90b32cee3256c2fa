# app/config.py


from dotenv import load_dotenv
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # .env 파일 먼저 읽기

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    # 환경 구분
    app_env: str = "local"

    # DB (기본값: 로컬 sqlite 파일)
    database_url: str = f"sqlite:///{BASE_DIR / 'interview_prep.db'}"
    auto_create_tables: bool = True

    # OpenAI (키가 없으면 fallback 문구 사용)
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    generator_timeout_sec: float = 15.0

    # 로깅 / CORS
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # 세션 정책
    lock_scored_sessions: bool = False   # True면 채점된 세션에 답변 추가 금지
    require_existing_user: bool = False  # True면 세션 생성 시 user_id 존재 확인

    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),  # 루트 .env 절대경로
        env_file_encoding="utf-8",
        extra="ignore",                   # 필요 없는 env 무시
    )

settings = Settings()

if __name__ == "__main__":
    print("BASE_DIR:", BASE_DIR)
    print("DATABASE_URL:", settings.database_url)
    print("OPENAI 사용:", bool(settings.openai_api_key))
