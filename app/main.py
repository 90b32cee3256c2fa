# app/main.py

# ------------------------
# 환경 변수 로드
# ------------------------
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

# ------------------------
# FastAPI, CORS 미들웨어 import
# ------------------------
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.db.base import Base, engine
from app.errors import AppError, INTERNAL_ERROR_MESSAGE, STORE_ERROR_MESSAGE
from app.services.generator import build_generator

# create_all 대상 테이블 등록
from app.models import sessions as _session_models  # noqa: F401
from app.models import user_profile as _user_models  # noqa: F401

# ------------------------
# 라우터 import
# ------------------------
from app.routers import sessions as sessions_router
from app.routers import generation as generation_router
from app.routers import user_profile as user_profile_router

# ------------------------
# 로깅 설정
# ------------------------
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(levelname)s:%(name)s:%(message)s",
)
logger = logging.getLogger(__name__)


# ------------------------
# 1) 시작 시 테이블 생성 + 생성기 준비
# ------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
    app.state.generator = build_generator(settings)
    logger.info("[APP] started env=%s", settings.app_env)
    yield


# ------------------------
# 2) FastAPI 앱 생성
# ------------------------
app = FastAPI(title="Interview Practice API", lifespan=lifespan)

# ------------------------
# 3) CORS 미들웨어 추가
# ------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,  # 쿠키 안 쓰면 False
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------
# 4) 요청 로깅
# ------------------------
@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.info("[HTTP] %s %s -> %d", request.method, request.url.path, response.status_code)
    return response


# ------------------------
# 5) 에러 응답은 모두 {"error": message}
# ------------------------
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        field = ".".join(loc)
        messages.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"error": "; ".join(messages) or "invalid request"})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # 없는 경로(404), 허용되지 않은 메서드(405) 등 프레임워크 에러
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("[HTTP] store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": STORE_ERROR_MESSAGE})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("[HTTP] unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR_MESSAGE})


# ------------------------
# 6) 라우터 등록
# ------------------------
app.include_router(sessions_router.router)
app.include_router(generation_router.router)
app.include_router(user_profile_router.router)


# ------------------------
# 7) Root 엔드포인트 (health check)
# ------------------------
@app.get("/")
def root():
    return {"ok": True}
