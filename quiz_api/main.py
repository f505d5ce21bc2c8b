import time
import uuid
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from quiz_api.api.v1.api import api_router
from quiz_api.core.config import settings
from quiz_api.core.exceptions import QuizAPIError
from quiz_api.core.logging import app_logger, get_request_logger
from quiz_api.db.init import Database, seed_initial_users
from quiz_api.db.session import AsyncSessionLocal, async_engine

# ログディレクトリの作成（ファイルログが有効な場合）
if settings.LOG_TO_FILE:
    log_dir = os.path.dirname(settings.LOG_FILE_PATH)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """アプリケーションのライフサイクルを管理します"""
    # 起動時の処理
    try:
        db = Database(async_engine)
        await db.init()
        app_logger.info("Database initialized successfully")

        async with AsyncSessionLocal() as session:
            try:
                await seed_initial_users(session)
            except Exception as e:
                # ユーザー作成のエラーはアプリ起動を妨げるべきではない
                app_logger.error(f"Error creating initial users: {e}", exc_info=True)
    except Exception as e:
        app_logger.error(f"Error initializing database: {e}")
        raise

    yield  # アプリケーションの実行中

    # 終了時の処理
    app_logger.info("Shutting down application")
    await async_engine.dispose()


# FastAPIアプリケーションの作成
app = FastAPI(
    title="Quiz API",
    description="クイズアプリのユーザー認証とユーザー管理を提供するAPI",
    version="1.0.0",
    lifespan=lifespan
)

# CORSミドルウェアの設定
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def mask_authorization(value: str) -> str:
    """認証スキーム名だけを残し、資格情報部分をすべてマスクする"""
    scheme, _, credentials = value.partition(" ")
    if not credentials:
        # スキーム名が無い場合は値全体が資格情報
        return "***"
    return f"{scheme} ***"


# リクエストIDとロギングミドルウェア
@app.middleware("http")
async def request_middleware(request: Request, call_next):
    # リクエストIDの生成と設定
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    logger = get_request_logger(request)

    # 機密情報（認証情報）をマスクしてヘッダーを記録
    headers = dict(request.headers)
    if "authorization" in headers:
        headers["authorization"] = mask_authorization(headers["authorization"])
    logger.debug(f"Request headers: {headers}")

    logger.info(
        f"Request started: {request.method} {request.url.path} "
        f"(Client: {request.client.host if request.client else 'unknown'})"
    )

    # 処理時間の計測
    start_time = time.time()

    try:
        response = await call_next(request)
        process_time = time.time() - start_time

        # レスポンスヘッダーの設定
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)

        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"Status: {response.status_code} "
            f"Process time: {process_time:.3f}s"
        )

        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(
            f"Request failed: {request.method} {request.url.path} "
            f"Error: {str(e)} "
            f"Process time: {process_time:.3f}s",
            exc_info=True
        )
        raise


# ドメイン例外ハンドラー
@app.exception_handler(QuizAPIError)
async def quiz_api_exception_handler(request: Request, exc: QuizAPIError):
    logger = get_request_logger(request)
    logger.warning(
        f"Request rejected: {request.method} {request.url.path} "
        f"Status: {exc.status_code} Reason: {exc.message}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
    )


# 「必須項目の欠落」とみなすpydanticのエラー種別
REQUIRED_FIELD_ERROR_TYPES = {"missing", "string_too_short"}


# バリデーションエラーハンドラー
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger = get_request_logger(request)

    # エラー情報の処理（ValueErrorオブジェクトを文字列に変換）
    errors = []
    for error in exc.errors():
        processed_error = dict(error)
        if 'ctx' in processed_error and 'error' in processed_error['ctx']:
            if isinstance(processed_error['ctx']['error'], ValueError):
                processed_error['ctx'] = {
                    **processed_error['ctx'],
                    'error': str(processed_error['ctx']['error']),
                }
        errors.append(processed_error)

    logger.warning(
        f"Validation error: {request.method} {request.url.path} "
        f"Errors: {errors}"
    )

    # ボディ項目（ユーザー名・パスワード）の欠落・空文字のみ共通のメッセージで返す
    if errors and all(
        tuple(error.get("loc", ()))[:1] == ("body",)
        and error.get("type") in REQUIRED_FIELD_ERROR_TYPES
        for error in errors
    ):
        message = "Username and password are required"
    else:
        message = "Invalid request parameters"

    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({"message": message, "detail": errors}),
    )


# APIルーターの登録
app.include_router(api_router, prefix="/api/v1")


# ルートエンドポイント
@app.get("/")
async def root():
    return {
        "message": "Quiz API",
        "version": "1.0.0",
        "docs_url": "/docs"
    }


# ヘルスチェックエンドポイント
@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    app_logger.info(
        f"Starting quiz-api in {settings.ENVIRONMENT} mode "
        f"(Log level: {settings.LOG_LEVEL})"
    )

    uvicorn.run(app, host="0.0.0.0", port=8080)
