"""
FastAPI应用主入口
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import LoggingMiddleware, RequestIDMiddleware
from api.routes import pages as page_routes
from api.routes import transactions as transaction_routes
from core.config import settings
from core.exceptions import register_exception_handlers
from core.logging_config import configure_logging, get_logger
from core.response import envelope_json, success_response


# 初始化日志：在入口处显式配置
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    if not settings.paystack.secret_key:
        # 缺少密钥时仍正常启动，每次网关调用返回通用500
        logger.warning("paystack_secret_key_missing", message="PAYSTACK_SECRET_KEY is not configured")
    logger.info(
        "application_startup",
        environment=settings.ENVIRONMENT,
        paystack_base_url=settings.paystack.base_url,
        gateway=settings.GATEWAY_BASE_URL or "in-process",
    )
    yield
    logger.info("application_shutdown", message="Application shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="Search Paystack transactions by date range and Action ID",
)

# 中间件按添加顺序的逆序执行：先分配request_id，再记录日志
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

register_exception_handlers(app)


app.include_router(transaction_routes.router, prefix="/api")
app.include_router(page_routes.router)


@app.get("/health", tags=["Health"])
async def health_check():
    """健康检查端点"""
    return envelope_json(success_response(data={"status": "healthy"}))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
