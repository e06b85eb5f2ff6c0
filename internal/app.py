import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from internal.config import setting
from internal.core.alipay import close_alipay_strategy, init_alipay_strategy
from internal.core.exception import AppException, errors
from internal.core.logger import init_logger
from pkg.logger import logger
from pkg.toolkit.response import error_response


def create_app() -> FastAPI:
    debug = setting.DEBUG
    app = FastAPI(
        debug=debug,
        docs_url="/docs" if debug else None,
        redoc_url="/redoc" if debug else None,
        lifespan=lifespan,
    )

    register_router(app)
    register_exception(app)
    register_middleware(app)

    return app


def register_router(app: FastAPI):
    from internal.controllers import api

    app.include_router(api.router)


def register_exception(app: FastAPI):
    @app.exception_handler(AppException)
    async def app_exception_handler(_: Request, exc: AppException):
        logger.warning(f"App Exception: {exc}")
        return error_response(exc.error, message=exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_: Request, exc: RequestValidationError):
        logger.warning(f"Validation Error: {exc!r}")
        return error_response(errors.BadRequest, message=f"Validation Error: {exc}")


def register_middleware(app: FastAPI):
    # 日志中间件：记录请求和响应的日志，注入 trace_id
    from internal.middlewares.recorder import ASGIRecordMiddleware

    app.add_middleware(ASGIRecordMiddleware)


# 定义 lifespan 事件处理器
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # 初始化日志
    init_logger()
    logger.info("Init lifespan...")
    logger.info(f"Current PID: {os.getpid()}")

    # 初始化支付宝登录策略，未配置凭证时登录接口返回 503
    if setting.alipay_configured:
        init_alipay_strategy()
    else:
        logger.warning("Alipay credentials are not configured, Alipay login is disabled.")

    logger.info("Application will start.")

    yield

    # 关闭时的清理逻辑
    await close_alipay_strategy()
    logger.warning("Application is about to close.")
