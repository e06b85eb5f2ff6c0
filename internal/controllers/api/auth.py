"""支付宝授权登录 API 接口"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from internal.config import setting
from internal.core.alipay import get_alipay_strategy
from internal.core.exception import AppException, errors
from internal.services.auth import verify_alipay_user
from pkg.logger import logger
from pkg.third_party_auth import (
    AlipayAuthFlow,
    GatewayError,
    MalformedProfileError,
    ResponseFormatError,
    TransportError,
)
from pkg.toolkit.exc import describe_cause_chain
from pkg.toolkit.response import error_response, success_response

router = APIRouter(prefix="/auth/alipay", tags=["Alipay Authentication"])

# 上游返回异常，统一映射为 502
_UPSTREAM_ERRORS = (GatewayError, TransportError, ResponseFormatError, MalformedProfileError)


class FastAPIAuthHooks:
    """把流程结果转换为 FastAPI 响应"""

    def success(self, user: Any, info: Any = None):
        return success_response({"user": user, "info": info})

    def fail(self, info: Any = None):
        message = info.get("message") if isinstance(info, dict) else None
        return error_response(errors.Unauthorized, message=message)

    def error(self, err: BaseException):
        if isinstance(err, _UPSTREAM_ERRORS):
            logger.warning(f"Alipay login upstream error: {err!r}")
            return error_response(errors.BadGateway, message=str(err))
        logger.error(f"Alipay login error: {describe_cause_chain(err)}")
        return error_response(errors.InternalServerError, message=str(err))

    def redirect(self, url: str, status_code: int = 302):
        return RedirectResponse(url, status_code=status_code)


def new_alipay_flow() -> AlipayAuthFlow:
    try:
        strategy = get_alipay_strategy()
    except RuntimeError as e:
        raise AppException(errors.ServiceUnavailable, message="Alipay login is not configured") from e

    return AlipayAuthFlow(
        strategy,
        verify_alipay_user,
        scope=setting.ALIPAY_SCOPE,
        state=setting.ALIPAY_STATE,
        callback_url=setting.ALIPAY_CALLBACK_URL,
        failure_redirect=setting.ALIPAY_FAILURE_REDIRECT,
    )


# 依赖注入类型注解
AlipayFlowDep = Annotated[AlipayAuthFlow, Depends(new_alipay_flow)]


async def _authenticate(request: Request, flow: AlipayAuthFlow):
    # 未配置回调地址时回调到本服务的 callback 路由
    callback_url = flow.callback_url or str(request.url_for("alipay_callback"))
    result = await flow.authenticate(request, FastAPIAuthHooks(), callback_url=callback_url)
    logger.info(f"Alipay login finished, outcome={result.outcome}")
    return result.response


@router.get("", summary="支付宝登录（发起授权 / 处理回调）")
async def alipay_login(request: Request, flow: AlipayFlowDep):
    """
    - 没有 auth_code：302 跳转到支付宝授权页
    - 携带 auth_code：换取令牌、获取用户信息并完成登录
    - 携带 state 但没有 auth_code：用户拒绝授权，返回 401
    """
    return await _authenticate(request, flow)


@router.get("/callback", name="alipay_callback", summary="支付宝授权回调")
async def alipay_callback(request: Request, flow: AlipayFlowDep):
    return await _authenticate(request, flow)
