"""支付宝授权登录流程控制器

流程只有两类请求：
    1. 发起授权：请求中没有 auth_code，302 跳转到支付宝授权页
    2. 授权回调：携带 auth_code，换取 access_token -> (按 scope) 获取用户信息 -> 调用业务 verify 回调

宿主框架通过 AuthHooks 注入 success / fail / error / redirect 四个钩子，
每次 authenticate() 调用恰好触发其中一个，并以 AuthResult 返回结果。

使用示例:
    ```python
    async def verify(access_token, refresh_token, profile, done):
        user = await user_service.get_or_create_by_alipay(profile)
        done(None, user)

    flow = AlipayAuthFlow(strategy, verify, callback_url="https://example.com/v1/auth/alipay/callback")
    result = await flow.authenticate(request, hooks)
    ```
"""

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

import anyio

from pkg.crypto import KeyMaterialError
from pkg.logger import logger

from .base import BaseThirdPartyAuthStrategy, Profile
from .exceptions import (
    ConfigurationError,
    ConsumerCallbackError,
    MalformedProfileError,
    ThirdPartyAuthError,
    VerificationRejected,
)

DEFAULT_SCOPE = "auth_user"
DEFAULT_STATE = "ALIPAY"
BASE_SCOPE = "auth_base"


class AuthOutcome(StrEnum):
    REDIRECT = "redirect"
    FAIL = "fail"
    ERROR = "error"
    SUCCESS = "success"


@dataclass
class AuthResult:
    """一次 authenticate() 调用的最终结果

    Attributes:
        outcome: 触发的钩子类型
        user: success 时的用户对象
        info: success / fail 时附带的信息
        error: error 时的异常；业务拒绝时为 VerificationRejected
        url: redirect 的目标地址
        status_code: redirect 为 302，授权被拒绝为 401
        response: 钩子的返回值（例如宿主框架的 Response 对象）
    """

    outcome: AuthOutcome
    user: Any = None
    info: Any = None
    error: BaseException | None = None
    url: str | None = None
    status_code: int | None = None
    response: Any = None


class AuthHooks(Protocol):
    """宿主框架提供的结果钩子，返回值可以是普通值或 awaitable"""

    def success(self, user: Any, info: Any = None) -> Any: ...

    def fail(self, info: Any = None) -> Any: ...

    def error(self, err: BaseException) -> Any: ...

    def redirect(self, url: str, status_code: int = 302) -> Any: ...


class SupportsQueryParams(Protocol):
    """只要求请求对象暴露 query_params（Starlette Request 满足该协议）"""

    @property
    def query_params(self) -> Mapping[str, str]: ...


VerifyCallback = Callable[..., Any]


class _Verified:
    """传给业务 verify 回调的 done(err, user, info)"""

    def __init__(self) -> None:
        self._event = anyio.Event()
        self.called = False
        self.err: Any = None
        self.user: Any = None
        self.info: Any = None

    def __call__(self, err: Any = None, user: Any = None, info: Any = None) -> None:
        if self.called:
            logger.warning("verify callback called done() more than once, ignored")
            return
        self.called = True
        self.err, self.user, self.info = err, user, info
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


async def _call_hook(hook: Callable[..., Any], *args: Any) -> Any:
    result = hook(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class AlipayAuthFlow:
    """支付宝授权登录流程

    Args:
        strategy: 网关策略（AlipayAuthStrategy）
        verify: 业务回调 verify(access_token, refresh_token, profile, done)，
            pass_req_to_callback=True 时为 verify(request, access_token, refresh_token, profile, done)。
            可以是普通函数或协程函数。
        scope: 默认授权范围，包含 auth_base 时只返回 user_id，不再拉取用户信息
        state: 默认 state
        callback_url: 授权回调地址
        failure_redirect: 软失败时跳转的地址，不配置则触发 fail 钩子
        pass_req_to_callback: 是否把原始请求作为 verify 的第一个参数
        verify_timeout: verify 回调（含协程本身）加上等待 done() 的最长秒数，None 表示一直等待
        name: 策略名称
    """

    def __init__(
        self,
        strategy: BaseThirdPartyAuthStrategy,
        verify: VerifyCallback,
        *,
        scope: str = DEFAULT_SCOPE,
        state: str = DEFAULT_STATE,
        callback_url: str | None = None,
        failure_redirect: str | None = None,
        pass_req_to_callback: bool = False,
        verify_timeout: float | None = None,
        name: str = "alipay",
    ):
        if strategy is None:
            raise ConfigurationError("AlipayAuthFlow requires a strategy with app configurations")
        if verify is None:
            raise ConfigurationError("AlipayAuthFlow requires a verify callback")
        if not callable(verify):
            raise ConfigurationError("verify callback must be callable")

        self.name = name
        self.strategy = strategy
        self._verify = verify
        self.scope = scope or DEFAULT_SCOPE
        self.state = state or DEFAULT_STATE
        self.callback_url = callback_url
        self.failure_redirect = failure_redirect
        self.pass_req_to_callback = pass_req_to_callback
        self.verify_timeout = verify_timeout

    async def authenticate(
        self,
        request: SupportsQueryParams,
        hooks: AuthHooks,
        *,
        app_id: str | None = None,
        scope: str | None = None,
        state: str | None = None,
        callback_url: str | None = None,
        failure_redirect: str | None = None,
    ) -> AuthResult:
        """
        执行一次认证，关键字参数覆盖构造时的默认配置

        Returns:
            AuthResult: outcome 为 redirect / fail / error / success 之一
        """
        query = getattr(request, "query_params", None) or {}
        auth_code = query.get("auth_code")
        failure_redirect = failure_redirect or self.failure_redirect

        # 用户拒绝授权：回调带 state 但没有 auth_code
        if query.get("state") and not auth_code:
            logger.info(f"Alipay callback without auth_code, state={query.get('state')}")
            info = {"message": "Alipay authorization was not granted", "status_code": 401}
            return await self._fail(hooks, info, failure_redirect=failure_redirect)

        if auth_code:
            return await self._handle_callback(
                request,
                hooks,
                auth_code=auth_code,
                scope=scope or self.scope,
                failure_redirect=failure_redirect,
            )

        return await self._redirect_to_authorize(
            hooks,
            app_id=app_id,
            scope=scope or self.scope,
            state=state or self.state,
            callback_url=callback_url or self.callback_url,
        )

    # --- 状态处理 ---

    async def _redirect_to_authorize(
        self,
        hooks: AuthHooks,
        *,
        app_id: str | None,
        scope: str,
        state: str,
        callback_url: str | None,
    ) -> AuthResult:
        try:
            url = self.strategy.get_authorize_url(
                app_id=app_id,
                scope=scope,
                state=state,
                redirect_uri=callback_url or "",
            )
        except ConfigurationError as e:
            return await self._error(hooks, e)

        logger.debug(f"Alipay redirect -> {url}")
        return await self._redirect(hooks, url)

    async def _handle_callback(
        self,
        request: SupportsQueryParams,
        hooks: AuthHooks,
        *,
        auth_code: str,
        scope: str,
        failure_redirect: str | None,
    ) -> AuthResult:
        logger.debug(f"Alipay callback received, scope={scope}")

        try:
            token = await self.strategy.get_access_token(auth_code)
            profile = await self._load_profile(token.access_token, token.subject, scope)
        except (ThirdPartyAuthError, KeyMaterialError) as e:
            logger.error(f"Alipay authentication failed: {e!r}")
            return await self._error(hooks, e)

        done = _Verified()
        args: tuple[Any, ...] = (token.access_token, token.refresh_token, profile, done)
        if self.pass_req_to_callback:
            args = (request, *args)

        # verify 本身（协程）与等待 done() 共用同一个期限，None 表示不限时
        verify_err: ConsumerCallbackError | None = None
        with anyio.move_on_after(self.verify_timeout) as scope:
            try:
                ret = self._verify(*args)
                if inspect.isawaitable(ret):
                    await ret
                await done.wait()
            except Exception as e:
                logger.error(f"verify callback raised: {e!r}")
                verify_err = ConsumerCallbackError(f"verify callback raised {type(e).__name__}: {e}")
                verify_err.__cause__ = e

        if verify_err is not None:
            return await self._error(hooks, verify_err)
        if scope.cancelled_caught and not done.called:
            logger.error(f"verify callback did not call done() within {self.verify_timeout}s")
            verify_err = ConsumerCallbackError(f"verify callback did not call done() within {self.verify_timeout}s")
            verify_err.__cause__ = TimeoutError()
            return await self._error(hooks, verify_err)

        if done.err:
            err = done.err
            if not isinstance(err, BaseException):
                err = ConsumerCallbackError(str(err))
            return await self._error(hooks, err)
        if not done.user:
            return await self._fail(
                hooks,
                done.info,
                failure_redirect=failure_redirect,
                rejected=VerificationRejected("verify callback returned no user", info=done.info),
            )
        return await self._success(hooks, done.user, done.info)

    async def _load_profile(self, access_token: str, user_id: str | None, scope: str) -> Profile:
        # auth_base 只需要 user_id，不再请求用户信息接口
        if BASE_SCOPE in scope:
            if not user_id:
                raise MalformedProfileError("Token response has neither user_id nor open_id")
            return Profile(id=user_id)
        return await self.strategy.get_profile(access_token)

    # --- 钩子调用 ---

    async def _redirect(self, hooks: AuthHooks, url: str, status_code: int = 302) -> AuthResult:
        response = await _call_hook(hooks.redirect, url, status_code)
        return AuthResult(AuthOutcome.REDIRECT, url=url, status_code=status_code, response=response)

    async def _fail(
        self,
        hooks: AuthHooks,
        info: Any,
        *,
        failure_redirect: str | None,
        rejected: VerificationRejected | None = None,
    ) -> AuthResult:
        if failure_redirect:
            result = await self._redirect(hooks, failure_redirect)
            result.info = info
            result.error = rejected
            return result
        response = await _call_hook(hooks.fail, info)
        return AuthResult(AuthOutcome.FAIL, info=info, error=rejected, status_code=401, response=response)

    async def _error(self, hooks: AuthHooks, err: BaseException) -> AuthResult:
        response = await _call_hook(hooks.error, err)
        return AuthResult(AuthOutcome.ERROR, error=err, response=response)

    async def _success(self, hooks: AuthHooks, user: Any, info: Any) -> AuthResult:
        response = await _call_hook(hooks.success, user, info)
        return AuthResult(AuthOutcome.SUCCESS, user=user, info=info, response=response)
