"""支付宝登录的业务回调"""

from typing import Any

from pkg.logger import logger
from pkg.third_party_auth import Profile


def build_user(profile: Profile) -> dict[str, Any]:
    return {
        "id": profile.id,
        "provider": profile.provider,
        "display_name": profile.display_name,
        "avatar": profile.avatar,
    }


async def verify_alipay_user(access_token: str, refresh_token: str | None, profile: Profile, done) -> None:
    """
    将支付宝用户信息转换为应用用户

    本服务不持久化用户与令牌，直接以 profile 构造用户对象。
    """
    user = build_user(profile)
    logger.info(f"Alipay user verified, user_id={profile.id}")
    done(None, user, {"provider": profile.provider, "has_refresh_token": bool(refresh_token)})
