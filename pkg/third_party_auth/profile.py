"""支付宝用户信息标准化"""

from typing import Any

from pkg.toolkit.json import orjson_loads

from .base import Profile
from .exceptions import MalformedProfileError

PROVIDER = "alipay"


def parse(raw: str | bytes | dict[str, Any]) -> Profile:
    """
    将 alipay.user.info.share 的返回对象转换为 Profile

    Args:
        raw: JSON 文本或已解码的字典

    Returns:
        Profile: id 取 user_id（缺失时取 open_id），昵称、头像取 nick_name / avatar

    Raises:
        MalformedProfileError: 非法 JSON、非对象载荷，或 user_id 与 open_id 均缺失
    """
    payload = raw
    if isinstance(raw, (str, bytes)):
        try:
            payload = orjson_loads(raw)
        except ValueError as e:
            raise MalformedProfileError(f"Invalid profile JSON: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedProfileError(f"Profile payload must be a JSON object, got {type(payload).__name__}")

    user_id = payload.get("user_id")
    if user_id in (None, ""):
        user_id = payload.get("open_id")
    if user_id in (None, ""):
        raise MalformedProfileError("Profile payload has neither user_id nor open_id")

    avatar = payload.get("avatar")
    return Profile(
        id=str(user_id),
        display_name=payload.get("nick_name"),
        avatar=avatar,
        photos=[{"value": avatar}],
        provider=PROVIDER,
        gender=payload.get("gender"),
        province=payload.get("province"),
        city=payload.get("city"),
        raw=payload,
    )
