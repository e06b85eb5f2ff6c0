import datetime

import pytz

# 支付宝网关约定的时间格式，例如 "2024-12-23 18:30:00"
GATEWAY_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_iso_datetime(val: datetime.datetime, *, use_z: bool = True, timespec: str = "milliseconds") -> str:
    """
    将 datetime 对象格式化为 ISO 8601 字符串。
    - 有时区信息：保留时区并输出 ISO 格式
    - 无时区信息：假定为 UTC

    Args:
        val: 要格式化的 datetime 对象。
        use_z: 如果为 True 且时区为 UTC，输出 'Z' 格式；否则输出 '+00:00' 格式。
        timespec: 时间精度，可选值：'auto', 'hours', 'minutes', 'seconds', 'milliseconds', 'microseconds'。

    Returns:
        ISO 8601 格式的字符串。
    """
    if val.tzinfo is None:
        val = val.replace(tzinfo=datetime.UTC)

    iso_str = val.isoformat(timespec=timespec)

    if use_z and val.utcoffset() == datetime.timedelta(0):
        return iso_str.replace("+00:00", "Z")

    return iso_str


def now_in_timezone(tz_name: str) -> datetime.datetime:
    """获取指定时区的当前时间（带时区信息，去掉微秒）"""
    return datetime.datetime.now(pytz.timezone(tz_name)).replace(microsecond=0)


def format_gateway_timestamp(val: datetime.datetime | None = None, *, tz_name: str = "Asia/Shanghai") -> str:
    """
    生成网关请求使用的 timestamp 字段。

    Args:
        val: 指定时间；为 None 时取 tz_name 时区的当前时间。
            带时区信息的时间会先转换到 tz_name 时区，无时区信息的时间按原值格式化。
        tz_name: 网关约定的时区，默认东八区。

    Returns:
        形如 'YYYY-MM-DD HH:mm:ss' 的字符串。
    """
    if val is None:
        val = now_in_timezone(tz_name)
    elif val.tzinfo is not None:
        val = val.astimezone(pytz.timezone(tz_name))

    return val.strftime(GATEWAY_TIMESTAMP_FORMAT)
