"""
时钟 - 以整秒为单位的当前时间

所有生长计算都基于绝对时间戳，时钟可注入以便测试
"""
import time
from datetime import datetime


def now() -> int:
    """获取当前时间戳（秒）"""
    return int(time.time())


class SystemClock:
    """系统时钟"""

    def __call__(self) -> int:
        return now()


class FixedClock:
    """
    可手动推进的时钟

    用法:
        clock = FixedClock(1000)
        clock.advance(30)
        clock()  # 1030
    """

    def __init__(self, start: int = 0):
        self.current = int(start)

    def __call__(self) -> int:
        return self.current

    def set(self, ts: int):
        self.current = int(ts)

    def advance(self, seconds: int = 1) -> int:
        self.current += int(seconds)
        return self.current


def date_str(ts: int) -> str:
    """时间戳转日期字符串（YYYY-MM-DD）"""
    return datetime.fromtimestamp(ts).strftime('%Y-%m-%d')


def year_month_str(ts: int) -> str:
    """时间戳转年月字符串（YYYY-MM）"""
    return datetime.fromtimestamp(ts).strftime('%Y-%m')


def fmt_time(sec: int) -> str:
    """格式化剩余时间显示"""
    if sec <= 0:
        return "0秒"
    m, s = divmod(int(sec), 60)
    if m > 0 and s > 0:
        return f"{m}分{s}秒"
    if m > 0:
        return f"{m}分"
    return f"{s}秒"
