"""Cache-Control 解析"""

import re
from typing import Optional

MAX_AGE_PATTERN = re.compile(r"max-age\s*=\s*(\d+)", re.IGNORECASE)


def parse_max_age(cache_control: Optional[str]) -> Optional[int]:
    """从 Cache-Control 头中提取 max-age（秒）

    Args:
        cache_control: Cache-Control 头的值（可能为 None）

    Returns:
        TTL 秒数；没有该头或没有 max-age 指令时返回 None
    """
    if not cache_control:
        return None
    match = MAX_AGE_PATTERN.search(cache_control)
    if match is None:
        return None
    return int(match.group(1), 10)
