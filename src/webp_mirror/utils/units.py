"""数值格式化工具函数。"""

from __future__ import annotations

BYTE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")
KILO = 1024


def format_bytes(size: int) -> str:
    """将字节数格式化为易读字符串，例如 1536 -> "1.5 KB"。

    单位取不超过数值的最大 1024 次幂，数值保留两位小数并去掉末尾的 0。
    """

    if size == 0:
        return "0 Bytes"

    sign = "-" if size < 0 else ""
    magnitude = abs(size)
    index = 0
    # 用整数比较选取单位
    while index < len(BYTE_UNITS) - 1 and magnitude >= KILO ** (index + 1):
        index += 1

    value = f"{magnitude / KILO**index:.2f}".rstrip("0").rstrip(".")
    return f"{sign}{value} {BYTE_UNITS[index]}"
