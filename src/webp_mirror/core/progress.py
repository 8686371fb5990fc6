"""转换进度快照。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class ProgressUpdate:
    """每完成一个文件（pool）或一个分块（chunk）后发给回调的计数快照。"""

    total: int
    completed: int
    message: Optional[str] = None
    errors: int = 0
