"""核心数据模型定义。"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

STATUS_PROCESSED = "processed"
STATUS_SKIPPED = "skipped"
STATUS_ERROR = "error"


@dataclass(frozen=True, slots=True)
class WorkItem:
    """扫描阶段得到的单个待处理文件。"""

    input_path: Path
    output_path: Path
    relative_path: Path
    is_already_target_format: bool
    duplicate_of: Optional[Path] = None  # 与之前的文件映射到同一输出路径时，记录先占用者


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    """单个文件的失败记录。"""

    file: str
    message: str


@dataclass(frozen=True, slots=True)
class ItemOutcome:
    """记录单个文件的处理结果，由工作线程返回给汇总方。"""

    item: WorkItem
    status: str
    original_size: int = 0
    optimized_size: int = 0
    message: Optional[str] = None


@dataclass(slots=True)
class RunStats:
    """整次运行的统计汇总。

    所有修改都经过 ``record``，并由内部锁串行化。
    """

    total_files: int = 0
    processed_files: int = 0
    skipped_files: int = 0
    error_files: int = 0
    original_size: int = 0
    optimized_size: int = 0
    start_time: float = field(default_factory=time.perf_counter)
    end_time: Optional[float] = None
    errors: list[ErrorRecord] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, outcome: ItemOutcome) -> None:
        """将单个处理结果计入统计。"""

        with self._lock:
            if outcome.status == STATUS_PROCESSED:
                self.processed_files += 1
                self.original_size += outcome.original_size
                self.optimized_size += outcome.optimized_size
            elif outcome.status == STATUS_SKIPPED:
                self.skipped_files += 1
            else:
                # 输入大小在编码前已计入，失败时同样保留
                self.error_files += 1
                self.original_size += outcome.original_size
                self.errors.append(
                    ErrorRecord(file=str(outcome.item.relative_path), message=outcome.message or "")
                )

    def finish(self) -> None:
        self.end_time = time.perf_counter()

    @property
    def completed_files(self) -> int:
        return self.processed_files + self.skipped_files + self.error_files

    @property
    def elapsed(self) -> float:
        end = self.end_time if self.end_time is not None else time.perf_counter()
        return max(end - self.start_time, 0.0)

    @property
    def size_saved(self) -> int:
        return self.original_size - self.optimized_size

    @property
    def percent_saved(self) -> float:
        if self.original_size <= 0:
            return 0.0
        return self.size_saved / self.original_size * 100

    @property
    def files_per_second(self) -> float:
        elapsed = self.elapsed
        if elapsed <= 0:
            return 0.0
        return self.processed_files / elapsed
