"""单个文件的处理单元。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from webp_mirror.core.models import (
    STATUS_ERROR,
    STATUS_PROCESSED,
    STATUS_SKIPPED,
    ItemOutcome,
    WorkItem,
)

LOGGER = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".part"


class Transcoder(Protocol):
    def encode(self, input_path: Path, output_path: Path, quality: int) -> int: ...

    def copy(self, input_path: Path, output_path: Path) -> None: ...


def output_exists(output_path: Path) -> bool:
    """输出文件存在即视为已完成，不校验内容是否完整。"""

    return output_path.exists()


def partial_path(output_path: Path) -> Path:
    """写入过程中使用的临时文件：同目录下的隐藏 .part 文件。"""

    return output_path.with_name(f".{output_path.name}{PARTIAL_SUFFIX}")


def process_item(item: WorkItem, quality: int, transcoder: Transcoder) -> ItemOutcome:
    """在一个并发槽位内处理单个文件，所有异常都转换为 error 结果。

    输出先写入临时文件，成功后再重命名为最终路径；失败时只清理本任务的临时文件。
    """

    if item.duplicate_of is not None:
        message = f"输出路径 {item.output_path.name} 已被 {item.duplicate_of} 占用"
        LOGGER.debug("处理失败 %s: %s", item.relative_path, message)
        return ItemOutcome(item=item, status=STATUS_ERROR, message=message)

    original_size = 0
    temp_path = partial_path(item.output_path)
    writing = False

    try:
        item.output_path.parent.mkdir(parents=True, exist_ok=True)

        if output_exists(item.output_path):
            LOGGER.debug("跳过输出（已存在）：%s", item.output_path)
            return ItemOutcome(item=item, status=STATUS_SKIPPED)

        original_size = item.input_path.stat().st_size

        writing = True
        if item.is_already_target_format:
            transcoder.copy(item.input_path, temp_path)
        else:
            transcoder.encode(item.input_path, temp_path, quality)
        temp_path.replace(item.output_path)
        writing = False

        optimized_size = item.output_path.stat().st_size
    except Exception as exc:  # noqa: BLE001
        LOGGER.debug("处理失败 %s: %s", item.relative_path, exc)
        if writing:
            _remove_partial_output(temp_path)
        return ItemOutcome(
            item=item,
            status=STATUS_ERROR,
            original_size=original_size,
            message=str(exc),
        )

    LOGGER.debug("完成 %s (%d -> %d bytes)", item.relative_path, original_size, optimized_size)
    return ItemOutcome(
        item=item,
        status=STATUS_PROCESSED,
        original_size=original_size,
        optimized_size=optimized_size,
    )


def _remove_partial_output(temp_path: Path) -> None:
    try:
        temp_path.unlink(missing_ok=True)
    except OSError as exc:
        LOGGER.warning("无法清理临时输出 %s: %s", temp_path, exc)
