"""处理流水线：扫描、限流并发执行转换、汇总统计。"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Optional, Sequence

from webp_mirror.core.config import RunConfig
from webp_mirror.core.exceptions import WebpMirrorError
from webp_mirror.core.models import STATUS_ERROR, ItemOutcome, RunStats, WorkItem
from webp_mirror.core.progress import ProgressUpdate
from webp_mirror.core.scanner import discover_work_items
from webp_mirror.processing.transcoder import WebPTranscoder
from webp_mirror.processing.worker import Transcoder, process_item

LOGGER = logging.getLogger(__name__)


ProgressCallback = Optional[Callable[[ProgressUpdate], None]]


def optimize(
    config: RunConfig,
    transcoder: Optional[Transcoder] = None,
    progress_callback: ProgressCallback = None,
) -> RunStats:
    """转换入口：校验配置、创建输出目录、扫描并批量处理。

    配置错误、输出目录创建失败与扫描失败都会直接抛出，中止整次运行。
    """

    config.validate()
    stats = RunStats()

    try:
        config.output_root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WebpMirrorError(f"无法创建输出目录: {config.output_root}: {exc}") from exc

    LOGGER.info("开始扫描输入路径 %s", config.input_root)
    items = discover_work_items(config.input_root, config.output_root)
    LOGGER.info("发现 %d 个候选图片文件", len(items))

    if not items:
        _emit_progress(progress_callback, stats, "没有需要处理的图片")
        stats.finish()
        return stats

    run_batch(items, config, transcoder=transcoder, progress_callback=progress_callback, stats=stats)
    return stats


def run_batch(
    items: Sequence[WorkItem],
    config: RunConfig,
    transcoder: Optional[Transcoder] = None,
    progress_callback: ProgressCallback = None,
    stats: Optional[RunStats] = None,
) -> RunStats:
    """以最多 config.concurrency 个并发槽位处理全部 WorkItem。

    工作线程只返回 ItemOutcome，统计由调用线程统一汇总。最终统计与并发数、
    调度策略无关，只有完成顺序与耗时不同。
    """

    config.validate()
    stats = stats or RunStats()
    stats.total_files = len(items)
    transcoder = transcoder or WebPTranscoder()

    LOGGER.info(
        "开始处理 %d 个文件（并发 %d，策略 %s）", stats.total_files, config.concurrency, config.strategy
    )
    _emit_progress(progress_callback, stats, "开始执行处理任务")

    if config.concurrency <= 1:
        for item in items:
            stats.record(process_item(item, config.quality, transcoder))
            _emit_progress(progress_callback, stats, f"完成 {item.relative_path}")
    elif config.strategy == "chunk":
        _run_chunked(items, config, transcoder, stats, progress_callback)
    else:
        _run_pooled(items, config, transcoder, stats, progress_callback)

    stats.finish()
    LOGGER.info(
        "处理完成：成功 %d，跳过 %d，失败 %d",
        stats.processed_files,
        stats.skipped_files,
        stats.error_files,
    )
    return stats


def _run_pooled(
    items: Sequence[WorkItem],
    config: RunConfig,
    transcoder: Transcoder,
    stats: RunStats,
    progress_callback: ProgressCallback,
) -> None:
    """固定数量的工作线程从共享队列取任务，慢任务不会阻塞其余槽位。"""

    with ThreadPoolExecutor(max_workers=config.concurrency, thread_name_prefix="webp") as executor:
        future_map = {executor.submit(process_item, item, config.quality, transcoder): item for item in items}
        for future in as_completed(future_map):
            item = future_map[future]
            stats.record(_collect(future, item))
            _emit_progress(progress_callback, stats, f"完成 {item.relative_path}")


def _run_chunked(
    items: Sequence[WorkItem],
    config: RunConfig,
    transcoder: Transcoder,
    stats: RunStats,
    progress_callback: ProgressCallback,
) -> None:
    """按 concurrency 大小分块，每块全部完成后才开始下一块。"""

    with ThreadPoolExecutor(max_workers=config.concurrency, thread_name_prefix="webp") as executor:
        for chunk in _chunked(items, config.concurrency):
            future_map = {executor.submit(process_item, item, config.quality, transcoder): item for item in chunk}
            for future, item in future_map.items():
                stats.record(_collect(future, item))
            _emit_progress(progress_callback, stats, f"已完成 {stats.completed_files}/{stats.total_files}")


def _chunked(items: Sequence[WorkItem], size: int) -> Iterable[Sequence[WorkItem]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _collect(future: Future[ItemOutcome], item: WorkItem) -> ItemOutcome:
    try:
        return future.result()
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("任务执行异常：%s", exc)
        return ItemOutcome(item=item, status=STATUS_ERROR, message=str(exc))


def _emit_progress(callback: ProgressCallback, stats: RunStats, message: Optional[str] = None) -> None:
    if not callback:
        return
    callback(
        ProgressUpdate(
            total=stats.total_files,
            completed=stats.completed_files,
            message=message,
            errors=stats.error_files,
        )
    )
