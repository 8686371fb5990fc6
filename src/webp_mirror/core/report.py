"""运行结束后的统计汇总与输出。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from rich.console import Console

from webp_mirror.core.models import RunStats
from webp_mirror.utils.units import format_bytes

MAX_ERRORS_SHOWN = 10


@dataclass(frozen=True, slots=True)
class RunSummary:
    """由 RunStats 派生的汇总指标。"""

    elapsed: float
    size_saved: int
    percent_saved: float
    files_per_second: float


def summarize(stats: RunStats) -> RunSummary:
    return RunSummary(
        elapsed=stats.elapsed,
        size_saved=stats.size_saved,
        percent_saved=stats.percent_saved,
        files_per_second=stats.files_per_second,
    )


def print_summary(stats: RunStats, console: Optional[Console] = None) -> None:
    """打印最终统计，错误列表最多展示前 10 条。"""

    console = console or Console()
    summary = summarize(stats)

    console.print()
    console.print("[bold]=== 转换汇总 ===[/bold]")
    console.print(f"[green]✓ 成功: {stats.processed_files} 个文件[/green]")
    console.print(f"[yellow]⊙ 跳过: {stats.skipped_files} 个文件（已存在）[/yellow]")
    console.print(f"[red]✗ 失败: {stats.error_files} 个文件[/red]")
    console.print(f"[cyan]⧗ 耗时: {summary.elapsed:.2f}s ({summary.files_per_second:.0f} 个/秒)[/cyan]")
    console.print(f"[magenta]⊚ 原始大小: {format_bytes(stats.original_size)}[/magenta]")
    console.print(f"[magenta]⊚ 转换后大小: {format_bytes(stats.optimized_size)}[/magenta]")
    console.print(
        f"[bold green]★ 节省: {format_bytes(summary.size_saved)} ({summary.percent_saved:.1f}%)[/bold green]"
    )

    if not stats.errors:
        return

    console.print()
    console.print("[bold red]错误:[/bold red]")
    for record in stats.errors[:MAX_ERRORS_SHOWN]:
        console.print(f"  - {record.file}: {record.message}", style="red", markup=False)
    remaining = len(stats.errors) - MAX_ERRORS_SHOWN
    if remaining > 0:
        console.print(f"[red]  ... 以及另外 {remaining} 个错误[/red]")
