"""命令行入口。"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from webp_mirror.core.config import (
    DEFAULT_CONCURRENCY,
    DEFAULT_QUALITY,
    RunConfig,
    derive_output_root,
)
from webp_mirror.core.exceptions import WebpMirrorError
from webp_mirror.core.progress import ProgressUpdate
from webp_mirror.core.report import print_summary
from webp_mirror.processing.pipeline import optimize
from webp_mirror.utils.logging import setup_logging

app = typer.Typer(
    help="递归地将目录中的 PNG/JPG 图片批量转换为 WebP。",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()
error_console = Console(stderr=True)


def _fail(message: str) -> typer.Exit:
    error_console.print(f"[red]错误: {escape(message)}[/red]")
    return typer.Exit(code=1)


def _parse_int(value: str, name: str, minimum: int, maximum: Optional[int] = None) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise _fail(f"{name} 必须为整数: {value}") from exc
    if parsed < minimum or (maximum is not None and parsed > maximum):
        bounds = f"{minimum}-{maximum}" if maximum is not None else f">= {minimum}"
        raise _fail(f"{name} 必须为 {bounds}: {value}")
    return parsed


def _build_progress_callback(progress: Progress):
    task_id: Optional[int] = None

    def callback(update: ProgressUpdate) -> None:
        nonlocal task_id
        if update.total == 0:
            return
        if task_id is None:
            task_id = progress.add_task("转换图片", total=update.total, errors=0)
        progress.update(task_id, completed=update.completed, errors=update.errors)

    return callback


@app.command()
def run_cli(
    ctx: typer.Context,
    input_folder: Optional[Path] = typer.Argument(None, help="包含图片的输入目录"),
    quality: str = typer.Option(str(DEFAULT_QUALITY), "--quality", "-q", help="WebP 质量 (1-100)"),
    concurrency: str = typer.Option(str(DEFAULT_CONCURRENCY), "--concurrency", "-c", help="并发处理数量"),
    strategy: str = typer.Option("pool", "--strategy", help="调度策略：pool 或 chunk"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """转换 INPUT_FOLDER 下的图片，输出到同级的 <目录名>-webp 目录。"""

    if input_folder is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    setup_logging(verbose)

    quality_value = _parse_int(quality, "质量", 1, 100)
    concurrency_value = _parse_int(concurrency, "并发数", 1)

    input_root = input_folder.expanduser().resolve()
    if not input_root.is_dir() or not os.access(input_root, os.R_OK):
        raise _fail(f"无法访问目录: {input_root}")

    config = RunConfig(
        input_root=input_root,
        output_root=derive_output_root(input_root),
        quality=quality_value,
        concurrency=concurrency_value,
        strategy=strategy,
    )
    logging.getLogger(__name__).debug("运行配置：%s", config)

    console.print("\n[bold]开始转换图片[/bold]\n")
    console.print(f"[cyan]输入:  {escape(str(config.input_root))}[/cyan]")
    console.print(f"[cyan]输出:  {escape(str(config.output_root))}[/cyan]")
    console.print(f"[cyan]质量:  {config.quality}[/cyan]")
    console.print(f"[cyan]并发:  {config.concurrency}[/cyan]\n")

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TextColumn("[red]{task.fields[errors]} 个错误"),
        TimeElapsedColumn(),
        console=console,
    )

    try:
        with progress:
            stats = optimize(config, progress_callback=_build_progress_callback(progress))
    except (WebpMirrorError, OSError) as exc:
        error_console.print(f"[red]致命错误:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if stats.total_files == 0:
        console.print("[yellow]⚠ 没有找到需要处理的图片[/yellow]")
        return

    print_summary(stats, console)


if __name__ == "__main__":
    app()
