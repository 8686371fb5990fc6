"""文件扫描与输出路径推导逻辑。"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path

from webp_mirror.core.exceptions import DiscoveryError
from webp_mirror.core.models import WorkItem

LOGGER = logging.getLogger(__name__)

TARGET_EXTENSION = ".webp"
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", TARGET_EXTENSION}


def derive_output_path(relative_path: Path, output_root: Path) -> tuple[Path, bool]:
    """计算输出路径，返回 (输出路径, 是否已是目标格式)。

    WebP 输入原样映射到输出目录；其他格式仅替换扩展名。
    """

    if relative_path.suffix.lower() == TARGET_EXTENSION:
        return output_root / relative_path, True
    return output_root / relative_path.with_suffix(TARGET_EXTENSION), False


def _scan_directory(directory: Path, relative: Path, output_root: Path, collected: list[WorkItem]) -> None:
    """递归扫描单个目录，条目按名称排序以保证顺序稳定。"""

    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        raise DiscoveryError(f"无法读取目录: {directory}: {exc}") from exc

    for entry in entries:
        entry_relative = relative / entry.name
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_file = entry.is_file(follow_symlinks=False)
        except OSError as exc:
            raise DiscoveryError(f"无法读取目录项: {entry.path}: {exc}") from exc

        if is_dir:
            _scan_directory(Path(entry.path), entry_relative, output_root, collected)
            continue
        if not is_file:
            continue
        if Path(entry.name).suffix.lower() not in IMAGE_EXTENSIONS:
            continue

        output_path, already_target = derive_output_path(entry_relative, output_root)
        collected.append(
            WorkItem(
                input_path=Path(entry.path),
                output_path=output_path,
                relative_path=entry_relative,
                is_already_target_format=already_target,
            )
        )


def discover_work_items(input_root: Path, output_root: Path) -> list[WorkItem]:
    """扫描输入目录（含隐藏子目录），返回所有支持格式的待处理文件。"""

    collected: list[WorkItem] = []
    _scan_directory(input_root, Path(), output_root, collected)
    LOGGER.debug("扫描 %s 完成，共 %d 个文件", input_root, len(collected))
    return _mark_duplicate_outputs(collected)


def _mark_duplicate_outputs(items: list[WorkItem]) -> list[WorkItem]:
    """同名不同扩展名的文件（a.jpg / a.png / a.webp）共用一个输出路径，按扫描顺序保留第一个。"""

    owners: dict[Path, Path] = {}
    marked: list[WorkItem] = []
    for item in items:
        owner = owners.setdefault(item.output_path, item.relative_path)
        if owner != item.relative_path:
            LOGGER.warning("输出路径冲突：%s 与 %s 都映射到 %s", owner, item.relative_path, item.output_path)
            item = replace(item, duplicate_of=owner)
        marked.append(item)
    return marked
