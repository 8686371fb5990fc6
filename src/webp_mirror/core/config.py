"""转换任务的配置模型。"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from webp_mirror.core.exceptions import InvalidConfigurationError

DEFAULT_QUALITY = 85
DEFAULT_CONCURRENCY = 15
WEBP_METHOD = 6  # 0-6，数值越大压缩越慢、体积越小
OUTPUT_SUFFIX = "-webp"

STRATEGIES = ("pool", "chunk")


@dataclass(frozen=True, slots=True)
class RunConfig:
    """单次转换任务的配置，运行期间不可变。"""

    input_root: Path
    output_root: Path
    quality: int = DEFAULT_QUALITY
    concurrency: int = DEFAULT_CONCURRENCY
    strategy: str = "pool"  # pool | chunk

    def validate(self) -> None:
        """校验配置取值，不合法时抛出 InvalidConfigurationError。"""

        if not 1 <= self.quality <= 100:
            raise InvalidConfigurationError(f"质量必须在 1-100 之间: {self.quality}")
        if self.concurrency < 1:
            raise InvalidConfigurationError(f"并发数必须 >= 1: {self.concurrency}")
        if self.strategy not in STRATEGIES:
            raise InvalidConfigurationError(f"未知的调度策略: {self.strategy}")


def derive_output_root(input_root: Path) -> Path:
    """根据输入目录生成同级的输出目录：<父目录>/<目录名>-webp。"""

    return input_root.parent / f"{input_root.name}{OUTPUT_SUFFIX}"
