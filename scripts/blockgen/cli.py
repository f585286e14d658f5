"""命令行参数解析。"""

from __future__ import annotations

import argparse
from typing import Sequence

from .constants import OUTPUT_TYPES


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """解析命令行参数。

    输入、输出与格式均为必填，避免在未指定时误覆盖已有规则文件。
    """

    parser = argparse.ArgumentParser(description="将 EasyList 过滤列表转换为内容拦截规则 JSON")
    parser.add_argument(
        "--input-file",
        required=True,
        help="需要解析的 EasyList 文件路径",
    )
    parser.add_argument(
        "--output-file",
        required=True,
        help="生成规则的写入路径",
    )
    parser.add_argument(
        "--output-type",
        choices=OUTPUT_TYPES,
        required=True,
        help="输出格式：webkit / chromium（chromium 暂未实现）",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="严格模式：出现任何 warning 即返回非 0，且不写入输出文件",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="输出逐行解析的调试日志",
    )
    return parser.parse_args(argv)
