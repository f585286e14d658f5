"""规则生成器主流程。"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Sequence

from .cli import parse_args
from .convert import collect_compile_warnings
from .render import format_byte_count, get_generator, write_output
from .source import parse_file


def main(argv: Sequence[str] | None = None) -> int:
    """脚本主流程：读取过滤列表 -> 解析 -> 生成 -> 写入。"""

    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    generator = get_generator(args.output_type)
    if generator is None:
        print(f"[ERROR] 暂不支持的输出格式: {args.output_type}", file=sys.stderr)
        return 1

    input_path = Path(args.input_file).expanduser().resolve()
    output_path = Path(args.output_file).expanduser().resolve()
    if not input_path.exists():
        print(f"[ERROR] 找不到输入文件: {input_path}", file=sys.stderr)
        return 1

    print("生成规则：")
    print(f"  输入文件: {input_path}")
    print(f"  输出文件: {output_path}")
    print(f"  输出格式: {args.output_type}")

    rules = parse_file(input_path)
    if not rules:
        print(f"[ERROR] 未能从输入文件解析出任何规则: {input_path}", file=sys.stderr)
        return 1
    print(f"已解析 {len(rules)} 条规则……")

    warnings = collect_compile_warnings(rules)
    if args.strict and warnings:
        print("[ERROR] strict 模式命中 warning，已终止生成：", file=sys.stderr)
        for item in warnings:
            print(f"  - {item}", file=sys.stderr)
        return 2

    data = generator(rules)
    print(f"写入 {format_byte_count(len(data))} 到 {output_path}")
    write_output(output_path, data)

    print(f"[OK] 已生成规则文件: {output_path}")
    if warnings:
        # warning 输出到 stderr，便于在 CI 中与正常日志分流采集。
        print("[WARN] 需要人工关注的转换项：", file=sys.stderr)
        for item in warnings:
            print(f"  - {item}", file=sys.stderr)

    return 0
