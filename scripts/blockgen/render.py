"""输出格式生成与文件写入。"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Iterable

from .constants import OUTPUT_TYPE_CHROMIUM, OUTPUT_TYPE_WEBKIT
from .convert import compile_rules
from .models import Rule

Generator = Callable[[Iterable[Rule]], bytes]


def generate_webkit_data(rules: Iterable[Rule]) -> bytes:
    """生成 WebKit 内容拦截器可直接加载的 JSON（UTF-8）。"""

    compiled = compile_rules(rules)
    text = json.dumps(compiled, ensure_ascii=False, indent=2)
    return (text + "\n").encode("utf-8")


GENERATORS: dict[str, Generator | None] = {
    OUTPUT_TYPE_WEBKIT: generate_webkit_data,
    # 预留的输出格式，尚无生成逻辑。
    OUTPUT_TYPE_CHROMIUM: None,
}


def get_generator(output_type: str) -> Generator | None:
    """按输出格式名查找生成器；未实现或未知格式返回 None。"""

    return GENERATORS.get(output_type)


def write_output(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def format_byte_count(size: int) -> str:
    """将字节数格式化为便于阅读的文件大小。"""

    if size < 1000:
        return f"{size} bytes"
    if size < 1000 * 1000:
        return f"{size / 1000:.1f} KB"
    return f"{size / 1000 / 1000:.1f} MB"
