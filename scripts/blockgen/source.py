"""过滤列表读取与逐行解析。"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from .models import Rule
from .parse import parse_rule


def read_lines(path: Path) -> Iterator[str]:
    """逐行读取 UTF-8 过滤列表。

    只去掉行尾换行符，其余空白原样交给解析器判断，避免改变选择器内容。
    """

    with path.open("r", encoding="utf-8") as fp:
        for line in fp:
            yield line.rstrip("\r\n")


def parse_lines(lines: Iterable[str]) -> list[Rule]:
    """按输入顺序解析每一行，丢弃无法解析的行。"""

    rules: list[Rule] = []
    for line in lines:
        rule = parse_rule(line)
        if rule is not None:
            rules.append(rule)
    return rules


def parse_file(path: Path) -> list[Rule]:
    """解析整个过滤列表文件；文件不存在时抛出 FileNotFoundError。"""

    return parse_lines(read_lines(path))
