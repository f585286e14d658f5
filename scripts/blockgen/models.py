"""过滤规则解析后的中间模型。

模型只承载数据：解析阶段一次性构造，生成阶段一次性消费，全部不可变。
集合语义的字段统一用“去重且保持首次出现顺序”的 tuple 表示，保证输出可复现。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Action(Enum):
    ALLOW = "allow"
    DENY = "deny"


class AnchorType(Enum):
    NONE = "none"
    # `||`：匹配域名及其任意子域名的起始位置。
    SUBDOMAIN = "subdomain"
    # `|`：匹配地址的开头或结尾。
    BOUNDARY = "boundary"


class PatternType(Enum):
    REGEX = "regex"
    WILDCARD = "wildcard"
    SUBSTRING = "substring"


class SourceType(Enum):
    ANY = "any"
    FIRST = "first"
    THIRD = "third"


class ElementType(Enum):
    """EasyList 可识别的资源类型；枚举值即规则里的选项名。

    声明顺序就是生成 `resource-type` 时的规范顺序，补集计算依赖这里的完整枚举。
    """

    OTHER = "other"
    SCRIPT = "script"
    IMAGE = "image"
    STYLESHEET = "stylesheet"
    OBJECT = "object"
    XMLHTTPREQUEST = "xmlhttprequest"
    SUBDOCUMENT = "subdocument"
    PING = "ping"
    MEDIA = "media"
    FONT = "font"
    POPUP = "popup"
    WEBSOCKET = "websocket"
    WEBTRANSPORT = "webtransport"
    WEBBUNDLE = "webbundle"


@dataclass(frozen=True)
class Pattern:
    """URL 规则的匹配部分。

    `trigger` 已剥离锚点字符与正则两侧的 `/`，解析成功时一定非空。
    """

    trigger: str
    left_anchor: AnchorType = AnchorType.NONE
    right_anchor: AnchorType = AnchorType.NONE
    type: PatternType = PatternType.SUBSTRING


@dataclass(frozen=True)
class ElementOptions:
    # allowed：以 `~` 否定的类型（排除）；blocked：直接列出的类型（包含）。
    allowed: tuple[ElementType, ...] = ()
    blocked: tuple[ElementType, ...] = ()


@dataclass(frozen=True)
class DomainOptions:
    # allowed：`domain=` 中带 `~` 的域名（排除）；blocked：不带 `~` 的域名（包含）。
    allowed: tuple[str, ...] = ()
    blocked: tuple[str, ...] = ()


@dataclass(frozen=True)
class Options:
    source: SourceType = SourceType.ANY
    elements: ElementOptions = field(default_factory=ElementOptions)
    domains: DomainOptions = field(default_factory=DomainOptions)
    match_case: bool = False


@dataclass(frozen=True)
class DomainCSSException:
    """`domain#@#selector`：在指定域名上豁免某个隐藏选择器。"""

    domains: tuple[str, ...]
    selector: str


@dataclass(frozen=True)
class ElementHiding:
    """`##selector` 或 `domain##selector`。

    `domains is None` 表示对所有域名生效；存在时至少包含一个条目。
    """

    domains: tuple[str, ...] | None
    selector: str


@dataclass(frozen=True)
class UrlRule:
    pattern: Pattern
    options: Options
    action: Action = Action.DENY


Rule = Union[DomainCSSException, ElementHiding, UrlRule]
