"""解析器与生成器使用的静态常量。"""

from __future__ import annotations

from .models import ElementType

# 注释与列表头：`! xxx`、`[Adblock Plus 2.0]`。
COMMENT_PREFIXES = ("!", "[Adblock")

# 分类标记按判定顺序排列，先命中者生效。
CSS_EXCEPTION_MARKER = "#@#"
EXTENDED_CSS_MARKER = "#?#"
ELEMENT_HIDING_MARKER = "##"

EXCEPTION_PREFIX = "@@"
SUBDOMAIN_ANCHOR = "||"
BOUNDARY_ANCHOR = "|"
OPTIONS_SEPARATOR = "$"
NEGATION_PREFIX = "~"
DOMAIN_OPTION_PREFIX = "domain="

# 以 `$` 开头、没有匹配部分的规则，按“匹配任意地址”处理。
MATCH_ANY_PATTERN = ".*"

OPTION_THIRD_PARTY = "third-party"
OPTION_MATCH_CASE = "match-case"

# EasyList 资源类型到 WebKit `resource-type` 的固定映射。
# WebKit 没有 object/subdocument/webtransport/webbundle，统一归入 other。
WEBKIT_RESOURCE_TYPE_MAP = {
    ElementType.SCRIPT: "script",
    ElementType.IMAGE: "image",
    ElementType.STYLESHEET: "style-sheet",
    ElementType.OBJECT: "other",
    ElementType.XMLHTTPREQUEST: "fetch",
    ElementType.SUBDOCUMENT: "other",
    ElementType.OTHER: "other",
    ElementType.PING: "ping",
    ElementType.MEDIA: "media",
    ElementType.WEBSOCKET: "websocket",
    ElementType.FONT: "font",
    ElementType.POPUP: "popup",
    ElementType.WEBTRANSPORT: "other",
    ElementType.WEBBUNDLE: "other",
}

# 匹配部分转正则时按字符逐个替换，单次扫描，`*` 展开出的 `.` 不会再被转义。
URL_FILTER_ESCAPES = {
    "|": "\\|",
    "*": ".*",
    ".": "\\.",
    "^": "[/:]",
}

URL_FILTER_PREFIX = "^[^:]+:(//)?.*"
CSS_DOMAIN_FILTER_TEMPLATE = "^[^:]+:(//)?([^/:]*\\.)?{domain}[/:]"

ACTION_BLOCK = "block"
ACTION_IGNORE_PREVIOUS = "ignore-previous-rules"
ACTION_CSS_DISPLAY_NONE = "css-display-none"

LOAD_TYPE_FIRST_PARTY = "first-party"
LOAD_TYPE_THIRD_PARTY = "third-party"

CSS_SELECTOR_SEPARATOR = ", "

OUTPUT_TYPE_WEBKIT = "webkit"
OUTPUT_TYPE_CHROMIUM = "chromium"
OUTPUT_TYPES = (OUTPUT_TYPE_WEBKIT, OUTPUT_TYPE_CHROMIUM)
