"""EasyList 文本行到中间模型的解析。

解析器只做“分类 + 字段提取”，任何结构不符都返回 None，不抛异常；
注释、空行、不支持的扩展语法与格式错误的规则在调用方看来是同一种结果。
"""

from __future__ import annotations

import logging
from typing import Iterable

from .constants import (
    BOUNDARY_ANCHOR,
    COMMENT_PREFIXES,
    CSS_EXCEPTION_MARKER,
    DOMAIN_OPTION_PREFIX,
    ELEMENT_HIDING_MARKER,
    EXCEPTION_PREFIX,
    EXTENDED_CSS_MARKER,
    MATCH_ANY_PATTERN,
    NEGATION_PREFIX,
    OPTION_MATCH_CASE,
    OPTION_THIRD_PARTY,
    OPTIONS_SEPARATOR,
    SUBDOMAIN_ANCHOR,
)
from .models import (
    Action,
    AnchorType,
    DomainCSSException,
    DomainOptions,
    ElementHiding,
    ElementOptions,
    ElementType,
    Options,
    Pattern,
    PatternType,
    Rule,
    SourceType,
    UrlRule,
)

logger = logging.getLogger(__name__)

_ELEMENT_TYPES_BY_NAME = {item.value: item for item in ElementType}


def dedupe_keep_order(items: Iterable) -> tuple:
    """按首次出现顺序去重。

    选项里的类型、域名在模型中按集合理解，但输出顺序需要稳定，因此不用 set。
    """

    seen: set = set()
    result: list = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return tuple(result)


def is_comment(line: str) -> bool:
    return line.startswith(COMMENT_PREFIXES)


def parse_rule(line: str) -> Rule | None:
    """将一行 EasyList 文本解析为规则。

    标记的判定顺序固定：`#@#` → `#?#` → `##` → URL 规则，先命中者生效。
    """

    if not line or is_comment(line):
        logger.debug("跳过注释或空行: %s", line)
        return None

    if CSS_EXCEPTION_MARKER in line:
        return parse_css_exception(line)
    if EXTENDED_CSS_MARKER in line:
        # `#?#` 属于扩展 CSS 语法，目标格式无法表达。
        logger.debug("跳过扩展 CSS 规则: %s", line)
        return None
    if ELEMENT_HIDING_MARKER in line:
        return parse_element_hiding(line)
    return parse_url_rule(line)


def parse_css_exception(line: str) -> DomainCSSException | None:
    """解析 `domain1,domain2#@#selector`。"""

    parts = line.split(CSS_EXCEPTION_MARKER)
    if len(parts) != 2:
        logger.debug("CSS 例外规则结构异常: %s", line)
        return None

    domains_raw, selector = parts
    domains = tuple(domains_raw.split(","))
    logger.debug("[CSS Exception] domains=%s selector=%s", domains, selector)
    return DomainCSSException(domains=domains, selector=selector)


def parse_element_hiding(line: str) -> ElementHiding | None:
    """解析 `##selector`（全局）或 `domain1,domain2##selector`（限定域名）。"""

    if line.startswith(ELEMENT_HIDING_MARKER):
        # 形如 `## .ad-wide`，选择器两侧空白需要去掉。
        selector = line[len(ELEMENT_HIDING_MARKER):].strip()
        if not selector:
            return None
        logger.debug("[Element Hiding] domains=None selector=%s", selector)
        return ElementHiding(domains=None, selector=selector)

    parts = line.split(ELEMENT_HIDING_MARKER)
    if len(parts) != 2:
        logger.debug("元素隐藏规则结构异常: %s", line)
        return None

    domains_raw, selector = parts
    domains = tuple(domains_raw.split(","))
    logger.debug("[Element Hiding] domains=%s selector=%s", domains, selector)
    return ElementHiding(domains=domains, selector=selector)


def split_pattern_and_options(line: str) -> tuple[str, str] | None:
    """拆分 `pattern$options`。

    以 `$` 开头的规则没有匹配部分，按匹配任意地址处理；其余情况按 `$` 拆分后
    必须恰好两段，匹配部分自带 `$` 的规则不受支持。
    """

    if OPTIONS_SEPARATOR not in line:
        return line, ""
    if line.startswith(OPTIONS_SEPARATOR):
        return MATCH_ANY_PATTERN, line[len(OPTIONS_SEPARATOR):]

    parts = line.split(OPTIONS_SEPARATOR)
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def parse_pattern(raw: str) -> Pattern | None:
    """剥离锚点并判定匹配类型；剥离后为空则返回 None。"""

    left_anchor = AnchorType.NONE
    if raw.startswith(SUBDOMAIN_ANCHOR):
        left_anchor = AnchorType.SUBDOMAIN
        raw = raw[len(SUBDOMAIN_ANCHOR):]
    elif raw.startswith(BOUNDARY_ANCHOR):
        left_anchor = AnchorType.BOUNDARY
        raw = raw[len(BOUNDARY_ANCHOR):]

    right_anchor = AnchorType.NONE
    if raw.endswith(BOUNDARY_ANCHOR):
        right_anchor = AnchorType.BOUNDARY
        raw = raw[: -len(BOUNDARY_ANCHOR)]

    if not raw:
        return None

    if raw.startswith("/") and raw.endswith("/"):
        pattern_type = PatternType.REGEX
        raw = raw[1:-1]
    elif "*" in raw or "^" in raw:
        pattern_type = PatternType.WILDCARD
    else:
        pattern_type = PatternType.SUBSTRING

    # 单独一个 `/` 会被当成空正则，这里同样视为无效。
    if not raw:
        return None

    return Pattern(
        trigger=raw,
        left_anchor=left_anchor,
        right_anchor=right_anchor,
        type=pattern_type,
    )


def parse_options(raw: str) -> Options:
    """解析逗号分隔的选项列表，未识别的选项直接忽略。"""

    source = SourceType.ANY
    match_case = False
    elements_allowed: list[ElementType] = []
    elements_blocked: list[ElementType] = []
    domains_allowed: list[str] = []
    domains_blocked: list[str] = []

    if raw:
        for token in raw.split(","):
            negated = token.startswith(NEGATION_PREFIX)
            if negated:
                token = token[len(NEGATION_PREFIX):]

            element_type = _ELEMENT_TYPES_BY_NAME.get(token)
            if element_type is not None:
                if negated:
                    elements_allowed.append(element_type)
                else:
                    elements_blocked.append(element_type)
            elif token == OPTION_THIRD_PARTY:
                # `~third-party` 表示仅第一方请求，而不是“排除”。
                source = SourceType.FIRST if negated else SourceType.THIRD
            elif token == OPTION_MATCH_CASE:
                match_case = True
            elif token.startswith(DOMAIN_OPTION_PREFIX):
                for domain in token[len(DOMAIN_OPTION_PREFIX):].split("|"):
                    if domain.startswith(NEGATION_PREFIX):
                        domains_allowed.append(domain[len(NEGATION_PREFIX):])
                    else:
                        domains_blocked.append(domain)
            else:
                logger.debug("忽略未识别的选项: %s", token)

    return Options(
        source=source,
        elements=ElementOptions(
            allowed=dedupe_keep_order(elements_allowed),
            blocked=dedupe_keep_order(elements_blocked),
        ),
        domains=DomainOptions(
            allowed=dedupe_keep_order(domains_allowed),
            blocked=dedupe_keep_order(domains_blocked),
        ),
        match_case=match_case,
    )


def parse_url_rule(line: str) -> UrlRule | None:
    """解析 URL 拦截/放行规则。"""

    split = split_pattern_and_options(line)
    if split is None:
        logger.debug("URL 规则包含多个 `$`，不支持: %s", line)
        return None
    raw_pattern, raw_options = split

    action = Action.DENY
    if raw_pattern.startswith(EXCEPTION_PREFIX):
        action = Action.ALLOW
        raw_pattern = raw_pattern[len(EXCEPTION_PREFIX):]
    if not raw_pattern:
        return None

    pattern = parse_pattern(raw_pattern)
    if pattern is None:
        return None

    options = parse_options(raw_options)
    logger.debug(
        "[URL] trigger=%s type=%s action=%s options=%s",
        pattern.trigger,
        pattern.type.value,
        action.value,
        options,
    )
    return UrlRule(pattern=pattern, options=options, action=action)
