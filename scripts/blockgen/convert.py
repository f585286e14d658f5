"""中间模型到 WebKit 内容拦截规则的转换逻辑。"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from .constants import (
    ACTION_BLOCK,
    ACTION_CSS_DISPLAY_NONE,
    ACTION_IGNORE_PREVIOUS,
    CSS_DOMAIN_FILTER_TEMPLATE,
    CSS_SELECTOR_SEPARATOR,
    LOAD_TYPE_FIRST_PARTY,
    LOAD_TYPE_THIRD_PARTY,
    URL_FILTER_ESCAPES,
    URL_FILTER_PREFIX,
    WEBKIT_RESOURCE_TYPE_MAP,
)
from .models import (
    Action,
    DomainCSSException,
    ElementHiding,
    ElementType,
    Options,
    PatternType,
    Rule,
    SourceType,
    UrlRule,
)

logger = logging.getLogger(__name__)

LOAD_TYPE_MAP = {
    SourceType.FIRST: LOAD_TYPE_FIRST_PARTY,
    SourceType.THIRD: LOAD_TYPE_THIRD_PARTY,
}

ACTION_TYPE_MAP = {
    Action.DENY: ACTION_BLOCK,
    Action.ALLOW: ACTION_IGNORE_PREVIOUS,
}


@dataclass
class CSSAggregate:
    """单次转换内按域名聚合的 CSS 规则。

    dict 保持插入顺序，选择器用 dict 充当有序集合，保证同一输入的输出稳定。
    `exceptions` 只做记录，目前不产出任何规则。
    """

    hiding: dict[str, dict[str, None]] = field(default_factory=dict)
    exceptions: dict[str, dict[str, None]] = field(default_factory=dict)

    def add_hiding(self, domain: str, selector: str) -> None:
        self.hiding.setdefault(escape_domain(domain), {})[selector] = None

    def add_exception(self, domain: str, selector: str) -> None:
        self.exceptions.setdefault(domain, {})[selector] = None


def escape_domain(domain: str) -> str:
    return domain.replace(".", "\\.")


def escape_trigger(trigger: str) -> str:
    """把 EasyList 匹配部分转换为正则片段。"""

    return "".join(URL_FILTER_ESCAPES.get(char, char) for char in trigger)


def build_url_filter(trigger: str) -> str:
    # 子串与通配两种类型共用同一包装；锚点信息暂不参与正则构造。
    return f"{URL_FILTER_PREFIX}{escape_trigger(trigger)}"


def resource_types(excluded: Iterable[ElementType] = ()) -> list[str]:
    """按 ElementType 声明顺序给出 WebKit 资源类型。

    先在 ElementType 上求补集再映射；多个类型映射到同一字符串（如 other）时只保留一次。
    """

    excluded = set(excluded)
    result: list[str] = []
    for element_type in ElementType:
        if element_type in excluded:
            continue
        name = WEBKIT_RESOURCE_TYPE_MAP[element_type]
        if name not in result:
            result.append(name)
    return result


def build_trigger(rule: UrlRule) -> dict[str, Any]:
    options: Options = rule.options
    trigger: dict[str, Any] = {
        "url-filter": build_url_filter(rule.pattern.trigger),
        # 只有被否定（排除）的类型会收窄范围；直接列出的类型不参与。
        "resource-type": resource_types(options.elements.allowed),
    }
    if options.domains.blocked:
        trigger["if-domain"] = list(options.domains.blocked)
    if options.source is not SourceType.ANY:
        trigger["load-type"] = [LOAD_TYPE_MAP[options.source]]
    trigger["url-filter-is-case-sensitive"] = options.match_case
    return trigger


def convert_url_rule(rule: UrlRule) -> dict[str, Any] | None:
    """将单条 URL 规则转换为 trigger/action 对象；正则规则返回 None。"""

    if rule.pattern.type is PatternType.REGEX:
        # WebKit 的 url-filter 只支持正则子集，原样透传风险太高，直接丢弃。
        logger.debug("丢弃正则规则: /%s/", rule.pattern.trigger)
        return None

    return {
        "trigger": build_trigger(rule),
        "action": {"type": ACTION_TYPE_MAP[rule.action]},
    }


def aggregate_css(rules: Iterable[Rule]) -> CSSAggregate:
    """收集所有限定域名的元素隐藏规则与 CSS 例外规则。"""

    aggregate = CSSAggregate()
    for rule in rules:
        if isinstance(rule, DomainCSSException):
            for domain in rule.domains:
                aggregate.add_exception(domain, rule.selector)
        elif isinstance(rule, ElementHiding):
            if rule.domains is None:
                # 全局隐藏规则在该格式下暂不支持。
                continue
            for domain in rule.domains:
                aggregate.add_hiding(domain, rule.selector)
    return aggregate


def build_css_rules(aggregate: CSSAggregate) -> list[dict[str, Any]]:
    result: list[dict[str, Any]] = []
    for domain, selectors in aggregate.hiding.items():
        result.append(
            {
                "trigger": {
                    "url-filter": CSS_DOMAIN_FILTER_TEMPLATE.format(domain=domain),
                    # 这里沿用转义后的域名，与 URL 规则的 if-domain 不同。
                    "if-domain": [domain],
                },
                "action": {
                    "type": ACTION_CSS_DISPLAY_NONE,
                    "selector": CSS_SELECTOR_SEPARATOR.join(selectors),
                },
            }
        )
    return result


def compile_rules(rules: Iterable[Rule]) -> list[dict[str, Any]]:
    """将规则序列转换为 WebKit 内容拦截 JSON 对象列表。

    URL 规则按输入顺序逐条输出；限定域名的元素隐藏规则按域名聚合后追加在末尾。
    """

    rules = list(rules)
    compiled: list[dict[str, Any]] = []
    for rule in rules:
        if isinstance(rule, UrlRule):
            item = convert_url_rule(rule)
            if item is not None:
                compiled.append(item)

    compiled.extend(build_css_rules(aggregate_css(rules)))
    return compiled


def collect_compile_warnings(rules: Iterable[Rule]) -> list[str]:
    """统计“解析成功但不会产出规则”的条目，便于人工确认。"""

    regex_count = 0
    global_hiding_count = 0
    exception_count = 0
    for rule in rules:
        if isinstance(rule, UrlRule) and rule.pattern.type is PatternType.REGEX:
            regex_count += 1
        elif isinstance(rule, ElementHiding) and rule.domains is None:
            global_hiding_count += 1
        elif isinstance(rule, DomainCSSException):
            exception_count += 1

    warnings: list[str] = []
    if regex_count:
        warnings.append(f"{regex_count} 条正则 URL 规则不受支持，已丢弃。")
    if global_hiding_count:
        warnings.append(f"{global_hiding_count} 条全局元素隐藏规则（无域名）不受支持，已丢弃。")
    if exception_count:
        warnings.append(f"{exception_count} 条 CSS 例外规则（#@#）仅做记录，未生成输出。")
    return warnings
