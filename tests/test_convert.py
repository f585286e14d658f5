"""转换层核心行为回归测试。"""

from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPTS_DIR = ROOT / "scripts"
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

from blockgen.convert import (  # noqa: E402
    aggregate_css,
    collect_compile_warnings,
    compile_rules,
    escape_trigger,
    resource_types,
)
from blockgen.models import (  # noqa: E402
    DomainCSSException,
    ElementHiding,
    ElementType,
)
from blockgen.parse import parse_rule  # noqa: E402

ALL_RESOURCE_TYPES = {
    "script",
    "image",
    "style-sheet",
    "other",
    "fetch",
    "ping",
    "media",
    "websocket",
    "font",
    "popup",
}


def compile_lines(*lines: str) -> list[dict]:
    return compile_rules(parse_rule(line) for line in lines)


class UrlRuleConvertTests(unittest.TestCase):
    def test_rule_without_options(self) -> None:
        output = compile_lines(".com/ad/")
        self.assertEqual(len(output), 1)
        trigger = output[0]["trigger"]
        self.assertEqual(output[0]["action"], {"type": "block"})
        self.assertEqual(trigger["url-filter"], "^[^:]+:(//)?.*\\.com/ad/")
        self.assertEqual(set(trigger["resource-type"]), ALL_RESOURCE_TYPES)
        self.assertFalse(trigger["url-filter-is-case-sensitive"])
        self.assertNotIn("if-domain", trigger)
        self.assertNotIn("load-type", trigger)

    def test_rule_with_options(self) -> None:
        output = compile_lines(".com/ad/$~image,document,domain=mediaplex.com|warpwire.com")
        self.assertEqual(len(output), 1)
        trigger = output[0]["trigger"]
        self.assertEqual(trigger["if-domain"], ["mediaplex.com", "warpwire.com"])
        self.assertEqual(set(trigger["resource-type"]), ALL_RESOURCE_TYPES - {"image"})

    def test_included_types_do_not_narrow_resource_type(self) -> None:
        output = compile_lines("/ads/banner$script")
        self.assertEqual(set(output[0]["trigger"]["resource-type"]), ALL_RESOURCE_TYPES)

    def test_excluded_domains_do_not_emit_if_domain(self) -> None:
        output = compile_lines(".com/ad/$domain=~a.com|~b.com")
        self.assertNotIn("if-domain", output[0]["trigger"])

    def test_exception_rule_uses_ignore_previous_rules(self) -> None:
        output = compile_lines("@@||ads.example.com^")
        self.assertEqual(output[0]["action"], {"type": "ignore-previous-rules"})
        self.assertEqual(
            output[0]["trigger"]["url-filter"], "^[^:]+:(//)?.*ads\\.example\\.com[/:]"
        )

    def test_load_type_and_match_case(self) -> None:
        third, first = compile_lines(
            "/ads/banner$third-party,match-case", "/ads/banner$~third-party"
        )
        self.assertEqual(third["trigger"]["load-type"], ["third-party"])
        self.assertTrue(third["trigger"]["url-filter-is-case-sensitive"])
        self.assertEqual(first["trigger"]["load-type"], ["first-party"])

    def test_regex_rules_are_dropped(self) -> None:
        self.assertEqual(compile_lines("/foo.*bar/"), [])

    def test_url_rules_keep_input_order(self) -> None:
        lines = ["first/", "||second.com", "third.js|", "/fourth.gif"]
        output = compile_lines(*lines)
        self.assertEqual(len(output), 4)
        self.assertTrue(output[0]["trigger"]["url-filter"].endswith(".*first/"))
        self.assertTrue(output[1]["trigger"]["url-filter"].endswith("second\\.com"))
        self.assertTrue(output[2]["trigger"]["url-filter"].endswith("third\\.js"))
        self.assertTrue(output[3]["trigger"]["url-filter"].endswith("/fourth\\.gif"))

    def test_escape_trigger(self) -> None:
        self.assertEqual(escape_trigger("a.b*c^d|e"), "a\\.b.*c[/:]d\\|e")

    def test_resource_types_complement_keeps_shared_names(self) -> None:
        # object 与 other 都映射为 other，排除 object 不影响 other 本身。
        self.assertIn("other", resource_types([ElementType.OBJECT]))
        self.assertNotIn("fetch", resource_types([ElementType.XMLHTTPREQUEST]))
        self.assertEqual(len(resource_types()), len(ALL_RESOURCE_TYPES))


class CSSConvertTests(unittest.TestCase):
    def test_global_hiding_produces_nothing(self) -> None:
        self.assertEqual(compile_lines("## .ad-wide"), [])

    def test_css_exception_produces_nothing(self) -> None:
        self.assertEqual(compile_lines("wegotads.co.za#@#.ad-source"), [])

    def test_domain_hiding_is_aggregated(self) -> None:
        output = compile_lines("a.com###x", "a.com###y", "a.com###x")
        self.assertEqual(len(output), 1)
        self.assertEqual(
            output[0]["trigger"],
            {
                "url-filter": "^[^:]+:(//)?([^/:]*\\.)?a\\.com[/:]",
                "if-domain": ["a\\.com"],
            },
        )
        self.assertEqual(output[0]["action"], {"type": "css-display-none", "selector": "#x, #y"})

    def test_css_rules_follow_url_rules(self) -> None:
        output = compile_lines("a.com,b.com##.banner", "/ads/banner", "b.com##.side")
        self.assertEqual(len(output), 3)
        self.assertEqual(output[0]["action"]["type"], "block")
        self.assertEqual(output[1]["trigger"]["if-domain"], ["a\\.com"])
        self.assertEqual(output[2]["trigger"]["if-domain"], ["b\\.com"])
        self.assertEqual(output[2]["action"]["selector"], ".banner, .side")

    def test_aggregate_css_records_exceptions(self) -> None:
        aggregate = aggregate_css(
            [
                DomainCSSException(("a.com", "b.com"), ".ad"),
                ElementHiding(None, ".global"),
                ElementHiding(("a.com",), ".ad"),
            ]
        )
        self.assertEqual(list(aggregate.exceptions), ["a.com", "b.com"])
        self.assertEqual(list(aggregate.hiding), ["a\\.com"])

    def test_output_is_json_serializable(self) -> None:
        output = compile_lines(
            ".com/ad/$~image,document,domain=~mediaplex.com|~warpwire.com",
            ".com/ad/",
            "example.com##.ad",
        )
        self.assertEqual(json.loads(json.dumps(output)), output)


class CompileWarningTests(unittest.TestCase):
    def test_no_warnings_for_supported_rules(self) -> None:
        rules = [parse_rule(".com/ad/"), parse_rule("a.com##.ad")]
        self.assertEqual(collect_compile_warnings(rules), [])

    def test_warnings_count_dropped_rules(self) -> None:
        rules = [
            parse_rule("/foo.*bar/"),
            parse_rule("/a+b/"),
            parse_rule("##.ad"),
            parse_rule("a.com#@#.ad"),
        ]
        warnings = collect_compile_warnings(rules)
        self.assertEqual(len(warnings), 3)
        self.assertTrue(warnings[0].startswith("2 条正则"))


if __name__ == "__main__":
    unittest.main()
