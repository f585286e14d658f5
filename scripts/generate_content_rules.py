#!/usr/bin/env python3
"""将 EasyList 过滤列表转换为 WebKit 内容拦截规则 JSON。"""

from __future__ import annotations

import sys
from pathlib import Path

SCRIPTS_DIR = Path(__file__).resolve().parent
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

from blockgen.app import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
