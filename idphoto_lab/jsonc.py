"""JSON with ``//`` and ``/* */`` comments."""

from __future__ import annotations

import json
import re
from typing import Any

# string literals are matched first so comment markers inside them survive
_TOKEN = re.compile(r'"(?:\\.|[^"\\])*"|//[^\r\n]*|/\*.*?(?:\*/|$)', re.DOTALL)


def strip_comments(text: str) -> str:
    return _TOKEN.sub(lambda m: m.group(0) if m.group(0).startswith('"') else "", text)


def loads(text: str) -> Any:
    return json.loads(strip_comments(text))


__all__ = ["loads", "strip_comments"]
