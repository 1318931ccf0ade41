from __future__ import annotations

from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from idphoto_lab import jsonc


def test_line_and_block_comments_are_removed() -> None:
    text = """{
      // provider settings
      "provider": {"edit_model": "m"}, /* trailing
      block */ "server": {"port": 8080}
    }"""

    assert jsonc.loads(text) == {"provider": {"edit_model": "m"}, "server": {"port": 8080}}


def test_comment_markers_inside_strings_survive() -> None:
    text = '{"url": "http://example.com/*x*/", "note": "a \\"//quoted\\" word"} // done'

    assert jsonc.loads(text) == {"url": "http://example.com/*x*/", "note": 'a "//quoted" word'}


def test_unterminated_block_comment_drops_the_rest() -> None:
    assert jsonc.strip_comments('{"a": 1} /* never closed') == '{"a": 1} '


def test_plain_json_is_untouched() -> None:
    text = '{"a": [1, 2, "3/4"]}'

    assert jsonc.strip_comments(text) == text


def test_invalid_json_still_raises() -> None:
    with pytest.raises(ValueError):
        jsonc.loads("{ // only a comment\n")
