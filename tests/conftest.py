from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


class FakeModels:
    """Stand-in for ``genai.Client().models`` that records every call."""

    def __init__(self, response: Any = None, error: BaseException | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _answer(self, name: str, kwargs: dict[str, Any]) -> Any:
        self.calls.append((name, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def generate_images(self, **kwargs: Any) -> Any:
        return self._answer("generate_images", kwargs)

    def generate_content(self, **kwargs: Any) -> Any:
        return self._answer("generate_content", kwargs)


def make_client(response: Any = None, error: BaseException | None = None) -> SimpleNamespace:
    return SimpleNamespace(models=FakeModels(response=response, error=error))


@pytest.fixture()
def png_bytes() -> bytes:
    return b"\x89PNG\r\n\x1a\nfake-image"


@pytest.fixture()
def fake_client():
    return make_client
