from __future__ import annotations

import base64
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import main
from idphoto_lab.image.generation.errors import SafetyRejectedError


def _service(**kwargs) -> MagicMock:
    service = MagicMock()
    service.generate_from_text.return_value = base64.b64encode(b"generated").decode()
    service.refine_image.return_value = base64.b64encode(b"refined").decode()
    for name, value in kwargs.items():
        setattr(service, name, value)
    return service


def test_generate_writes_png(tmp_path: Path) -> None:
    service = _service()
    out = tmp_path / "photo.png"

    with patch("main.StudioService.from_config", return_value=service), patch("main.load_dotenv"):
        code = main.main(["generate", "a fox knight", "--size", "square", "--out", str(out)])

    assert code == 0
    assert out.read_bytes() == b"generated"
    service.generate_from_text.assert_called_once_with("a fox knight", "1:1", apply_template=True)


def test_refine_overwrites_source_by_default(tmp_path: Path) -> None:
    service = _service()
    source = tmp_path / "photo.jpg"
    source.write_bytes(b"original")

    with patch("main.StudioService.from_config", return_value=service), patch("main.load_dotenv"):
        code = main.main(["refine", str(source), "add glasses"])

    assert code == 0
    assert source.read_bytes() == b"refined"
    args = service.refine_image.call_args.args
    assert base64.b64decode(args[0]) == b"original"
    assert args[1] == "image/jpeg"
    assert args[2] == "add glasses"


def test_generation_error_exits_with_status_one(tmp_path: Path, capsys) -> None:
    service = _service()
    service.generate_from_text.side_effect = SafetyRejectedError("rejected: SAFETY", block_reason="SAFETY")

    with patch("main.StudioService.from_config", return_value=service), patch("main.load_dotenv"):
        code = main.main(["generate", "a fox knight", "--out", str(tmp_path / "x.png")])

    assert code == 1
    assert "rejected: SAFETY" in capsys.readouterr().err
    assert not (tmp_path / "x.png").exists()


def test_debug_log_level_dumps_masked_configuration(tmp_path: Path, monkeypatch, caplog) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "super-secret")
    service = _service()

    with patch("main.StudioService.from_config", return_value=service), patch("main.load_dotenv"):
        with caplog.at_level(logging.DEBUG, logger="idphoto.cli"):
            main.main(["--log-level", "DEBUG", "generate", "fox", "--out", str(tmp_path / "x.png")])

    assert '"api_key": "***"' in caplog.text
    assert "super-secret" not in caplog.text
