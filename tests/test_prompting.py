from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from idphoto_lab.prompting import (
    SIZE_PRESETS,
    aspect_ratio_for,
    build_generate_images_config,
    build_refinement_config,
    build_refinement_contents,
    compose_id_photo_prompt,
    is_supported_aspect_ratio,
)


def test_compose_id_photo_prompt_embeds_description() -> None:
    prompt = compose_id_photo_prompt("  a tired wizard in the style of Naruto ")

    assert '"a tired wizard in the style of Naruto"' in prompt
    assert "{user_prompt}" not in prompt
    assert "head-and-shoulders" in prompt


def test_compose_id_photo_prompt_rejects_empty() -> None:
    with pytest.raises(ValueError):
        compose_id_photo_prompt("   ")


def test_size_presets_map_to_supported_ratios() -> None:
    assert aspect_ratio_for("passport") == "3:4"
    assert aspect_ratio_for("Square") == "1:1"
    assert aspect_ratio_for("profile") == "9:16"
    assert all(is_supported_aspect_ratio(ratio) for ratio in SIZE_PRESETS.values())
    with pytest.raises(ValueError):
        aspect_ratio_for("poster")


def test_provider_request_builders() -> None:
    config = build_generate_images_config("1:1")
    assert config.number_of_images == 1
    assert config.output_mime_type == "image/png"

    parts = build_refinement_contents(b"img", "image/png", "smile")
    assert parts[0].inline_data.data == b"img"
    assert parts[1].text == "smile"

    modalities = build_refinement_config().response_modalities
    assert [str(getattr(m, "value", m)) for m in modalities] == ["IMAGE", "TEXT"]
