#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Cartoon ID photo studio: describe a character, get an ID photo, refine it.

Commands:
- generate "<character description>" [--size passport|square|profile] --out photo.png
- refine photo.png "<instruction>" --out photo_v2.png
- serve [--host 0.0.0.0] [--port 3001]

Environment:
- GEMINI_API_KEY is read from the environment or a local .env file.
- IDPHOTO_EDIT_MODEL / IDPHOTO_IMAGE_MODEL / PORT override the config file.

Dependencies: google-genai, python-dotenv, PyYAML, fastapi, uvicorn
"""

import argparse
import base64
import json
import logging
import mimetypes
import sys
from pathlib import Path

from dotenv import load_dotenv

from idphoto_lab.config import StudioConfig, as_dict, load_config
from idphoto_lab.image.generation.errors import GenerationError, InvalidRequestError
from idphoto_lab.prompting import DEFAULT_SIZE, SIZE_PRESETS, aspect_ratio_for
from idphoto_lab.service import StudioService

logger = logging.getLogger("idphoto.cli")


def _load_config(path: str | None) -> StudioConfig:
    config = load_config(Path(path)) if path else StudioConfig()
    return config.with_environment()


def _write_image(out: Path, encoded: str) -> None:
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(base64.b64decode(encoded))
    logger.info("saved %s", out)


def cmd_generate(args: argparse.Namespace, service: StudioService) -> None:
    encoded = service.generate_from_text(
        args.description,
        aspect_ratio_for(args.size),
        apply_template=not args.raw_prompt,
    )
    _write_image(Path(args.out), encoded)


def cmd_refine(args: argparse.Namespace, service: StudioService) -> None:
    source = Path(args.image)
    mime_type = args.mime_type or mimetypes.guess_type(source.name)[0] or "image/png"
    encoded_source = base64.b64encode(source.read_bytes()).decode("ascii")
    encoded = service.refine_image(encoded_source, mime_type, args.instruction)
    _write_image(Path(args.out or source), encoded)


def cmd_serve(args: argparse.Namespace, config: StudioConfig) -> None:
    import uvicorn

    from idphoto_lab.api import create_app

    app = create_app(StudioService.from_config(config), config.server)
    uvicorn.run(
        app,
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        log_level=args.log_level.lower(),
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Cartoon ID photo generation and refinement.")
    ap.add_argument("--config", default=None, help="Path to a YAML or JSON(C) configuration file")
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Create a new ID photo from a character description")
    gen.add_argument("description")
    gen.add_argument("--size", default=DEFAULT_SIZE, choices=sorted(SIZE_PRESETS))
    gen.add_argument("--out", default="id_photo.png")
    gen.add_argument("--raw-prompt", action="store_true",
                     help="Send the description as-is instead of wrapping it in the ID photo brief")

    ref = sub.add_parser("refine", help="Modify an existing photo with a text instruction")
    ref.add_argument("image")
    ref.add_argument("instruction")
    ref.add_argument("--mime-type", default=None)
    ref.add_argument("--out", default=None, help="Output path (defaults to overwriting the input)")

    srv = sub.add_parser("serve", help="Run the HTTP API")
    srv.add_argument("--host", default=None)
    srv.add_argument("--port", type=int, default=None)
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s")
    load_dotenv()
    config = _load_config(args.config)
    logger.debug("configuration: %s", json.dumps(as_dict(config), sort_keys=True))

    if args.command == "serve":
        cmd_serve(args, config)
        return 0

    service = StudioService.from_config(config)
    try:
        if args.command == "generate":
            cmd_generate(args, service)
        else:
            cmd_refine(args, service)
    except (GenerationError, InvalidRequestError) as exc:
        logger.error("%s", exc)
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
