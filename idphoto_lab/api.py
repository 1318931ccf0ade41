"""HTTP routes for the ID photo studio."""

from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from .config import ServerConfig
from .image.generation.errors import GenerationError, InvalidRequestError
from .service import StudioService

logger = logging.getLogger("idphoto.api")


class GenerateCartoonBody(BaseModel):
    prompt: Optional[str] = None
    aspectRatio: Optional[str] = None


class GenerateIdPhotoBody(BaseModel):
    base64ImageData: Optional[str] = None
    mimeType: Optional[str] = None
    prompt: Optional[str] = None


def _failure(exc: GenerationError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": exc.message, "kind": exc.kind.value},
    )


def _success(base64_image: str) -> JSONResponse:
    return JSONResponse(status_code=200, content={"success": True, "base64Image": base64_image})


async def _body_too_large(request: Request, limit: int) -> bool:
    """Check the declared length, or the buffered body when none is declared.

    Chunked uploads carry no Content-Length, so their body is read here;
    the route handler then receives the cached copy.
    """

    length = request.headers.get("content-length")
    if length is not None and length.isdigit():
        return int(length) > limit
    if request.method in {"GET", "HEAD", "OPTIONS"}:
        return False
    return len(await request.body()) > limit


def create_app(service: StudioService, server: ServerConfig | None = None) -> FastAPI:
    settings = server or ServerConfig()
    app = FastAPI(
        title="ID Photo Lab",
        description="Cartoon ID photo generation and refinement",
        version="0.1.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def limit_and_log(request: Request, call_next):
        started = time.perf_counter()
        if await _body_too_large(request, settings.max_body_bytes):
            response = JSONResponse(status_code=413, content={"error": "Request body is too large."})
        else:
            response = await call_next(request)
        logger.info(
            "%s %s -> %d (%.0fms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000.0,
        )
        return response

    @app.get("/", response_class=PlainTextResponse)
    def read_root() -> str:
        return "ID photo server is running."

    @app.post("/api/generate-cartoon")
    def generate_cartoon(body: GenerateCartoonBody) -> JSONResponse:
        if not body.prompt or not body.aspectRatio:
            return JSONResponse(status_code=400, content={"error": "A prompt and an aspect ratio are required."})
        try:
            result = service.generate_from_text(body.prompt, body.aspectRatio)
        except InvalidRequestError as exc:
            return JSONResponse(status_code=400, content={"error": str(exc)})
        except GenerationError as exc:
            return _failure(exc)
        return _success(result)

    @app.post("/api/generate-id-photo")
    def generate_id_photo(body: GenerateIdPhotoBody) -> JSONResponse:
        if not body.base64ImageData or not body.mimeType or not body.prompt:
            return JSONResponse(
                status_code=400,
                content={"error": "An image, its MIME type and a prompt are required."},
            )
        try:
            result = service.refine_image(body.base64ImageData, body.mimeType, body.prompt)
        except InvalidRequestError as exc:
            return JSONResponse(status_code=400, content={"error": str(exc)})
        except GenerationError as exc:
            return _failure(exc)
        return _success(result)

    return app


__all__ = ["GenerateCartoonBody", "GenerateIdPhotoBody", "create_app"]
