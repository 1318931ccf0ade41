from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from . import jsonc

DEFAULT_EDIT_MODEL = "gemini-2.5-flash-image-preview"
DEFAULT_IMAGE_MODEL = "imagen-4.0-generate-001"
DEFAULT_BODY_LIMIT = 20 * 1024 * 1024


@dataclass
class ProviderConfig:
    api_key: str | None = None
    edit_model: str = DEFAULT_EDIT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "ProviderConfig":
        if not raw:
            return cls()
        api_key = raw.get("api_key")
        return cls(
            api_key=str(api_key) if api_key else None,
            edit_model=str(raw.get("edit_model", DEFAULT_EDIT_MODEL)),
            image_model=str(raw.get("image_model", DEFAULT_IMAGE_MODEL)),
        )


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 3001
    max_body_bytes: int = DEFAULT_BODY_LIMIT
    cors_origins: tuple[str, ...] = ("*",)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "ServerConfig":
        if not raw:
            return cls()
        origins = raw.get("cors_origins", ["*"])
        if isinstance(origins, str):
            origins = [origins]
        return cls(
            host=str(raw.get("host", "0.0.0.0")),
            port=int(raw.get("port", 3001)),
            max_body_bytes=int(raw.get("max_body_bytes", DEFAULT_BODY_LIMIT)),
            cors_origins=tuple(str(origin) for origin in origins),
        )


@dataclass
class StudioConfig:
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StudioConfig":
        return cls(
            provider=ProviderConfig.from_mapping(data.get("provider")),
            server=ServerConfig.from_mapping(data.get("server")),
        )

    def with_environment(self, environ: Mapping[str, str] | None = None) -> "StudioConfig":
        """Return a copy with ``GEMINI_API_KEY`` / ``IDPHOTO_*`` / ``PORT`` applied."""

        env = os.environ if environ is None else environ
        provider = self.provider
        api_key = env.get("GEMINI_API_KEY")
        if api_key:
            provider = replace(provider, api_key=api_key)
        if env.get("IDPHOTO_EDIT_MODEL"):
            provider = replace(provider, edit_model=env["IDPHOTO_EDIT_MODEL"])
        if env.get("IDPHOTO_IMAGE_MODEL"):
            provider = replace(provider, image_model=env["IDPHOTO_IMAGE_MODEL"])

        server = self.server
        port = env.get("PORT")
        if port:
            try:
                server = replace(server, port=int(port))
            except ValueError as exc:
                raise ValueError(f"PORT must be an integer, got {port!r}") from exc
        return replace(self, provider=provider, server=server)


def load_config(path: Path) -> StudioConfig:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix in {".json", ".jsonc"}:
        data = jsonc.loads(text)
    else:
        data = yaml.safe_load(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping at the top level")
    return StudioConfig.from_dict(data)


def as_dict(config: StudioConfig) -> Dict[str, Any]:
    """Serialisable view of the configuration with the API key masked."""

    return {
        "provider": {
            "api_key": "***" if config.provider.api_key else None,
            "edit_model": config.provider.edit_model,
            "image_model": config.provider.image_model,
        },
        "server": {
            "host": config.server.host,
            "port": config.server.port,
            "max_body_bytes": config.server.max_body_bytes,
            "cors_origins": list(config.server.cors_origins),
        },
    }


__all__ = ["ProviderConfig", "ServerConfig", "StudioConfig", "as_dict", "load_config"]
