"""
Loading and validation of InputSpider crawl settings.
Pydantic describes the schema; seeds come from the command line, a seed file
or a YAML/JSON config file.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Final, List, Mapping, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from input_spider.crawler.urls import canonicalize_seed
from input_spider.errors import ConfigurationError

__all__ = (
    "CONCURRENCY_LIMITS",
    "DEFAULT_CONCURRENCY_LEVEL",
    "SpiderConfig",
    "concurrency_limit",
    "split_seeds",
    "load_seed_file",
    "read_config_file",
    "build_config",
    "load_config",
)

#: concurrency level → maximum number of pages processed at once
CONCURRENCY_LIMITS: Final[Dict[int, int]] = {0: 1, 1: 5, 2: 10, 3: 20, 4: 50, 5: 100}
DEFAULT_CONCURRENCY_LEVEL: Final[int] = 3
_FALLBACK_LIMIT: Final[int] = 20


def concurrency_limit(level: int) -> int:
    """Worker slot count for *level*; unknown levels get 20."""
    return CONCURRENCY_LIMITS.get(level, _FALLBACK_LIMIT)


class SpiderConfig(BaseModel):
    """Settings for one crawl."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seeds: List[str] = Field(..., min_length=1, description="Absolute start URLs; their scheme+host form the scope.")
    concurrency: int = Field(DEFAULT_CONCURRENCY_LEVEL, description="Concurrency level 0-5.")
    timeout: Optional[float] = Field(10.0, gt=0, description="Per-request timeout (seconds), None disables it.")
    user_agent: str = Field("InputSpider/1.0", min_length=1, description="User-Agent header.")
    verify_tls: bool = Field(
        False,
        description="Validate TLS certificates. Off by default: targets are test hosts with self-signed certificates.",
    )

    @field_validator("seeds", mode="before")
    def _split_seed_string(cls, v: Any) -> Any:
        if isinstance(v, str):
            return split_seeds(v)
        return v

    @field_validator("seeds")
    def _canonical_seeds(cls, v: List[str]) -> List[str]:
        seeds = []
        for raw in v:
            try:
                seeds.append(canonicalize_seed(raw))
            except ConfigurationError as exc:
                raise ValueError(str(exc)) from exc
        return seeds

    @property
    def limit(self) -> int:
        return concurrency_limit(self.concurrency)


def split_seeds(value: str) -> List[str]:
    """Split a comma-separated seed list, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


def load_seed_file(path: Union[str, Path]) -> List[str]:
    """Read newline-separated seeds; blank lines and ``#`` comments are skipped."""
    p = Path(path).expanduser()
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to open the file: {p} ({exc.strerror or exc})") from exc
    return [
        line.strip()
        for line in text.splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Top level of the YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Top level of the JSON must be a mapping, got {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Read a YAML or JSON config file into a plain mapping."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise ConfigurationError(f"Config file not found: {path_obj}")

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ConfigurationError(f"Unsupported config format: {suffix}")


def build_config(data: Mapping[str, Any] | None = None, **overrides: Any) -> SpiderConfig:
    """
    Validate *data* merged with *overrides* (``None`` overrides are ignored).
    Any validation failure becomes a :class:`ConfigurationError`.
    """
    merged: Dict[str, Any] = dict(data or {})
    merged.update({k: v for k, v in overrides.items() if v is not None})
    if not merged.get("seeds"):
        raise ConfigurationError("At least one seed URL is required")
    try:
        return SpiderConfig(**merged)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


def load_config(path: Union[str, Path], **overrides: Any) -> SpiderConfig:
    """Read *path* (YAML/JSON) and return a validated :class:`SpiderConfig`."""
    return build_config(read_config_file(path), **overrides)
