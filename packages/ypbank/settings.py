"""Size ceilings for the codecs.

``CodecSettings`` is a strict pydantic model. Defaults can be overridden from
the environment via :func:`load_settings`:

- ``YPBANK_MAX_TEXT_BYTES``: ceiling for CSV/Text inputs (default 10 MiB).
- ``YPBANK_MAX_BINARY_BYTES``: cumulative ceiling for binary inputs
  (default 100 MiB).
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from .errors import SettingsError

DEFAULT_MAX_TEXT_BYTES: int = 10 * 1024 * 1024
DEFAULT_MAX_BINARY_BYTES: int = 100 * 1024 * 1024


class CodecSettings(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)

    max_text_bytes: int = DEFAULT_MAX_TEXT_BYTES
    max_binary_bytes: int = DEFAULT_MAX_BINARY_BYTES

    @field_validator("max_text_bytes", "max_binary_bytes")
    @classmethod
    def _positive(cls, v: int) -> int:
        if isinstance(v, bool) or v <= 0:
            raise ValueError("size limits must be positive integers")
        return v

    @model_validator(mode="after")
    def _binary_not_smaller(self) -> CodecSettings:
        if self.max_binary_bytes < self.max_text_bytes:
            raise ValueError("max_binary_bytes must be >= max_text_bytes")
        return self


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise SettingsError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings() -> CodecSettings:
    """Build settings from defaults plus any ``YPBANK_*`` environment overrides.

    Raises :class:`~ypbank.errors.SettingsError` for a non-integer value or for
    limits the model rejects.
    """

    overrides: dict[str, int] = {}
    text_limit = _env_int("YPBANK_MAX_TEXT_BYTES")
    if text_limit is not None:
        overrides["max_text_bytes"] = text_limit
    bin_limit = _env_int("YPBANK_MAX_BINARY_BYTES")
    if bin_limit is not None:
        overrides["max_binary_bytes"] = bin_limit
    try:
        return CodecSettings(**overrides)
    except ValidationError as exc:
        reasons = "; ".join(err["msg"] for err in exc.errors())
        raise SettingsError(f"size limits from the environment: {reasons}") from exc


__all__ = [
    "DEFAULT_MAX_BINARY_BYTES",
    "DEFAULT_MAX_TEXT_BYTES",
    "CodecSettings",
    "load_settings",
]
