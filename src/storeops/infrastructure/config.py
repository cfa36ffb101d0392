"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path

from storeops.domain.exceptions import ValidationError
from storeops.domain.model.actor import Role

DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 15.0
DEFAULT_EXTENDED_TIMEOUT = 60.0
DEFAULT_CACHE_TTL = 300


class Settings:

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        env = os.environ if environ is None else environ

        self.api_url = env.get("STOREOPS_API_URL", DEFAULT_API_URL).rstrip("/")
        self.api_token = env.get("STOREOPS_API_TOKEN", "").strip() or None
        # Payload-heavy calls (sale creation) get the extended timeout.
        self.timeout = self._float(env, "STOREOPS_TIMEOUT", DEFAULT_TIMEOUT)
        self.extended_timeout = self._float(
            env, "STOREOPS_EXTENDED_TIMEOUT", DEFAULT_EXTENDED_TIMEOUT
        )
        self.cache_ttl = timedelta(
            seconds=self._float(env, "STOREOPS_CACHE_TTL", DEFAULT_CACHE_TTL)
        )
        self.username = env.get("STOREOPS_USER", "").strip() or "operator"
        self.role = self._role(env.get("STOREOPS_ROLE", Role.COLLABORATOR.value))
        self.data_dir = Path(
            env.get("STOREOPS_DATA_DIR", "").strip() or Path.home() / ".storeops"
        )

    @property
    def cart_path(self) -> Path:
        return self.data_dir / "cart.json"

    @staticmethod
    def _float(env: Mapping[str, str], name: str, default: float) -> float:
        raw = env.get(name, "").strip()
        if not raw:
            return float(default)
        try:
            value = float(raw)
        except ValueError as exc:
            raise ValidationError(f"{name} must be a number, got {raw!r}") from exc
        if value <= 0:
            raise ValidationError(f"{name} must be positive, got {raw!r}")
        return value

    @staticmethod
    def _role(raw: str) -> Role:
        try:
            return Role(raw.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(r.value for r in Role)
            raise ValidationError(f"STOREOPS_ROLE must be one of: {allowed}") from exc
