from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


def _optional_int(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    return int(raw)


@dataclass
class Settings:
    app_name: str
    log_level: str
    debounce_ms: int
    origin_window_ms: int
    faker_locale: str
    faker_seed: Optional[int]
    sync_poll_seconds: float

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @property
    def origin_window_seconds(self) -> float:
        return self.origin_window_ms / 1000.0

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            app_name=os.getenv("MOCK_DESIGNER_APP_NAME", "json-mock-designer"),
            log_level=os.getenv("MOCK_DESIGNER_LOG_LEVEL", "INFO").upper(),
            debounce_ms=int(os.getenv("MOCK_DESIGNER_DEBOUNCE_MS", "300")),
            origin_window_ms=int(os.getenv("MOCK_DESIGNER_ORIGIN_WINDOW_MS", "50")),
            faker_locale=os.getenv("MOCK_DESIGNER_FAKER_LOCALE", "en_US"),
            faker_seed=_optional_int(os.getenv("MOCK_DESIGNER_FAKER_SEED")),
            sync_poll_seconds=float(os.getenv("MOCK_DESIGNER_SYNC_POLL_SECONDS", "0.5")),
        )
