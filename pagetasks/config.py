from __future__ import annotations

import os
from dataclasses import dataclass

BROWSER_MODES = ("attach", "headless", "headed", "proxy")
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class Settings:
    cdp_host: str = "127.0.0.1"
    cdp_port: int = 9222
    task_timeout: float = 60.0
    time_unit_seconds: float = 1.0
    command_timeout: float = 30.0
    browser_mode: str = "attach"
    proxy_server: str | None = None
    user_data_dir: str | None = None
    chrome_path: str | None = None
    verbose: bool = False

    @classmethod
    def from_env(cls) -> Settings:
        mode = os.getenv("BROWSER_MODE", "attach").strip().lower()
        if mode not in BROWSER_MODES:
            raise ValueError(f"BROWSER_MODE must be one of {', '.join(BROWSER_MODES)}, got {mode!r}")
        proxy = os.getenv("PROXY_SERVER", "").strip() or None
        if mode == "proxy" and not proxy:
            raise ValueError("BROWSER_MODE=proxy requires PROXY_SERVER")
        return cls(
            cdp_host=os.getenv("CDP_HOST", "127.0.0.1").strip(),
            cdp_port=int(_number("CDP_PORT", "9222", int)),
            task_timeout=_number("TASK_TIMEOUT", "60", float),
            time_unit_seconds=_number("TIME_UNIT_SECONDS", "1.0", float),
            command_timeout=_number("CDP_COMMAND_TIMEOUT", "30", float),
            browser_mode=mode,
            proxy_server=proxy,
            user_data_dir=os.getenv("USER_DATA_DIR", "").strip() or None,
            chrome_path=os.getenv("CHROME_PATH", "").strip().strip('"') or None,
            verbose=os.getenv("VERBOSE", "0").lower() in _TRUTHY,
        )


def _number(name: str, default: str, kind: type) -> float:
    raw = os.getenv(name, default).strip()
    try:
        value = kind(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value
