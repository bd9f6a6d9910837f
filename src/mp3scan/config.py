import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
MAX_PORT = 65535
DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _int_env(env: Mapping[str, str], name: str, default: int, minimum: int, maximum: Optional[int] = None) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise ValueError(f"{name} must be <= {maximum}, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        ``PORT`` wins over ``MP3SCAN_PORT`` so the service runs unchanged on
        hosts that hand out the port that way.
        """
        env = os.environ if environ is None else environ
        port_var = "PORT" if env.get("PORT") else "MP3SCAN_PORT"
        level = env.get("MP3SCAN_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        if level not in LOG_LEVELS:
            raise ValueError(f"MP3SCAN_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
        return cls(
            host=env.get("MP3SCAN_HOST", DEFAULT_HOST).strip() or DEFAULT_HOST,
            port=_int_env(env, port_var, DEFAULT_PORT, minimum=0, maximum=MAX_PORT),
            max_upload_bytes=_int_env(env, "MP3SCAN_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES, minimum=1),
            log_level=level,
        )
