import os
from dataclasses import dataclass, replace
from typing import Optional

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class Config:
    app: str = "winevt"
    send_url: Optional[str] = None
    duration: int = 60          # seconds between polls
    event_ids: str = ""         # comma separated allow-list, empty = all
    encoding: str = "gbk"       # console code page of the host
    strict: bool = False
    timeout: int = 10           # sink HTTP timeout


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be true or false, got {raw!r}")


def load_config(dotenv_path: Optional[str] = None, **overrides) -> Config:
    """
    Read settings from the environment (and a .env file, if present).

    Keyword overrides that are not None win over the environment.
    """
    load_dotenv(dotenv_path)

    cfg = Config(
        app=os.getenv("WINEVT_APP") or Config.app,
        send_url=os.getenv("WINEVT_SEND_URL") or None,
        duration=_int_env("WINEVT_DURATION", Config.duration),
        event_ids=os.getenv("WINEVT_IDS", ""),
        encoding=os.getenv("WINEVT_ENCODING") or Config.encoding,
        strict=_bool_env("WINEVT_STRICT", Config.strict),
        timeout=_int_env("WINEVT_TIMEOUT", Config.timeout),
    )

    changes = {k: v for k, v in overrides.items() if v is not None}
    if changes:
        cfg = replace(cfg, **changes)

    if cfg.duration <= 0:
        raise ConfigError(f"duration must be positive, got {cfg.duration}")

    return cfg
