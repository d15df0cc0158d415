from __future__ import annotations

# todont/config.py
import os
from dataclasses import dataclass

import yaml

# 配置解析顺序：
# 1) 环境变量（最高优先级）
# 2) TODONT_CONFIG 指向的 yaml，否则项目根 config.yaml
# 3) 默认值
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))

DEFAULTS = {
    "database_url": "sqlite://default.db",
    "host": "0.0.0.0",
    "port": "3000",
    "env": "DEV",
    "max_connections": "5",
    "pool_timeout": "30",
}

_ENV_KEYS = {
    "database_url": "DATABASE_URL",
    "host": "HOST",
    "port": "PORT",
    "env": "ENV",
    "max_connections": "DB_MAX_CONNECTIONS",
    "pool_timeout": "DB_POOL_TIMEOUT",
    "log_level": "LOG_LEVEL",
}


@dataclass(frozen=True)
class Settings:
    database_url: str
    host: str
    port: int
    env: str
    max_connections: int
    pool_timeout: float
    log_level: str

    @property
    def db_path(self) -> str:
        return sqlite_path_from_url(self.database_url)


def _config_path() -> str:
    return os.environ.get("TODONT_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")


def _read_config_yaml() -> dict:
    cfg_path = _config_path()
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(cfg, dict):
        return {}
    out = {}
    for k in _ENV_KEYS:
        v = cfg.get(k)
        if v is not None and str(v).strip():
            out[k] = str(v).strip()
    return out


def load_settings() -> Settings:
    cfg = _read_config_yaml()

    def pick(key: str) -> str | None:
        env_val = os.environ.get(_ENV_KEYS[key])
        if env_val:
            return env_val
        return cfg.get(key, DEFAULTS.get(key))

    env = pick("env") or DEFAULTS["env"]
    log_level = pick("log_level") or ("DEBUG" if env.upper() == "DEV" else "INFO")
    return Settings(
        database_url=pick("database_url"),
        host=pick("host"),
        port=int(pick("port")),
        env=env,
        max_connections=int(pick("max_connections")),
        pool_timeout=float(pick("pool_timeout")),
        log_level=log_level.upper(),
    )


def sqlite_path_from_url(url: str) -> str:
    """
    sqlite://default.db      -> default.db
    sqlite:///var/db/app.db  -> /var/db/app.db
    sqlite:app.db?mode=rwc   -> app.db
    其它字符串按文件路径原样返回。
    """
    path = url.split("?", 1)[0]
    if path.startswith("sqlite:"):
        path = path[len("sqlite:"):]
        if path.startswith("//"):
            path = path[2:]
    if not path or path == ":memory:":
        raise ValueError(f"unsupported database url: {url!r}")
    return path
