import json
import os
from dataclasses import dataclass, fields
from pathlib import Path

DEFAULT_CONFIG_PATH = os.getenv("CONFIG_PATH", "config.json")


class ConfigError(Exception):
    """config.json 缺失或内容无效，启动时直接终止。"""


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    # uvicorn worker 进程数，>1 时相当于 prefork
    workers: int = 1
    # keep-alive 空闲超时（秒）
    idle_timeout: int = 3
    upload_dir: str = "data/upload"
    # /download 返回的固定文件，以及下载时重命名后的文件名
    download_path: str = "data/download/contoh.txt"
    download_name: str = "contoh2.txt"
    public_dir: str = "public"
    view_dir: str = "view"
    max_upload_bytes: int = 10 * 1024 * 1024


_INT_FIELDS = {"port", "workers", "idle_timeout", "max_upload_bytes"}
# logging 与 uvicorn 都认可的级别
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def load_settings(path: str | Path = DEFAULT_CONFIG_PATH) -> Settings:
    """读取 config.json 的 app 段；host/port 必填，其余使用默认值。"""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"error cant load {path}: file not found") from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"error cant load {path}: {e}") from e

    section = raw.get("app") if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        raise ConfigError(f"error cant load {path}: missing 'app' section")
    for key in ("host", "port"):
        if key not in section:
            raise ConfigError(f"error cant load {path}: missing 'app.{key}'")

    known = {f.name for f in fields(Settings)}
    values = {}
    for key, value in section.items():
        if key not in known:
            continue
        if key in _INT_FIELDS:
            try:
                value = int(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"error cant load {path}: 'app.{key}' must be an integer") from e
        else:
            value = str(value)
        if key == "log_level":
            value = value.upper()
            if value not in _LOG_LEVELS:
                raise ConfigError(
                    f"error cant load {path}: 'app.log_level' must be one of {', '.join(sorted(_LOG_LEVELS))}"
                )
        values[key] = value
    return Settings(**values)
