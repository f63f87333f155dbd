from pathlib import Path

from app.core.config import Settings


def ensure_storage_dirs(settings: Settings) -> None:
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
