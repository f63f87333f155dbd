import asyncio
from pathlib import Path
from typing import BinaryIO

from app.core.config import Settings
from app.core.storage import ensure_storage_dirs


class UploadTooLarge(Exception):
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"file exceeds the upload limit of {limit} bytes")


def safe_filename(filename: str | None) -> str:
    """只保留文件名本身，丢弃客户端带来的目录部分。"""
    name = Path((filename or "").replace("\\", "/")).name
    if name in ("", ".", ".."):
        raise ValueError("uploaded file has no usable filename")
    return name


def _copy_limited(src: BinaryIO, dst: BinaryIO, limit: int) -> int:
    size = 0
    for chunk in iter(lambda: src.read(1024 * 1024), b""):
        size += len(chunk)
        if size > limit:
            raise UploadTooLarge(limit)
        dst.write(chunk)
    return size


def save_upload(file_obj: BinaryIO, filename: str, settings: Settings) -> tuple[str, int]:
    """写入 upload_dir/<filename>，同名文件直接覆盖。返回 (路径, 字节数)。"""
    ensure_storage_dirs(settings)
    target_path = Path(settings.upload_dir) / safe_filename(filename)
    file_obj.seek(0)
    f = target_path.open("wb")
    # 文件已创建：写入中途失败（超限或 I/O 错误）都删除残留
    try:
        with f:
            size = _copy_limited(file_obj, f, settings.max_upload_bytes)
    except Exception:
        target_path.unlink(missing_ok=True)
        raise
    return str(target_path), size


def uploaded_file_path(filename: str, settings: Settings) -> Path:
    path = Path(settings.upload_dir) / safe_filename(filename)
    if not path.is_file():
        raise FileNotFoundError(f"open {path}: no such file or directory")
    return path


def download_source_path(settings: Settings) -> Path:
    path = Path(settings.download_path)
    if not path.is_file():
        raise FileNotFoundError(f"open {path}: no such file or directory")
    return path


async def save_upload_async(file_obj: BinaryIO, filename: str, settings: Settings) -> tuple[str, int]:
    return await asyncio.to_thread(save_upload, file_obj, filename, settings)
