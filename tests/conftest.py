"""Shared fixtures: settings rooted in tmp_path and a TestClient around create_app."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app

VIEW_DIR = Path(__file__).resolve().parent.parent / "view"
SAMPLE_CONTENT = b"test\noke\n"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    download = tmp_path / "download" / "contoh.txt"
    download.parent.mkdir()
    download.write_bytes(SAMPLE_CONTENT)

    public = tmp_path / "public"
    public.mkdir()
    (public / "contoh.txt").write_bytes(SAMPLE_CONTENT)

    return Settings(
        upload_dir=str(tmp_path / "upload"),
        download_path=str(download),
        download_name="contoh2.txt",
        public_dir=str(public),
        view_dir=str(VIEW_DIR),
        max_upload_bytes=1024,
    )


@pytest.fixture
def client(settings: Settings):
    with TestClient(create_app(settings)) as c:
        yield c
