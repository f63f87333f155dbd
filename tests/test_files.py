"""Tests for multipart upload, file download and static files."""

from dataclasses import replace
from pathlib import Path

from fastapi.testclient import TestClient

from app.main import create_app
from app.services import storage_service

SAMPLE_CONTENT = b"test\noke\n"


class TestUpload:
    def test_upload_then_download_round_trip(self, client, settings):
        content = b"\x00\x01binary\r\ncontent\xff"
        response = client.post(
            "/upload-file",
            files={"file": ("sample.bin", content, "application/octet-stream")},
        )
        assert response.status_code == 200
        assert response.json()["message"] == "success upload file"
        assert (Path(settings.upload_dir) / "sample.bin").read_bytes() == content

        download = client.get("/download/sample.bin")
        assert download.status_code == 200
        assert download.content == content
        assert download.headers["content-disposition"] == 'attachment; filename="sample.bin"'

    def test_upload_overwrites_same_name(self, client, settings):
        client.post("/upload-file", files={"file": ("a.txt", b"first", "text/plain")})
        client.post("/upload-file", files={"file": ("a.txt", b"second", "text/plain")})
        assert (Path(settings.upload_dir) / "a.txt").read_bytes() == b"second"

    def test_upload_strips_directories(self, client, settings, tmp_path):
        response = client.post(
            "/upload-file",
            files={"file": ("../../evil.txt", b"x", "text/plain")},
        )
        assert response.status_code == 200
        assert (Path(settings.upload_dir) / "evil.txt").exists()
        assert not (tmp_path / "evil.txt").exists()

    def test_upload_write_failure_is_500(self, client, settings):
        upload_dir = Path(settings.upload_dir)
        upload_dir.rmdir()
        upload_dir.write_bytes(b"not a directory")
        response = client.post("/upload-file", files={"file": ("a.txt", b"x", "text/plain")})
        assert response.status_code == 500
        assert response.json()["status_code"] == 500

    def test_upload_write_failure_removes_partial_file(self, client, settings, monkeypatch):
        def failing_copy(src, dst, limit):
            dst.write(b"partial")
            raise OSError("no space left on device")

        monkeypatch.setattr(storage_service, "_copy_limited", failing_copy)
        response = client.post("/upload-file", files={"file": ("a.txt", b"content", "text/plain")})
        assert response.status_code == 500
        assert response.json()["message"] == "no space left on device"
        assert not (Path(settings.upload_dir) / "a.txt").exists()

    def test_upload_without_file_field(self, client):
        response = client.post("/upload-file", data={"other": "value"})
        assert response.status_code == 500
        assert response.json()["status_code"] == 500

    def test_upload_too_large(self, client, settings):
        response = client.post(
            "/upload-file",
            files={"file": ("big.bin", b"x" * 2048, "application/octet-stream")},
        )
        assert response.status_code == 413
        assert not (Path(settings.upload_dir) / "big.bin").exists()

    def test_download_unknown_upload(self, client):
        response = client.get("/download/missing.txt")
        assert response.status_code == 500
        assert "no such file" in response.json()["message"]


class TestDownload:
    def test_download_renames_file(self, client):
        response = client.get("/download")
        assert response.status_code == 200
        assert response.headers["content-disposition"] == 'attachment; filename="contoh2.txt"'
        assert response.content == SAMPLE_CONTENT

    def test_download_missing_source(self, settings, tmp_path):
        broken = replace(settings, download_path=str(tmp_path / "nope.txt"))
        with TestClient(create_app(broken)) as c:
            response = c.get("/download")
        assert response.status_code == 500
        assert response.json()["status_code"] == 500


class TestStatic:
    def test_static_file(self, client):
        response = client.get("/public/contoh.txt")
        assert response.status_code == 200
        assert response.content == SAMPLE_CONTENT

    def test_static_not_found_uses_error_envelope(self, client):
        response = client.get("/public/missing.txt")
        assert response.status_code == 500
        assert "Not Found" in response.json()["message"]
