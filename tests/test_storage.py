import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from coursework.services.file.file_service import LocalFileStorage
from coursework.services.file.r2_storage import R2Storage


class TestLocalFileStorage:
    async def test_upload_and_delete(self, tmp_path):
        storage = LocalFileStorage(tmp_path, "http://localhost:8000/files/")

        url = await storage.upload("activity-submissions/x.png", "image/png", b"data")

        assert url == "http://localhost:8000/files/activity-submissions/x.png"
        assert (tmp_path / "activity-submissions" / "x.png").read_bytes() == b"data"

        await storage.delete("activity-submissions/x.png")
        assert not (tmp_path / "activity-submissions" / "x.png").exists()

    async def test_delete_missing_file_is_noop(self, tmp_path):
        storage = LocalFileStorage(tmp_path, "http://localhost:8000/files")
        await storage.delete("activity-submissions/missing.png")

    async def test_rejects_keys_outside_upload_dir(self, tmp_path):
        storage = LocalFileStorage(tmp_path / "uploads", "http://localhost:8000/files")

        with pytest.raises(ValueError):
            await storage.upload("../escape.png", "image/png", b"data")


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        endpoint_url="https://account.r2.example.com",
        aws_access_key_id="test",
        aws_secret_access_key="test",
        region_name="auto",
    )


class TestR2Storage:
    async def test_upload_puts_object(self, s3_client):
        storage = R2Storage(None, None, None, "coursework", "https://cdn.example.com/", client=s3_client)

        with Stubber(s3_client) as stubber:
            stubber.add_response(
                "put_object",
                {},
                {"Bucket": "coursework", "Key": "activity-submissions/a.pdf", "Body": b"%PDF", "ContentType": "application/pdf"},
            )
            url = await storage.upload("activity-submissions/a.pdf", "application/pdf", b"%PDF")
            stubber.assert_no_pending_responses()

        assert url == "https://cdn.example.com/activity-submissions/a.pdf"

    async def test_delete_error_is_raised(self, s3_client):
        storage = R2Storage(None, None, None, "coursework", "https://cdn.example.com", client=s3_client)

        with Stubber(s3_client) as stubber:
            stubber.add_client_error("delete_object", service_error_code="AccessDenied", http_status_code=403)
            with pytest.raises(ClientError):
                await storage.delete("activity-submissions/a.pdf")
