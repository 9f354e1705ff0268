# R2(S3 호환) 객체 저장소 어댑터
import asyncio
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError

from coursework.services.file.file_service import ObjectStorage

logger = logging.getLogger(__name__)


class R2Storage(ObjectStorage):
    """boto3 S3 클라이언트를 사용하는 저장소. 블로킹 호출은 스레드에서 실행한다"""

    def __init__(
        self,
        endpoint: Optional[str],
        access_key: Optional[str],
        secret_key: Optional[str],
        bucket: str,
        public_base_url: str,
        client: Any = None
    ):
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self._s3 = client or boto3.client(
            "s3",
            endpoint_url=endpoint,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name="auto",
        )

    async def upload(self, key: str, content_type: str, data: bytes) -> str:
        await asyncio.to_thread(
            self._s3.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        return self.public_url(key)

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._s3.delete_object, Bucket=self.bucket, Key=key)
        except ClientError as e:
            code = (e.response.get("Error") or {}).get("Code")
            logger.warning(f"Failed to delete object {key}: {code}")
            raise

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"
