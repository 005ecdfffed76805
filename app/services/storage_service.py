"""스토리지 서비스 — S3 또는 로컬 파일 저장.

Storage Service — S3 upload or local file storage for avatars and cover images.
AWS 키가 비어있으면 자동으로 로컬 모드로 전환됩니다.
(Falls back to local disk when AWS keys are not configured.)
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from app.config import settings

# 서버 루트 — 로컬 업로드 기본 위치 계산용 (Project root for the default uploads dir)
_SERVER_ROOT: Path = Path(__file__).resolve().parent.parent.parent


class StorageError(Exception):
    """업로드 실패 예외 (Raised when a file cannot be stored)."""


@dataclass(frozen=True)
class MediaFile:
    """업로드된 파일 내용 (An uploaded file read into memory)."""

    filename: str
    content_type: str
    data: bytes


class StorageService:
    """파일 업로드 서비스 — S3 또는 로컬 모드 자동 선택."""

    def __init__(self) -> None:
        self._client = None

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def uploads_dir(self) -> Path:
        return Path(settings.LOCAL_UPLOADS_DIR) if settings.LOCAL_UPLOADS_DIR else _SERVER_ROOT / "uploads"

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    def _generate_key(self, filename: str, folder: str) -> str:
        ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        date_prefix = datetime.now(timezone.utc).strftime("%Y/%m/%d")
        return f"{folder}/{date_prefix}/{uuid.uuid4().hex}.{ext}"

    def upload(self, file: MediaFile, folder: str) -> str:
        """파일을 저장하고 공개 URL을 반환합니다.

        Store the file and return its public URL.

        Args:
            file: 업로드된 파일 (Uploaded file; its name decides the extension)
            folder: 저장 폴더 (Target folder, e.g. "avatars")

        Returns:
            str: 저장된 파일 URL (URL of the stored file)

        Raises:
            StorageError: 빈 파일이거나 저장 실패 시 (Empty file or write failure)
        """
        if not file.data:
            raise StorageError("Uploaded file is empty")

        key = self._generate_key(file.filename, folder)

        if self.is_local:
            path = self.uploads_dir / key
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(file.data)
            except OSError as exc:
                raise StorageError(f"Could not write {key}") from exc
            return f"{settings.PUBLIC_BASE_URL}/uploads/{key}"

        from botocore.exceptions import BotoCoreError, ClientError

        try:
            self.client.put_object(
                Bucket=settings.AWS_S3_BUCKET,
                Key=key,
                Body=file.data,
                ContentType=file.content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Could not upload {key}") from exc
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/{key}"


storage_service = StorageService()
