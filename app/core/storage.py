"""Storage for quotation files: local upload directory, or S3 when S3_BUCKET_NAME is set."""

import logging
import re
import time
from pathlib import Path
from typing import Optional

from app.core.config import settings
from app.core.exceptions import AppException

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def quotation_file_name(original_filename: str, timestamp_ms: Optional[int] = None) -> str:
    """{epoch millis}-{name with whitespace runs replaced by '-'}; directory parts are dropped."""
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    name = Path(original_filename.replace("\\", "/")).name or "file"
    return f"{stamp}-{_WHITESPACE_RE.sub('-', name)}"


def check_upload_size(size: Optional[int]) -> None:
    """413 when size exceeds UPLOAD_MAX_BYTES. An unknown size (None) passes."""
    if size is not None and size > settings.UPLOAD_MAX_BYTES:
        AppException().raise_413(
            f"File too large. Maximum size is {settings.UPLOAD_MAX_BYTES // (1024 * 1024)} MB."
        )


def _get_s3_client():
    """Create S3 client. Only called when S3_BUCKET_NAME is set."""
    try:
        import boto3
        from botocore.config import Config
        config = Config(signature_version="s3v4", region_name=settings.AWS_REGION)
        kwargs = {"region_name": settings.AWS_REGION, "config": config}
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
            kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY
        return boto3.client("s3", **kwargs)
    except Exception as e:
        logger.exception("Failed to create S3 client: %s", e)
        AppException().raise_500("Storage is temporarily unavailable.")


def _save_to_s3(file_content: bytes, file_name: str, content_type: Optional[str]) -> str:
    key = f"{settings.S3_QUOTATION_PREFIX.strip('/')}/{file_name}"
    client = _get_s3_client()
    bucket = settings.S3_BUCKET_NAME
    try:
        client.put_object(
            Bucket=bucket,
            Key=key,
            Body=file_content,
            ContentType=content_type or "application/octet-stream",
        )
    except Exception as e:
        logger.exception("S3 upload failed: %s", e)
        AppException().raise_500("Error uploading file")
    return f"https://{bucket}.s3.{settings.AWS_REGION}.amazonaws.com/{key}"


def _save_to_disk(file_content: bytes, file_name: str) -> str:
    upload_dir = Path(settings.UPLOAD_DIR)
    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
        (upload_dir / file_name).write_bytes(file_content)
    except OSError as e:
        logger.exception("Writing upload %s failed: %s", file_name, e)
        AppException().raise_500("Error uploading file")
    return f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{file_name}"


def save_quotation_file(
    file_content: bytes,
    original_filename: str,
    content_type: Optional[str] = None,
) -> str:
    """
    Store a quotation file and return the path (or URL) to reference it by.

    Args:
        file_content: Raw file bytes.
        original_filename: Name the file was uploaded with.
        content_type: MIME type, passed through to S3.

    Returns:
        /uploads/quotations/<name> for local storage, or the public S3 URL.
    """
    check_upload_size(len(file_content))
    file_name = quotation_file_name(original_filename)
    if settings.S3_BUCKET_NAME:
        path = _save_to_s3(file_content, file_name, content_type)
    else:
        path = _save_to_disk(file_content, file_name)
    logger.info("Quotation file stored: %s (%s bytes)", path, len(file_content))
    return path
