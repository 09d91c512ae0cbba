"""
S3 Utilities — Client Init • Profile Image Upload • Profile Image Delete
========================================================================

Purpose
-------
Small helper module for storing user profile images in Amazon S3:
- Initialize an S3 client with Signature V4
- Upload an image under `PROFILE_IMAGE_FOLDER` and return its public URL
- Delete a previously uploaded image from its URL
- Store an UploadFile end to end (temp copy, upload, cleanup)

Configuration (from `jurisai.database.config.config.settings`)
--------------------------------------------------------------
- AWS_ACCESS_KEY       : Access key ID
- AWS_SECRET_KEY       : Secret access key
- REGION               : AWS region (e.g., "eu-west-3")
- BUCKET_NAME          : Target S3 bucket
- PROFILE_IMAGE_FOLDER : Key prefix for profile images

Notes
-----
- The default profile image (`DEFAULT_PROFILE_IMAGE`) is a frontend asset and is
  never uploaded nor deleted.
- Deleting an image that is not in the bucket is logged and ignored, so that a
  stale URL never blocks an account update or deletion.
"""

import logging
import uuid
from urllib.parse import urlparse
import boto3
import botocore.config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException, UploadFile
from jurisai.api.prompt_utilities import guess_ext, persist_upload, remove_upload
from jurisai.database.config.config import settings
from jurisai.database.entities.user import DEFAULT_PROFILE_IMAGE

logger = logging.getLogger(__name__)

IMAGE_MIMES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


def get_client():
    """
    Initialize and return a low-level S3 client configured for Signature V4.

    Uses:
        - settings.AWS_ACCESS_KEY
        - settings.AWS_SECRET_KEY
        - settings.REGION

    Returns:
        botocore.client.S3: An S3 client ready for object operations.
    """
    s3_client = boto3.client('s3',
                             aws_access_key_id=settings.AWS_ACCESS_KEY,
                             aws_secret_access_key=settings.AWS_SECRET_KEY,
                             region_name=settings.REGION,
                             config=botocore.config.Config(signature_version="s3v4"),)
    return s3_client


def public_url(key: str) -> str:
    """Public HTTPS URL of an object key in the configured bucket."""
    return f"https://{settings.BUCKET_NAME}.s3.{settings.REGION}.amazonaws.com/{key}"


def key_from_url(url: str) -> str | None:
    """
    Recover the object key from a URL built by `public_url`.

    Returns None for URLs that do not point at the configured bucket.
    """
    parsed = urlparse(url or "")
    if parsed.netloc != f"{settings.BUCKET_NAME}.s3.{settings.REGION}.amazonaws.com":
        return None
    return parsed.path.lstrip("/") or None


def upload_profile_image(file_path: str, ext: str, s3_client) -> str:
    """
    Upload a local image as a profile picture.

    Args:
        file_path (str): Local path to the image.
        ext (str): Lowercased extension including the dot (e.g. ".png").
        s3_client (botocore.client.S3): Client returned by `get_client()`.

    Returns:
        str: Public URL of the uploaded object.
    """
    key = f"{settings.PROFILE_IMAGE_FOLDER}/{uuid.uuid4().hex}{ext}"
    with open(file_path, "rb") as f:
        s3_client.upload_fileobj(
            f, settings.BUCKET_NAME, key,
            ExtraArgs={"ContentType": IMAGE_MIMES.get(ext, "application/octet-stream")}
        )
    return public_url(key)


def delete_profile_image(url: str | None, s3_client=None) -> bool:
    """
    Delete a profile image from the bucket.

    Args:
        url (str | None): URL stored on the user.
        s3_client (botocore.client.S3, optional): Existing client; one is created if omitted.

    Returns:
        bool: True if a delete request was sent.
    """
    if not url or url == DEFAULT_PROFILE_IMAGE:
        return False
    key = key_from_url(url)
    if key is None:
        logger.info("Profile image %s is not stored in the bucket; nothing to delete", url)
        return False
    client = s3_client or get_client()
    try:
        client.delete_object(Bucket=settings.BUCKET_NAME, Key=key)
        return True
    except (BotoCoreError, ClientError) as e:
        logger.warning("Could not delete profile image %s: %s", key, e)
        return False


def save_profile_image(f: UploadFile) -> str:
    """
    Store an uploaded profile image and return its public URL.

    The temporary copy written under `UPLOAD_DIR` is removed on every exit path.

    Raises:
        HTTPException: 400 if the file is not a supported image type.
    """
    ext = guess_ext(f.filename)
    if ext not in IMAGE_MIMES:
        raise HTTPException(status_code=400, detail=f"Unsupported image type: {ext or f.content_type}")
    rec = persist_upload(f, subdir="profiles")
    try:
        return upload_profile_image(rec.path, ext, get_client())
    finally:
        remove_upload(rec.path)
