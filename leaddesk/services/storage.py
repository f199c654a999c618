"""
Object storage operations for the videos bucket: upload, download, delete, URLs.
"""
import json
import logging
import os
import random
import time

from botocore.exceptions import ClientError

from leaddesk.config import VIDEOS_BUCKET, STORAGE_PUBLIC_URL, STORAGE_ENDPOINT_URL
from leaddesk.extensions import storage_client

logger = logging.getLogger('services.storage')


class StorageError(RuntimeError):
    pass


def _client():
    if storage_client is None:
        raise StorageError("Storage client not available")
    return storage_client


def make_object_key(filename, now_ms=None, suffix=None):
    """`<epoch_ms>-<0..999>.<ext>`: the extension is taken from the upload's filename."""
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    suffix = random.randint(0, 999) if suffix is None else suffix
    ext = os.path.splitext(filename)[1].lstrip('.').lower() or 'bin'
    return f"{now_ms}-{suffix}.{ext}"


def public_url(key, bucket=VIDEOS_BUCKET):
    if STORAGE_PUBLIC_URL:
        return f"{STORAGE_PUBLIC_URL.rstrip('/')}/{key}"
    base = (STORAGE_ENDPOINT_URL or '').rstrip('/')
    return f"{base}/{bucket}/{key}"


def bucket_exists(bucket=VIDEOS_BUCKET):
    """True if the bucket is listed. Raises StorageError when listing itself fails."""
    try:
        response = _client().list_buckets()
    except ClientError as e:
        raise StorageError(f"Failed to list buckets: {e}") from e
    return any(b.get('Name') == bucket for b in response.get('Buckets', []))


def ensure_bucket(bucket=VIDEOS_BUCKET):
    """Create the bucket with a public-read policy. Returns True if it was created."""
    if bucket_exists(bucket):
        return False

    client = _client()
    try:
        client.create_bucket(Bucket=bucket)
        client.put_bucket_policy(Bucket=bucket, Policy=_public_read_policy(bucket))
    except ClientError as e:
        raise StorageError(f"Failed to create bucket {bucket}: {e}") from e
    logger.info("Created bucket %s", bucket)
    return True


def _public_read_policy(bucket):
    return json.dumps({
        'Version': '2012-10-17',
        'Statement': [{
            'Sid': 'PublicRead',
            'Effect': 'Allow',
            'Principal': '*',
            'Action': ['s3:GetObject'],
            'Resource': [f'arn:aws:s3:::{bucket}/*'],
        }],
    })


def upload_video(key, data, content_type, bucket=VIDEOS_BUCKET):
    try:
        _client().put_object(
            Bucket=bucket, Key=key,
            Body=data, ContentType=content_type,
            CacheControl='max-age=3600',
        )
    except ClientError as e:
        raise StorageError(f"Failed to upload {key}: {e}") from e
    logger.info("Uploaded video object %s (%d bytes)", key, len(data))


def delete_video(key, bucket=VIDEOS_BUCKET):
    try:
        _client().delete_object(Bucket=bucket, Key=key)
    except ClientError as e:
        raise StorageError(f"Failed to delete {key}: {e}") from e
    logger.info("Deleted video object %s", key)


def download_video(key, bucket=VIDEOS_BUCKET):
    """Return (body_bytes, content_type, size)."""
    try:
        obj = _client().get_object(Bucket=bucket, Key=key)
    except ClientError as e:
        raise StorageError(f"Failed to download {key}: {e}") from e
    body = obj['Body'].read()
    content_type = obj.get('ContentType') or 'application/octet-stream'
    return body, content_type, obj.get('ContentLength', len(body))
