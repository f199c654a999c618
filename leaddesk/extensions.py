"""
Shared client instances: Redis, object storage (boto3).

Lazily connected on first use so importing this module is always safe
(even when env vars are missing during tests).
"""
import logging
import redis
import boto3
from botocore.client import Config

from leaddesk.config import (
    REDIS_URL,
    STORAGE_ENDPOINT_URL, STORAGE_ACCESS_KEY_ID, STORAGE_SECRET_ACCESS_KEY,
    STORAGE_REGION,
)

logger = logging.getLogger('leaddesk.extensions')

# ── Redis ─────────────────────────────────────────────────────────────────────
redis_client = redis.from_url(REDIS_URL, decode_responses=True)

# ── Object storage (S3-compatible) ───────────────────────────────────────────
storage_client = None
if STORAGE_ACCESS_KEY_ID and STORAGE_SECRET_ACCESS_KEY:
    try:
        storage_client = boto3.client(
            's3',
            endpoint_url=STORAGE_ENDPOINT_URL,
            aws_access_key_id=STORAGE_ACCESS_KEY_ID,
            aws_secret_access_key=STORAGE_SECRET_ACCESS_KEY,
            config=Config(signature_version='s3v4'),
            region_name=STORAGE_REGION,
        )
        logger.info("Storage client initialized successfully")
    except Exception as e:
        logger.error("Error initializing storage client: %s", e)
else:
    logger.warning("Storage credentials not set: video endpoints will fail")
