"""Tests for object storage helpers (boto3 client is mocked)."""
import json
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from leaddesk.services import storage


def _error(op):
    return ClientError({'Error': {'Code': '403', 'Message': 'denied'}}, op)


class TestObjectKey:

    def test_format(self):
        assert storage.make_object_key('Clip.MOV', now_ms=1700000000000, suffix=42) == '1700000000000-42.mov'

    def test_missing_extension(self):
        assert storage.make_object_key('clip', now_ms=1, suffix=0) == '1-0.bin'

    def test_random_suffix_in_range(self):
        for _ in range(50):
            key = storage.make_object_key('a.mp4', now_ms=5)
            suffix = int(key.split('-')[1].split('.')[0])
            assert 0 <= suffix <= 999


class TestPublicUrl:

    def test_public_base_wins(self):
        with patch('leaddesk.services.storage.STORAGE_PUBLIC_URL', 'https://cdn.example.com/'):
            assert storage.public_url('k.mp4') == 'https://cdn.example.com/k.mp4'

    def test_endpoint_fallback(self):
        with patch('leaddesk.services.storage.STORAGE_PUBLIC_URL', ''), \
                patch('leaddesk.services.storage.STORAGE_ENDPOINT_URL', 'https://s3.example.com'):
            assert storage.public_url('k.mp4') == 'https://s3.example.com/videos/k.mp4'


class TestBucket:

    def test_exists(self, mock_storage):
        assert storage.bucket_exists() is True
        mock_storage.list_buckets.return_value = {'Buckets': [{'Name': 'other'}]}
        assert storage.bucket_exists() is False

    def test_listing_error_wrapped(self, mock_storage):
        mock_storage.list_buckets.side_effect = _error('ListBuckets')
        with pytest.raises(storage.StorageError):
            storage.bucket_exists()

    def test_ensure_creates_with_public_policy(self, mock_storage):
        mock_storage.list_buckets.return_value = {'Buckets': []}
        assert storage.ensure_bucket() is True
        policy = json.loads(mock_storage.put_bucket_policy.call_args.kwargs['Policy'])
        assert policy['Statement'][0]['Action'] == ['s3:GetObject']
        assert policy['Statement'][0]['Resource'] == ['arn:aws:s3:::videos/*']

    def test_no_client_configured(self):
        with patch('leaddesk.services.storage.storage_client', None):
            with pytest.raises(storage.StorageError):
                storage.bucket_exists()


class TestObjects:

    def test_download_returns_body_type_size(self, mock_storage):
        body = MagicMock()
        body.read.return_value = b'xyz'
        mock_storage.get_object.return_value = {'Body': body, 'ContentType': 'video/webm', 'ContentLength': 3}
        assert storage.download_video('k.webm') == (b'xyz', 'video/webm', 3)

    def test_delete_error_wrapped(self, mock_storage):
        mock_storage.delete_object.side_effect = _error('DeleteObject')
        with pytest.raises(storage.StorageError):
            storage.delete_video('k.mp4')
