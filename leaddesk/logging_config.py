"""
Structured logging configuration.

Called once from create_app(). Supports text (human-readable) and JSON formats
via LOG_FORMAT env var. LOG_LEVEL defaults to INFO.

Records emitted while handling a request carry the HTTP method, path and the
authenticated user id, so audit-relevant lines (lead/category mutations, MFA
failures, storage errors) can be traced back to who triggered them.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context, request


class RequestContextFilter(logging.Filter):
    """Stamp method / path / user_id onto records logged inside a request."""

    def filter(self, record):
        record.method = record.path = record.user_id = None
        if has_request_context():
            record.method = request.method
            record.path = request.path
            user = g.get('user')
            record.user_id = user.id if user is not None else None
        if record.method:
            who = f' user={record.user_id}' if record.user_id else ''
            record.request = f' [{record.method} {record.path}{who}]'
        else:
            record.request = ''
        return True


class JSONFormatter(logging.Formatter):
    """Single-line JSON log formatter for production log aggregators."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if getattr(record, 'method', None):
            entry['method'] = record.method
            entry['path'] = record.path
            entry['user_id'] = record.user_id
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry)


# Storage, Redis and HTTP client loggers are noisy at INFO
_NOISY_LOGGERS = [
    'urllib3',
    'botocore',
    'boto3',
    's3transfer',
    'redis',
    'werkzeug',
]


def configure_logging(app=None):
    """
    Set up root logger with format/level from env vars.

    Environment variables:
        LOG_LEVEL - Python log level name (default: INFO)
        LOG_FORMAT - "text" (default) or "json"
    """
    level_name = os.getenv('LOG_LEVEL', 'INFO').upper()
    level = getattr(logging, level_name, logging.INFO)

    log_format = os.getenv('LOG_FORMAT', 'text').lower()

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any existing handlers to avoid duplicates on re-init
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())

    if log_format == 'json':
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            '[%(asctime)s] %(levelname)s %(name)s%(request)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        ))

    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
