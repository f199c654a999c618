"""Tests for logging setup (text / JSON output, levels, third-party noise)."""
import json
import logging
import os
from unittest.mock import patch

import pytest
from flask import g

from leaddesk.auth import CurrentUser
from leaddesk.logging_config import configure_logging, JSONFormatter


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    saved_level = root.level
    saved_handlers = root.handlers[:]
    yield
    root.setLevel(saved_level)
    root.handlers = saved_handlers


def _configure(**env):
    with patch.dict(os.environ, env, clear=False):
        for key in ('LOG_LEVEL', 'LOG_FORMAT'):
            if key not in env:
                os.environ.pop(key, None)
        configure_logging()


class TestConfigureLogging:

    def test_defaults_to_info(self):
        _configure()
        assert logging.getLogger().level == logging.INFO

    @pytest.mark.parametrize('value,expected', [
        ('DEBUG', logging.DEBUG),
        ('warning', logging.WARNING),
        ('bogus', logging.INFO),
    ])
    def test_level_from_env(self, value, expected):
        _configure(LOG_LEVEL=value)
        assert logging.getLogger().level == expected

    def test_text_lines_carry_logger_name_and_level(self, capsys):
        _configure(LOG_FORMAT='text')
        logging.getLogger('routes.leads').warning("page %d out of range", 7)
        err = capsys.readouterr().err
        assert 'routes.leads' in err
        assert 'WARNING' in err
        assert 'page 7 out of range' in err

    def test_json_lines_are_parseable(self, capsys):
        _configure(LOG_FORMAT='json')
        logging.getLogger('services.storage').info("uploaded %s", 'a.mp4')
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed['logger'] == 'services.storage'
        assert parsed['level'] == 'INFO'
        assert parsed['message'] == 'uploaded a.mp4'
        assert parsed['timestamp'].endswith('+00:00')

    def test_json_includes_traceback(self, capsys):
        _configure(LOG_FORMAT='json')
        try:
            raise RuntimeError("bucket gone")
        except RuntimeError:
            logging.getLogger('routes.videos').error("listing failed", exc_info=True)
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed['level'] == 'ERROR'
        assert 'RuntimeError: bucket gone' in parsed['exception']

    def test_client_library_loggers_pinned_to_warning(self):
        _configure(LOG_LEVEL='DEBUG')
        for name in ('urllib3', 'botocore', 'boto3', 's3transfer', 'redis'):
            assert logging.getLogger(name).level == logging.WARNING

    def test_repeated_calls_keep_one_handler(self):
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1


class TestJSONFormatter:

    def test_interpolates_args(self):
        record = logging.LogRecord(
            name='services.mfa', level=logging.INFO, pathname='', lineno=0,
            msg='verified factor %s', args=('f-1',), exc_info=None,
        )
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed == {
            'timestamp': parsed['timestamp'],
            'level': 'INFO',
            'logger': 'services.mfa',
            'message': 'verified factor f-1',
        }


class TestRequestContext:

    def test_json_carries_request_and_user(self, app, capsys):
        _configure(LOG_FORMAT='json')
        with app.test_request_context('/api/leads/abc', method='DELETE'):
            g.user = CurrentUser(id='u-42')
            logging.getLogger('routes.leads').info("deleted lead")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed['method'] == 'DELETE'
        assert parsed['path'] == '/api/leads/abc'
        assert parsed['user_id'] == 'u-42'

    def test_text_prefix_inside_request(self, app, capsys):
        _configure(LOG_FORMAT='text')
        with app.test_request_context('/api/categories', method='POST'):
            g.user = CurrentUser(id='u-42')
            logging.getLogger('routes.categories').info("created")
        assert 'routes.categories [POST /api/categories user=u-42]: created' in capsys.readouterr().err

    def test_no_request_fields_outside_request(self, capsys):
        _configure(LOG_FORMAT='json')
        logging.getLogger('services.generator').info("batch done")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert 'method' not in parsed
        assert 'user_id' not in parsed

    def test_anonymous_request_has_null_user(self, app, capsys):
        _configure(LOG_FORMAT='json')
        with app.test_request_context('/health'):
            logging.getLogger('routes.health').info("probe")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed['path'] == '/health'
        assert parsed['user_id'] is None
