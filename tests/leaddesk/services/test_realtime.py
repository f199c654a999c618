"""Tests for the Redis pub/sub change feed."""
import json
from unittest.mock import MagicMock

import pytest

from leaddesk.services import realtime


class TestBuildEvent:

    def test_shape(self):
        event = realtime.build_event('leads', 'UPDATE', new={'id': 'a'}, old={'id': 'a'})
        assert event['eventType'] == 'UPDATE'
        assert event['table'] == 'leads'
        assert event['new'] == {'id': 'a'}
        assert event['old'] == {'id': 'a'}
        assert event['commit_timestamp']

    def test_missing_sides_are_empty_dicts(self):
        event = realtime.build_event('leads', 'DELETE', old={'id': 'a'})
        assert event['new'] == {}

    def test_unknown_type_rejected(self):
        with pytest.raises(ValueError):
            realtime.build_event('leads', 'TRUNCATE')


class TestPublishChange:

    def test_publishes_json_on_table_channel(self, mock_redis):
        assert realtime.publish_change('leads', 'INSERT', new={'id': 'a'}) == 1
        channel, payload = mock_redis.publish.call_args.args
        assert channel == 'realtime:leads'
        assert json.loads(payload)['new'] == {'id': 'a'}

    def test_failure_returns_none(self, mock_redis):
        mock_redis.publish.side_effect = ConnectionError('down')
        assert realtime.publish_change('leads', 'INSERT', new={'id': 'a'}) is None


class TestListen:

    @pytest.fixture
    def pubsub(self, mock_redis):
        pubsub = MagicMock()
        mock_redis.pubsub.return_value = pubsub
        return pubsub

    def test_yields_decoded_events_and_keepalives(self, pubsub):
        event = {'eventType': 'INSERT', 'new': {'id': 'a'}}
        pubsub.get_message.side_effect = [
            {'data': json.dumps(event)},
            None,
            None,
            {'data': 'not json'},
            {'data': json.dumps(event)},
        ]

        stream = realtime.listen('leads', poll_timeout=0, idle_ticks=2)
        received = [next(stream), next(stream), next(stream)]
        stream.close()

        assert received == [event, None, event]
        pubsub.subscribe.assert_called_once_with('realtime:leads')
        pubsub.close.assert_called_once()
