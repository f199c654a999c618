"""
Realtime change feed over Redis pub/sub.

Each mutation publishes a change event on `realtime:<table>`:

    {"eventType": "INSERT" | "UPDATE" | "DELETE", "table": "leads",
     "new": {...}, "old": {...}, "commit_timestamp": "..."}

Publishing is best-effort: a Redis outage is logged and the write that
triggered it still succeeds.
"""
import json
import logging
from datetime import datetime, timezone

from leaddesk.extensions import redis_client as r

logger = logging.getLogger('services.realtime')

EVENT_TYPES = ('INSERT', 'UPDATE', 'DELETE')


def channel_for(table):
    return f'realtime:{table}'


def build_event(table, event_type, new=None, old=None):
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown event type: {event_type}")
    return {
        'eventType': event_type,
        'table': table,
        'new': new or {},
        'old': old or {},
        'commit_timestamp': datetime.now(timezone.utc).isoformat(),
    }


def publish_change(table, event_type, new=None, old=None):
    """Publish a change event. Returns the number of receivers, or None on failure."""
    event = build_event(table, event_type, new=new, old=old)
    try:
        return r.publish(channel_for(table), json.dumps(event))
    except Exception as e:
        logger.warning("Failed to publish %s on %s: %s", event_type, table, e)
        return None


def listen(table, poll_timeout=1.0, idle_ticks=15):
    """
    Yield change events for `table` as dicts.

    Yields None after `idle_ticks` polls with no message so callers can
    emit keepalives. The subscription is closed when the generator is closed.
    """
    pubsub = r.pubsub(ignore_subscribe_messages=True)
    pubsub.subscribe(channel_for(table))
    idle = 0
    try:
        while True:
            message = pubsub.get_message(timeout=poll_timeout)
            if message is None:
                idle += 1
                if idle >= idle_ticks:
                    idle = 0
                    yield None
                continue
            idle = 0
            try:
                yield json.loads(message['data'])
            except (TypeError, ValueError):
                logger.warning("Dropping malformed change event on %s", table)
    finally:
        pubsub.close()
