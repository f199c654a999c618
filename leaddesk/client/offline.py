"""
Durable queue of lead imports captured while offline.

Stored as a JSON array of {twitter_url, category_id, timestamp, temp_id}
so it survives restarts, and replayed in order once the network is back.
"""
import json
import logging
import os
import time
import uuid

import requests

from leaddesk.client.api import ApiError

logger = logging.getLogger('client.offline')


def new_temp_id():
    return f'temp-{uuid.uuid4()}'


class OfflineLeadQueue:

    def __init__(self, path):
        self.path = path

    def load(self):
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, encoding='utf-8') as f:
                entries = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Unreadable offline queue %s: %s", self.path, e)
            return []
        return entries if isinstance(entries, list) else []

    def save(self, entries):
        tmp_path = f'{self.path}.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(entries, f)
        os.replace(tmp_path, self.path)

    def enqueue(self, twitter_url, category_id=None, temp_id=None):
        entry = {
            'twitter_url': twitter_url,
            'category_id': category_id,
            'timestamp': int(time.time() * 1000),
            'temp_id': temp_id or new_temp_id(),
        }
        entries = self.load()
        entries.append(entry)
        self.save(entries)
        logger.info("Lead saved offline: %s", twitter_url)
        return entry

    def __len__(self):
        return len(self.load())

    def replay(self, client, on_synced=None):
        """
        Send queued imports in order. Successful entries are dropped, failed
        ones stay for the next replay.

        The queue file is rewritten after every success, so an interrupted
        replay never resends a lead that already reached the server.
        on_synced(entry, lead) is called for each success.
        Returns (synced_count, remaining_entries).
        """
        entries = self.load()
        if not entries:
            return 0, []

        logger.info("Processing %d offline leads", len(entries))
        failed = []
        synced = 0
        for index, entry in enumerate(entries):
            try:
                lead = client.create_lead_with_twitter(entry['twitter_url'], entry.get('category_id'))
            except (ApiError, requests.RequestException) as e:
                logger.error("Failed to sync offline lead %s: %s", entry.get('twitter_url'), e)
                failed.append(entry)
                continue
            synced += 1
            self.save(failed + entries[index + 1:])
            if on_synced:
                on_synced(entry, lead)

        self.save(failed)
        if not failed:
            logger.info("All offline leads synced")
        return synced, failed
