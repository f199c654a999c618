"""
Connectivity tracking for the client and the offline-aware call wrapper.
"""
import logging

import requests

from leaddesk.client.api import ApiError

logger = logging.getLogger('client.network')


class NetworkStatus:
    """
    Two flags: `is_online` (local connectivity, set by the caller) and
    `is_server_online` (last result of probing GET /health).
    """

    def __init__(self, client=None, is_online=True):
        self.client = client
        self.is_online = is_online
        self.is_server_online = True

    def set_online(self, online):
        if online != self.is_online:
            logger.info("Network is now %s", 'online' if online else 'offline')
        self.is_online = online

    def check_server(self):
        """Probe the health endpoint. Returns the new is_server_online value."""
        if self.client is None:
            return self.is_server_online
        try:
            self.client.health()
            self.is_server_online = True
        except (ApiError, requests.RequestException) as e:
            logger.warning("Server health check failed: %s", e)
            self.is_server_online = False
        return self.is_server_online


def offline_aware(fn, status, on_offline=None, on_error=None):
    """
    Call `fn()` unless `status` says we are offline.

    Offline: calls on_offline() and returns None without calling fn.
    Failure: calls on_error(exc) and returns None.
    """
    if not status.is_online:
        if on_offline:
            on_offline()
        return None
    try:
        return fn()
    except Exception as e:
        logger.warning("Request failed: %s", e)
        if on_error:
            on_error(e)
        return None
