"""
In-memory lead list as the dashboard sees it.

Combines three sources of changes:
  - optimistic temp leads (`temp-<uuid>`) replaced once the server answers,
  - paged fetches appended by load_more(),
  - realtime change events from the SSE stream.

The same lead can arrive both as an HTTP response and as a realtime INSERT;
ids produced locally are remembered for a short window so the echo is dropped.
"""
import logging
import time
from datetime import datetime, timezone

from leaddesk.client.offline import new_temp_id
from leaddesk.config import REALTIME_DEDUP_SECONDS

logger = logging.getLogger('client.feed')

PENDING_NAME = 'Loading...'


class RecentIds:
    """Set of ids that expire `window` seconds after being added."""

    def __init__(self, window=REALTIME_DEDUP_SECONDS, clock=time.monotonic):
        self.window = window
        self._clock = clock
        self._added = {}

    def add(self, item_id):
        self._added[item_id] = self._clock()

    def _prune(self):
        cutoff = self._clock() - self.window
        for item_id in [i for i, ts in self._added.items() if ts <= cutoff]:
            del self._added[item_id]

    def __contains__(self, item_id):
        self._prune()
        return item_id in self._added

    def __len__(self):
        self._prune()
        return len(self._added)


class LeadFeed:

    def __init__(self, client=None, page_size=20, categories=None, recent=None):
        self.client = client
        self.page_size = page_size
        self.categories = {c['id']: c for c in (categories or [])}
        self.recent = recent if recent is not None else RecentIds()
        self.leads = []
        self.page = 0
        self.has_more = True

    @property
    def ids(self):
        return {lead['id'] for lead in self.leads}

    def _index(self, lead_id):
        for i, lead in enumerate(self.leads):
            if lead['id'] == lead_id:
                return i
        return None

    def _with_category(self, lead):
        category_id = lead.get('category_id')
        if lead.get('category') is None and category_id in self.categories:
            return {**lead, 'category': self.categories[category_id]}
        return lead

    # ── Optimistic creation ─────────────────────────────────────────────────

    def add_temp(self, twitter_url, category_id=None, temp_id=None):
        """Prepend a placeholder lead and return it."""
        now = datetime.now(timezone.utc).isoformat()
        temp = self._with_category({
            'id': temp_id or new_temp_id(),
            'name': PENDING_NAME,
            'twitter_handle': twitter_url.rstrip('/').split('/')[-1],
            'profile_image_url': None,
            'follower_count': 0,
            'last_post_date': now,
            'category_id': category_id,
            'created_at': now,
            'updated_at': now,
        })
        self.leads.insert(0, temp)
        return temp

    def confirm_temp(self, temp_id, lead):
        """Swap a placeholder for the server's lead and remember its id."""
        self.recent.add(lead['id'])
        lead = self._with_category(lead)
        index = self._index(temp_id)
        if index is None:
            if self._index(lead['id']) is None:
                self.leads.insert(0, lead)
            return lead
        self.leads[index] = lead
        return lead

    def fail_temp(self, temp_id):
        index = self._index(temp_id)
        if index is not None:
            del self.leads[index]

    def create_lead(self, twitter_url, category_id=None):
        """Optimistic import through the client. Re-raises after removing the placeholder."""
        temp = self.add_temp(twitter_url, category_id)
        try:
            lead = self.client.create_lead_with_twitter(twitter_url, category_id)
        except Exception:
            self.fail_temp(temp['id'])
            raise
        return self.confirm_temp(temp['id'], lead)

    # ── Realtime ────────────────────────────────────────────────────────────

    def apply_event(self, event):
        """Apply one change event. Returns True if the list changed."""
        event_type = event.get('eventType')

        if event_type == 'INSERT':
            lead = event.get('new') or {}
            lead_id = lead.get('id')
            if not lead_id:
                return False
            if lead_id in self.recent:
                logger.debug("Ignoring echo of locally created lead %s", lead_id)
                return False
            if lead_id in self.ids:
                logger.debug("Lead %s already displayed", lead_id)
                return False
            self.leads.insert(0, self._with_category(lead))
            return True

        if event_type == 'UPDATE':
            lead = event.get('new') or {}
            index = self._index(lead.get('id'))
            if index is None:
                return False
            self.leads[index] = self._with_category({**lead, 'category': None})
            return True

        if event_type == 'DELETE':
            index = self._index((event.get('old') or {}).get('id'))
            if index is None:
                return False
            del self.leads[index]
            return True

        logger.warning("Unknown event type %r", event_type)
        return False

    # ── Pagination ──────────────────────────────────────────────────────────

    def load_first_page(self):
        data = self.client.list_leads(page=0, limit=self.page_size)
        self.leads = [self._with_category(lead) for lead in data['leads']]
        self.page = 0
        self.has_more = bool(data['pagination'].get('hasMore'))
        return self.leads

    def load_more(self):
        """Fetch and append the next page. Returns the appended leads."""
        if not self.has_more:
            return []

        next_page = self.page + 1
        data = self.client.list_leads(page=next_page, limit=self.page_size)
        page_leads = data.get('leads') or []
        if not page_leads:
            self.has_more = False
            return []

        if not self.accepts_page(page_leads):
            logger.info("Page %d repeats the current boundary, stopping", next_page)
            self.has_more = False
            return []

        known = self.ids
        fresh = [self._with_category(lead) for lead in page_leads if lead['id'] not in known]
        self.leads.extend(fresh)
        self.page = next_page
        self.has_more = bool(data['pagination'].get('hasMore'))
        return fresh

    def accepts_page(self, page_leads):
        """A new page must start strictly older than the last lead already shown."""
        boundary = self.boundary
        first = page_leads[0].get('created_at')
        if boundary is None or first is None:
            return True
        return _parse_ts(first) < _parse_ts(boundary)

    @property
    def boundary(self):
        for lead in reversed(self.leads):
            if not str(lead['id']).startswith('temp-'):
                return lead.get('created_at')
        return None


def _parse_ts(value):
    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
