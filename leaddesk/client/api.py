"""
HTTP client for the LeadDesk API.

Thin wrapper over a requests.Session: every method returns the decoded JSON
body, and any non-2xx response raises ApiError with the server's `error` text.
"""
import json
import logging
from typing import Any, Dict, Iterator, Optional

import requests

logger = logging.getLogger('client.api')


class ApiError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class LeadDeskClient:
    """requests-based client. `token` is sent as a Bearer header when set."""

    def __init__(self, base_url: str, token: Optional[str] = None,
                 timeout: float = 15, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self._session = session or requests.Session()

    # ── Plumbing ─────────────────────────────────────────────────────────────

    def _headers(self) -> Dict[str, str]:
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def _request(self, method: str, path: str, raw: bool = False, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        kwargs.setdefault('timeout', self.timeout)
        response = self._session.request(method, url, headers=self._headers(), **kwargs)
        logger.debug("%s %s -> %d", method, path, response.status_code)

        if not response.ok:
            raise ApiError(response.status_code, _error_message(response))
        if raw:
            return response
        return response.json()

    # ── Health ───────────────────────────────────────────────────────────────

    def health(self) -> Dict:
        return self._request('GET', '/health')

    # ── Categories ───────────────────────────────────────────────────────────

    def list_categories(self):
        return self._request('GET', '/api/categories')['categories']

    def create_category(self, name: str, color: str):
        return self._request('POST', '/api/categories', json={'name': name, 'color': color})['category']

    def update_category(self, category_id: str, **fields):
        return self._request('PATCH', f'/api/categories/{category_id}', json=fields)['category']

    def delete_category(self, category_id: str):
        return self._request('DELETE', f'/api/categories/{category_id}')

    def category_chart(self):
        return self._request('GET', '/api/chart/categories')['chartData']

    # ── Leads ────────────────────────────────────────────────────────────────

    def list_leads(self, page: int = 0, limit: int = 20) -> Dict:
        """Returns the full `{leads, pagination}` body."""
        return self._request('GET', '/api/leads', params={'page': page, 'limit': limit})

    def create_lead(self, **fields):
        return self._request('POST', '/api/leads', json=fields)['lead']

    def create_lead_with_twitter(self, twitter_url: str, category_id: Optional[str] = None):
        body = {'twitter_url': twitter_url, 'category_id': category_id}
        return self._request('POST', '/api/leads/create-with-twitter', json=body)['lead']

    def update_lead_category(self, lead_id: str, category_id: Optional[str]):
        return self._request('PATCH', f'/api/leads/{lead_id}', json={'category_id': category_id})['lead']

    def delete_lead(self, lead_id: str):
        return self._request('DELETE', f'/api/leads/{lead_id}')

    def stream_lead_events(self) -> Iterator[Dict]:
        """Yield change events from the SSE feed until the server closes it."""
        response = self._request('GET', '/api/leads/stream', raw=True, stream=True, timeout=None)
        try:
            for line in response.iter_lines(decode_unicode=True):
                if line and line.startswith('data: '):
                    yield json.loads(line[len('data: '):])
        finally:
            response.close()

    # ── Videos ───────────────────────────────────────────────────────────────

    def list_videos(self):
        return self._request('GET', '/api/videos')['videos']

    def upload_video(self, fileobj, filename: str, mime_type: str,
                     category_id: Optional[str] = None, title: Optional[str] = None,
                     description: Optional[str] = None):
        form = {k: v for k, v in (('category_id', category_id), ('title', title),
                                  ('description', description)) if v}
        files = {'file': (filename, fileobj, mime_type)}
        return self._request('POST', '/api/videos', data=form, files=files)['video']

    def update_video(self, video_id: str, **fields):
        return self._request('PATCH', f'/api/videos/{video_id}', json=fields)['video']

    def delete_video(self, video_id: str):
        return self._request('DELETE', f'/api/videos/{video_id}')

    def download_video(self, path: str, filename: Optional[str] = None) -> bytes:
        params = {'path': path}
        if filename:
            params['filename'] = filename
        return self._request('GET', '/api/videos/download', raw=True, params=params).content

    def setup_videos(self):
        return self._request('GET', '/api/videos/setup')

    # ── Activity logs / roles ────────────────────────────────────────────────

    def list_activity_logs(self, page: int = 1, limit: int = 20, action: Optional[str] = None,
                           object_type: Optional[str] = None, from_date: Optional[str] = None,
                           to_date: Optional[str] = None) -> Dict:
        params = {'page': page, 'limit': limit}
        for key, value in (('action', action), ('objectType', object_type),
                           ('fromDate', from_date), ('toDate', to_date)):
            if value:
                params[key] = value
        return self._request('GET', '/api/user-logs', params=params)

    def log_activity(self, action: str, object_type: Optional[str] = None,
                     object_id: Optional[str] = None, metadata: Optional[Dict] = None):
        body = {'action': action, 'objectType': object_type, 'objectId': object_id,
                'metadata': metadata or {}}
        return self._request('POST', '/api/user-logs', json=body)

    def get_role(self, user_id: str) -> str:
        return self._request('GET', f'/api/user_roles/{user_id}')['role']['role']

    def set_role(self, user_id: str, role: str):
        return self._request('PUT', f'/api/user_roles/{user_id}', json={'role': role})['role']

    # ── MFA ──────────────────────────────────────────────────────────────────

    def mfa_enroll(self, friendly_name: Optional[str] = None):
        return self._request('POST', '/api/mfa/enroll', json={'friendlyName': friendly_name})

    def mfa_factors(self):
        return self._request('GET', '/api/mfa/factors')['totp']

    def mfa_challenge(self, factor_id: str):
        return self._request('POST', '/api/mfa/challenge', json={'factorId': factor_id})

    def mfa_verify(self, factor_id: str, challenge_id: str, code: str):
        """Verify a TOTP code; on success the client switches to the aal2 token."""
        body = {'factorId': factor_id, 'challengeId': challenge_id, 'code': code}
        result = self._request('POST', '/api/mfa/verify', json=body)
        self.token = result['access_token']
        return result

    def mfa_unenroll(self, factor_id: str):
        return self._request('DELETE', f'/api/mfa/factors/{factor_id}')

    def mfa_assurance(self):
        return self._request('GET', '/api/mfa/assurance')

    # ── Sales / demo data ────────────────────────────────────────────────────

    def list_sales(self):
        return self._request('GET', '/api/sales')

    def create_sale(self, **fields):
        return self._request('POST', '/api/sales', json=fields)['record']

    def update_sale(self, record_id: str, **fields):
        return self._request('PATCH', f'/api/sales/{record_id}', json=fields)['record']

    def delete_sale(self, record_id: str):
        return self._request('DELETE', f'/api/sales/{record_id}')

    def generate_data(self):
        return self._request('POST', '/api/generate-data')


def _error_message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or 'Request failed'
    if isinstance(body, dict) and body.get('error'):
        return str(body['error'])
    return response.reason or 'Request failed'
