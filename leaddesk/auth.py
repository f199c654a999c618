"""
Request authentication: provider-issued JWTs.

Tokens are HS256 JWTs signed with the provider's JWT secret. We only read
claims out of the payload: `sub`, `email`, `user_role` and `aal`.
When JWT_SECRET is unset every request runs as a fixed local user (local dev).
"""
import logging
import secrets
import time
from dataclasses import dataclass
from functools import wraps

import jwt
from flask import g, jsonify, request

from leaddesk.config import (
    JWT_SECRET, JWT_ALGORITHM, JWT_AUDIENCE, ACCESS_TOKEN_TTL,
    LOCAL_USER_ID, DEFAULT_ROLE,
)

logger = logging.getLogger('leaddesk.auth')


@dataclass
class CurrentUser:
    id: str
    email: str = ''
    role: str = DEFAULT_ROLE
    aal: str = 'aal1'

    @property
    def is_admin(self):
        return self.role == 'admin'


LOCAL_USER = CurrentUser(id=LOCAL_USER_ID, email='local@localhost', role='admin', aal='aal1')

# Signs step-up tokens in local dev; incoming tokens are ignored in that mode.
_LOCAL_SIGNING_KEY = secrets.token_urlsafe(32)


def _signing_key():
    return JWT_SECRET or _LOCAL_SIGNING_KEY


def decode_token(token):
    """Verify and decode a bearer token. Raises jwt.InvalidTokenError."""
    return jwt.decode(token, _signing_key(), algorithms=[JWT_ALGORITHM], audience=JWT_AUDIENCE)


def issue_token(user, aal=None, ttl=ACCESS_TOKEN_TTL):
    """Sign an access token for `user` (used after MFA step-up)."""
    now = int(time.time())
    claims = {
        'sub': user.id,
        'email': user.email,
        'user_role': user.role,
        'aal': aal or user.aal,
        'aud': JWT_AUDIENCE,
        'iat': now,
        'exp': now + ttl,
    }
    return jwt.encode(claims, _signing_key(), algorithm=JWT_ALGORITHM)


def user_from_claims(claims):
    role = claims.get('user_role') or DEFAULT_ROLE
    if role not in ('admin', 'user'):
        role = DEFAULT_ROLE
    return CurrentUser(
        id=claims['sub'],
        email=claims.get('email', ''),
        role=role,
        aal=claims.get('aal', 'aal1'),
    )


def load_current_user():
    """Populate g.user from the Authorization header (None when missing/invalid)."""
    g.user = None
    if not JWT_SECRET:
        g.user = LOCAL_USER
        return

    header = request.headers.get('Authorization', '')
    if not header.startswith('Bearer '):
        return
    token = header[len('Bearer '):].strip()
    try:
        g.user = user_from_claims(decode_token(token))
    except (jwt.InvalidTokenError, KeyError) as e:
        logger.info("Rejected bearer token: %s", e)


def current_user():
    return g.get('user')


def require_user(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            return jsonify({'error': 'Unauthorized'}), 401
        return view(*args, **kwargs)
    return wrapper


def require_admin(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            return jsonify({'error': 'Unauthorized'}), 401
        if not user.is_admin:
            return jsonify({'error': 'Admin role required'}), 403
        return view(*args, **kwargs)
    return wrapper
