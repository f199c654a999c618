"""
TOTP two-factor authentication: enroll, challenge, verify, assurance level.

Factors live in Postgres; challenges are short-lived Redis keys:

    mfa:challenge:{id} → JSON {factor_id, user_id}   (TTL MFA_CHALLENGE_TTL)
"""
import json
import logging
import uuid
from datetime import datetime, timedelta, timezone

import pyotp

from leaddesk.config import MFA_ISSUER, MFA_CHALLENGE_TTL
from leaddesk.extensions import redis_client as r
from leaddesk.models.mfa_factor import MfaFactor

logger = logging.getLogger('services.mfa')


class MfaError(Exception):
    status = 400


class FactorNotFound(MfaError):
    status = 404


class ChallengeExpired(MfaError):
    pass


class InvalidCode(MfaError):
    pass


def _challenge_key(challenge_id):
    return f'mfa:challenge:{challenge_id}'


def enroll(session, user, friendly_name=None):
    """Create an unverified TOTP factor. Returns (factor, provisioning_uri)."""
    secret = pyotp.random_base32()
    factor = MfaFactor(
        user_id=user.id,
        friendly_name=friendly_name,
        factor_type='totp',
        secret=secret,
        status='unverified',
    )
    session.add(factor)
    session.flush()
    uri = pyotp.TOTP(secret).provisioning_uri(name=user.email or user.id, issuer_name=MFA_ISSUER)
    logger.info("Enrolled TOTP factor %s for user %s", factor.id, user.id)
    return factor, uri


def get_factor(session, user, factor_id):
    factor = session.query(MfaFactor).filter_by(id=factor_id, user_id=user.id).first()
    if factor is None:
        raise FactorNotFound('Factor not found')
    return factor


def list_factors(session, user):
    return session.query(MfaFactor).filter_by(user_id=user.id).order_by(MfaFactor.created_at).all()


def create_challenge(session, user, factor_id):
    """Open a challenge for one of the user's factors. Returns {id, expires_at}."""
    factor = get_factor(session, user, factor_id)
    challenge_id = str(uuid.uuid4())
    r.setex(
        _challenge_key(challenge_id),
        MFA_CHALLENGE_TTL,
        json.dumps({'factor_id': factor.id, 'user_id': user.id}),
    )
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=MFA_CHALLENGE_TTL)
    return {'id': challenge_id, 'expires_at': int(expires_at.timestamp())}


def verify(session, user, factor_id, challenge_id, code):
    """
    Check `code` against the factor behind an open challenge.

    Consumes the challenge, marks the factor verified. The caller commits.
    """
    factor = get_factor(session, user, factor_id)

    raw = r.get(_challenge_key(challenge_id)) if challenge_id else None
    if not raw:
        raise ChallengeExpired('Challenge not found or expired')
    challenge = json.loads(raw)
    if challenge.get('factor_id') != factor.id or challenge.get('user_id') != user.id:
        raise ChallengeExpired('Challenge does not match factor')

    if not code or not pyotp.TOTP(factor.secret).verify(str(code).strip(), valid_window=1):
        raise InvalidCode('Invalid verification code')

    r.delete(_challenge_key(challenge_id))
    if factor.status != 'verified':
        factor.status = 'verified'
        factor.verified_at = datetime.now(timezone.utc)
    logger.info("Verified TOTP factor %s for user %s", factor.id, user.id)
    return factor


def assurance_level(session, user):
    """{currentLevel, nextLevel}: nextLevel is aal2 once a verified factor exists."""
    has_verified = session.query(MfaFactor.id).filter_by(
        user_id=user.id, status='verified',
    ).first() is not None
    return {
        'currentLevel': user.aal,
        'nextLevel': 'aal2' if has_verified else 'aal1',
    }
