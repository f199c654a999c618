"""Tests for the TOTP service layer (Redis-backed challenges)."""
import json

import pyotp
import pytest

from leaddesk.auth import CurrentUser
from leaddesk.services import mfa


@pytest.fixture
def user():
    return CurrentUser(id='u-1', email='u1@example.com')


@pytest.fixture
def factor(db_session, user):
    factor, _ = mfa.enroll(db_session, user, friendly_name='phone')
    db_session.commit()
    return factor


class TestChallenge:

    def test_stored_with_ttl(self, db_session, user, factor, mock_redis):
        challenge = mfa.create_challenge(db_session, user, factor.id)
        key, ttl, value = mock_redis.setex.call_args.args
        assert key == f"mfa:challenge:{challenge['id']}"
        assert ttl == 300
        assert json.loads(value) == {'factor_id': factor.id, 'user_id': 'u-1'}


class TestVerify:

    def _open(self, mock_redis, factor_id, user_id='u-1'):
        mock_redis.get.return_value = json.dumps({'factor_id': factor_id, 'user_id': user_id})

    def test_accepts_current_code(self, db_session, user, factor, mock_redis):
        self._open(mock_redis, factor.id)
        verified = mfa.verify(db_session, user, factor.id, 'c-1', pyotp.TOTP(factor.secret).now())
        assert verified.status == 'verified'
        assert verified.verified_at is not None
        mock_redis.delete.assert_called_once_with('mfa:challenge:c-1')

    def test_challenge_for_other_factor(self, db_session, user, factor, mock_redis):
        self._open(mock_redis, 'another-factor')
        with pytest.raises(mfa.ChallengeExpired):
            mfa.verify(db_session, user, factor.id, 'c-1', pyotp.TOTP(factor.secret).now())

    def test_wrong_code(self, db_session, user, factor, mock_redis):
        self._open(mock_redis, factor.id)
        with pytest.raises(mfa.InvalidCode):
            mfa.verify(db_session, user, factor.id, 'c-1', 'abcdef')
        mock_redis.delete.assert_not_called()

    def test_missing_code(self, db_session, user, factor, mock_redis):
        self._open(mock_redis, factor.id)
        with pytest.raises(mfa.InvalidCode):
            mfa.verify(db_session, user, factor.id, 'c-1', None)

    def test_unknown_factor_status_404(self, db_session, user):
        with pytest.raises(mfa.FactorNotFound) as exc:
            mfa.get_factor(db_session, user, 'nope')
        assert exc.value.status == 404


class TestAssurance:

    def test_levels(self, db_session, user, factor):
        assert mfa.assurance_level(db_session, user) == {'currentLevel': 'aal1', 'nextLevel': 'aal1'}
        factor.status = 'verified'
        db_session.commit()
        assert mfa.assurance_level(db_session, user)['nextLevel'] == 'aal2'
