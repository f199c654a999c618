"""Tests for JWT claim handling."""
import jwt
import pytest

from leaddesk.auth import CurrentUser, decode_token, issue_token, user_from_claims


class TestUserFromClaims:

    def test_reads_role_and_aal(self):
        user = user_from_claims({'sub': 'u-1', 'email': 'a@b.c', 'user_role': 'admin', 'aal': 'aal2'})
        assert user == CurrentUser(id='u-1', email='a@b.c', role='admin', aal='aal2')
        assert user.is_admin

    def test_unknown_role_falls_back_to_user(self):
        assert user_from_claims({'sub': 'u-1', 'user_role': 'superuser'}).role == 'user'

    def test_missing_sub_raises(self):
        with pytest.raises(KeyError):
            user_from_claims({'email': 'a@b.c'})


class TestTokens:

    def test_round_trip_with_step_up(self):
        user = CurrentUser(id='u-1', email='a@b.c')
        claims = decode_token(issue_token(user, aal='aal2'))
        assert claims['sub'] == 'u-1'
        assert claims['aud'] == 'authenticated'
        assert claims['aal'] == 'aal2'
        assert claims['exp'] > claims['iat']

    def test_tampered_signature_rejected(self):
        token = jwt.encode({'sub': 'u-1', 'aud': 'authenticated'}, 'other-secret', algorithm='HS256')
        with pytest.raises(jwt.InvalidTokenError):
            decode_token(token)
