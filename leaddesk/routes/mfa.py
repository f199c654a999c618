"""
MFA routes: TOTP enroll / challenge / verify and the assurance level lookup.

A successful verify returns a fresh access token carrying aal=aal2.
"""
import logging
from flask import Blueprint, request, jsonify

from leaddesk.auth import current_user, issue_token, require_user
from leaddesk.config import ACCESS_TOKEN_TTL
from leaddesk.database import get_session
from leaddesk.models.mfa_factor import MfaFactor
from leaddesk.services import mfa
from leaddesk.services.activity import log_activity

logger = logging.getLogger('routes.mfa')

bp = Blueprint('mfa', __name__)


def _body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@bp.route('/api/mfa/enroll', methods=['POST'])
@require_user
def enroll():
    user = current_user()
    session = get_session()
    try:
        factor, uri = mfa.enroll(session, user, friendly_name=_body().get('friendlyName'))
        session.commit()
        payload = {
            'id': factor.id,
            'type': 'totp',
            'totp': {'secret': factor.secret, 'uri': uri},
        }
    except Exception:
        session.rollback()
        logger.error("Error enrolling TOTP factor for %s", user.id, exc_info=True)
        return jsonify({'error': 'Failed to enroll factor'}), 500
    finally:
        session.close()

    log_activity(user, 'mfa_enroll', 'mfa_factor', payload['id'])
    return jsonify(payload)


@bp.route('/api/mfa/factors')
@require_user
def factors():
    session = get_session()
    try:
        rows = mfa.list_factors(session, current_user())
        return jsonify({'totp': [f.to_dict() for f in rows if f.factor_type == 'totp']})
    except Exception:
        logger.error("Error listing factors", exc_info=True)
        return jsonify({'error': 'Failed to list factors'}), 500
    finally:
        session.close()


@bp.route('/api/mfa/challenge', methods=['POST'])
@require_user
def challenge():
    factor_id = _body().get('factorId')
    if not factor_id:
        return jsonify({'error': 'factorId is required'}), 400

    session = get_session()
    try:
        return jsonify(mfa.create_challenge(session, current_user(), factor_id))
    except mfa.MfaError as e:
        return jsonify({'error': str(e)}), e.status
    except Exception:
        logger.error("Error creating challenge for factor %s", factor_id, exc_info=True)
        return jsonify({'error': 'Failed to create challenge'}), 500
    finally:
        session.close()


@bp.route('/api/mfa/verify', methods=['POST'])
@require_user
def verify():
    data = _body()
    factor_id = data.get('factorId')
    if not factor_id:
        return jsonify({'error': 'factorId is required'}), 400

    user = current_user()
    session = get_session()
    try:
        mfa.verify(session, user, factor_id, data.get('challengeId'), data.get('code'))
        access_token = issue_token(user, aal='aal2')
        session.commit()
    except mfa.MfaError as e:
        session.rollback()
        logger.info("MFA verify failed for %s: %s", user.id, e)
        return jsonify({'error': str(e)}), e.status
    except Exception:
        session.rollback()
        logger.error("Error verifying factor %s", factor_id, exc_info=True)
        return jsonify({'error': 'Failed to verify code'}), 500
    finally:
        session.close()

    log_activity(user, 'mfa_verify', 'mfa_factor', factor_id)
    return jsonify({
        'access_token': access_token,
        'token_type': 'bearer',
        'expires_in': ACCESS_TOKEN_TTL,
    })


@bp.route('/api/mfa/factors/<factor_id>', methods=['DELETE'])
@require_user
def unenroll(factor_id):
    user = current_user()
    session = get_session()
    try:
        factor = session.query(MfaFactor).filter_by(id=factor_id, user_id=user.id).first()
        if factor is None:
            return jsonify({'error': 'Factor not found'}), 404
        session.delete(factor)
        session.commit()
    except Exception:
        session.rollback()
        logger.error("Error unenrolling factor %s", factor_id, exc_info=True)
        return jsonify({'error': 'Failed to unenroll factor'}), 500
    finally:
        session.close()

    log_activity(user, 'mfa_unenroll', 'mfa_factor', factor_id)
    return jsonify({'id': factor_id})


@bp.route('/api/mfa/assurance')
@require_user
def assurance():
    session = get_session()
    try:
        return jsonify(mfa.assurance_level(session, current_user()))
    except Exception:
        logger.error("Error reading assurance level", exc_info=True)
        return jsonify({'error': 'Failed to read assurance level'}), 500
    finally:
        session.close()
