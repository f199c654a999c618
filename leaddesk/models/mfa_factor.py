"""
MfaFactor model: enrolled TOTP authenticators.
"""
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func

from leaddesk.database import Base, new_id, isoformat


class MfaFactor(Base):
    __tablename__ = 'mfa_factors'

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)
    friendly_name = Column(Text, nullable=True)
    factor_type = Column(String(16), nullable=False, default='totp')
    secret = Column(Text, nullable=False)  # base32
    status = Column(String(16), nullable=False, default='unverified')
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    verified_at = Column(DateTime(timezone=True), nullable=True)

    def to_dict(self):
        # Never expose the secret after enrollment
        return {
            'id': self.id,
            'friendly_name': self.friendly_name,
            'factor_type': self.factor_type,
            'status': self.status,
            'created_at': isoformat(self.created_at),
            'verified_at': isoformat(self.verified_at),
        }
