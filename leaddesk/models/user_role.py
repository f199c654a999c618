"""
UserRole model: one role per user; a missing row means 'user'.
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from leaddesk.database import Base, isoformat


class UserRole(Base):
    __tablename__ = 'user_roles'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), nullable=False, unique=True)
    role = Column(String(16), nullable=False, default='user')
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'role': self.role,
            'created_at': isoformat(self.created_at),
        }
