"""
UserActivityLog model: append-only audit trail of user actions.
"""
from sqlalchemy import Column, String, Text, DateTime, JSON
from sqlalchemy.sql import func

from leaddesk.database import Base, new_id, isoformat


class UserActivityLog(Base):
    __tablename__ = 'user_activity_logs'

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)
    action = Column(Text, nullable=False, index=True)
    object_type = Column(Text, nullable=True)
    object_id = Column(Text, nullable=True)
    # `metadata` is reserved on declarative classes
    extra = Column('metadata', JSON, nullable=True, default=dict)
    ip_address = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'action': self.action,
            'object_type': self.object_type,
            'object_id': self.object_id,
            'metadata': self.extra or {},
            'ip_address': self.ip_address,
            'user_agent': self.user_agent,
            'created_at': isoformat(self.created_at),
        }
