"""
Category model: a user-defined tag with a display color.
"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from leaddesk.database import Base, new_id, isoformat


class Category(Base):
    __tablename__ = 'categories'

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(50), nullable=False)
    color = Column(String(7), nullable=False)  # #RRGGBB
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'created_at': isoformat(self.created_at),
        }
