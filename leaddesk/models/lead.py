"""
Lead model: one row per tracked social-media account.
"""
from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from leaddesk.database import Base, new_id, isoformat


class Lead(Base):
    __tablename__ = 'leads'

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    twitter_handle = Column(String(255), nullable=False)
    profile_image_url = Column(Text, nullable=True)
    follower_count = Column(Integer, default=0)
    last_post_date = Column(DateTime(timezone=True), nullable=True)
    is_verified = Column(Boolean, default=False)
    is_blue_verified = Column(Boolean, default=False)
    category_id = Column(
        String(36),
        ForeignKey('categories.id', ondelete='SET NULL', name='leads_category_id_fkey'),
        nullable=True,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category = relationship('Category', lazy='joined')

    def to_dict(self, with_category=True):
        data = {
            'id': self.id,
            'name': self.name,
            'twitter_handle': self.twitter_handle,
            'profile_image_url': self.profile_image_url,
            'follower_count': self.follower_count or 0,
            'last_post_date': isoformat(self.last_post_date),
            'is_verified': bool(self.is_verified),
            'is_blue_verified': bool(self.is_blue_verified),
            'category_id': self.category_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }
        if with_category:
            data['category'] = self.category.to_dict() if self.category else None
        return data
