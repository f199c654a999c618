"""
Video model: metadata for a media object stored in the videos bucket.

The binary payload lives in object storage under `filepath`.
"""
from sqlalchemy import Column, String, BigInteger, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from leaddesk.database import Base, new_id, isoformat


class Video(Base):
    __tablename__ = 'videos'

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    filename = Column(Text, nullable=False)
    filepath = Column(Text, nullable=False, unique=True)
    filesize = Column(BigInteger, nullable=False)
    mime_type = Column(Text, nullable=False)
    thumbnail_url = Column(Text, nullable=True)
    upload_status = Column(Text, default='processing')
    category_id = Column(
        String(36),
        ForeignKey('categories.id', ondelete='SET NULL'),
        nullable=True,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category = relationship('Category', lazy='joined')

    def to_dict(self, url=None):
        data = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'filename': self.filename,
            'filepath': self.filepath,
            'filesize': self.filesize,
            'mime_type': self.mime_type,
            'thumbnail_url': self.thumbnail_url,
            'upload_status': self.upload_status,
            'category_id': self.category_id,
            'category': self.category.to_dict() if self.category else None,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }
        if url is not None:
            data['url'] = url
        return data
