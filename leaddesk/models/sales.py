"""
Sales grid models: SalesRecord plus its lookup tables.
"""
from sqlalchemy import Column, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from leaddesk.database import Base, new_id, isoformat


class _Lookup:
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(Text, nullable=False, unique=True)

    def to_dict(self):
        return {'id': self.id, 'name': self.name}


class ChatLocation(_Lookup, Base):
    __tablename__ = 'chat_locations'


class SaleStatus(_Lookup, Base):
    __tablename__ = 'sale_statuses'


class LeadSource(_Lookup, Base):
    __tablename__ = 'lead_sources'


class Designer(_Lookup, Base):
    __tablename__ = 'designers'


# field name → (model, relationship attribute)
LOOKUPS = {
    'chat_location_id': (ChatLocation, 'chat_location'),
    'sale_status_id': (SaleStatus, 'sale_status'),
    'lead_source_id': (LeadSource, 'lead_source'),
    'designer_id': (Designer, 'designer'),
}


class SalesRecord(Base):
    __tablename__ = 'sales_records'

    id = Column(String(36), primary_key=True, default=new_id)
    client = Column(Text, nullable=False, default='')
    chat_location_id = Column(String(36), ForeignKey('chat_locations.id', ondelete='SET NULL'), nullable=True)
    sale_status_id = Column(String(36), ForeignKey('sale_statuses.id', ondelete='SET NULL'), nullable=True)
    lead_source_id = Column(String(36), ForeignKey('lead_sources.id', ondelete='SET NULL'), nullable=True)
    designer_id = Column(String(36), ForeignKey('designers.id', ondelete='SET NULL'), nullable=True)
    product = Column(Text, nullable=True)
    est_deal_value = Column(Float, nullable=True)
    est_payout = Column(Float, nullable=True)
    est_earnings = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    chat_location = relationship('ChatLocation', lazy='joined')
    sale_status = relationship('SaleStatus', lazy='joined')
    lead_source = relationship('LeadSource', lazy='joined')
    designer = relationship('Designer', lazy='joined')

    def to_dict(self):
        data = {
            'id': self.id,
            'client': self.client,
            'product': self.product,
            'est_deal_value': self.est_deal_value,
            'est_payout': self.est_payout,
            'est_earnings': self.est_earnings,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
        }
        for field, (_, attr) in LOOKUPS.items():
            data[field] = getattr(self, field)
            related = getattr(self, attr)
            data[attr] = related.to_dict() if related else None
        return data
