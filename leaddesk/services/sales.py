"""
Sales grid helpers: field validation and the earnings invariant.

est_earnings = est_deal_value - est_payout when both are set, else None.
"""
from leaddesk.models.sales import SalesRecord, LOOKUPS, ChatLocation, SaleStatus, LeadSource, Designer

MONEY_FIELDS = ('est_deal_value', 'est_payout')


class SalesValidationError(ValueError):
    pass


def compute_earnings(deal_value, payout):
    if deal_value is None or payout is None:
        return None
    return round(deal_value - payout, 2)


def parse_money(field, value):
    """'' / None clear the cell; strings like '$1,250.50' are accepted."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise SalesValidationError(f'{field} must be a number')
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace('$', '').replace(',', '')
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        raise SalesValidationError(f'{field} must be a number') from None


def apply_changes(session, record, data):
    """
    Validate and apply an edit to a SalesRecord in place.

    Unknown keys are ignored. Earnings are always recomputed from the
    resulting deal value and payout.
    """
    if 'client' in data:
        record.client = str(data['client'] or '').strip()
    if 'product' in data:
        product = str(data['product'] or '').strip()
        record.product = product or None

    for field, (model, _) in LOOKUPS.items():
        if field not in data:
            continue
        lookup_id = data[field] or None
        if lookup_id is not None and session.get(model, lookup_id) is None:
            raise SalesValidationError(f'Unknown {field}: {lookup_id}')
        setattr(record, field, lookup_id)

    for field in MONEY_FIELDS:
        if field in data:
            setattr(record, field, parse_money(field, data[field]))

    record.est_earnings = compute_earnings(record.est_deal_value, record.est_payout)
    return record


def load_lookups(session):
    return {
        'chat_locations': [row.to_dict() for row in session.query(ChatLocation).order_by(ChatLocation.name)],
        'sale_statuses': [row.to_dict() for row in session.query(SaleStatus).order_by(SaleStatus.name)],
        'lead_sources': [row.to_dict() for row in session.query(LeadSource).order_by(LeadSource.name)],
        'designers': [row.to_dict() for row in session.query(Designer).order_by(Designer.name)],
    }


def list_records(session):
    return session.query(SalesRecord).order_by(SalesRecord.created_at.desc(), SalesRecord.id).all()
