"""
Category pie chart data: lead counts per category.
"""
from sqlalchemy import func

from leaddesk.models.category import Category
from leaddesk.models.lead import Lead

UNCATEGORIZED = {'name': 'Uncategorized', 'color': '#CCCCCC'}


def category_counts(session):
    """[{name, value, color}] for every category with at least one lead, plus Uncategorized."""
    rows = session.query(
        Lead.category_id,
        func.count(Lead.id).label('count'),
    ).group_by(Lead.category_id).all()
    counts = {row.category_id: row.count for row in rows}

    chart = []
    for category in session.query(Category).order_by(Category.name).all():
        value = counts.get(category.id, 0)
        if value > 0:
            chart.append({'name': category.name, 'value': value, 'color': category.color})

    uncategorized = counts.get(None, 0)
    if uncategorized > 0:
        chart.append({**UNCATEGORIZED, 'value': uncategorized})
    return chart
