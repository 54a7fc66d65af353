"""Sale total calculations and date range parsing"""
from datetime import datetime

from django.utils import timezone


def calculate_sale_totals(lines, total_tax=0):
    """
    Compute (amount, total_quantity) for sale lines.

    lines: iterable of objects or dicts with ``quantity`` and ``unit_price``
    """
    subtotal = 0
    total_quantity = 0
    for line in lines:
        if isinstance(line, dict):
            quantity, unit_price = line['quantity'], line['unit_price']
        else:
            quantity, unit_price = line.quantity, line.unit_price
        subtotal += quantity * unit_price
        total_quantity += quantity
    return subtotal + (total_tax or 0), total_quantity


def recalculate_sale_totals(sale):
    """Recompute and persist the derived totals of a sale from its lines"""
    sale.amount, sale.total_quantity = calculate_sale_totals(sale.items.all(), sale.total_tax)
    sale.save(update_fields=['amount', 'total_quantity', 'updated_at'])
    return sale


def parse_date_range(date_from=None, date_to=None):
    """
    Parse YYYY-MM-DD bounds into dates. ``to`` defaults to today (local time)
    and ``from`` defaults to ``to``.

    Raises ValueError on a malformed date or when from is after to.
    """
    end = datetime.strptime(date_to, '%Y-%m-%d').date() if date_to else timezone.localdate()
    start = datetime.strptime(date_from, '%Y-%m-%d').date() if date_from else end
    if start > end:
        raise ValueError('Start date must not be after end date')
    return start, end


def date_range_from_params(query_params):
    """Read from/to (or date_from/date_to) from request query params"""
    return parse_date_range(
        query_params.get('from') or query_params.get('date_from'),
        query_params.get('to') or query_params.get('date_to'),
    )
