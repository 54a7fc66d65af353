"""Report row builders shared by the JSON and spreadsheet outputs"""
from django.db.models import Count, Sum

from natea.core.formatting import get_payment_method_label
from natea.pos.models import Sale


def build_sales_line_items(sales):
    """Flatten sales into one row per sale line (sales are expected to prefetch ``items``)"""
    line_items = []
    for sale in sales:
        for item in sale.items.all():
            line_items.append({
                'sale_id': sale.id,
                'transaction_date': sale.created_at,
                'payment_method': get_payment_method_label(sale.payment_method),
                'product_name': item.product_name,
                'quantity': item.quantity,
                'cogs': item.cogs,
                'unit_price': item.unit_price,
                'line_total': item.line_total,
            })
    return line_items


def summarize_sales(sales):
    """Revenue, quantity and transaction count for a sale queryset"""
    totals = sales.aggregate(
        revenue=Sum('amount'),
        quantity=Sum('total_quantity'),
        transaction_count=Count('id'),
    )
    return {
        'revenue': totals['revenue'] or 0,
        'quantity': totals['quantity'] or 0,
        'transaction_count': totals['transaction_count'],
    }


def build_dashboard_summary(day):
    """Today's revenue, quantity sold and per payment method totals"""
    sales = Sale.objects.filter(created_at__date=day)
    totals = summarize_sales(sales)

    payment_method_totals = {method: 0 for method, _ in Sale.PAYMENT_METHOD_CHOICES}
    for row in sales.values('payment_method').annotate(total=Sum('amount')).order_by():
        payment_method_totals[row['payment_method']] = row['total'] or 0

    return {
        'date': day.isoformat(),
        'today_revenue': totals['revenue'],
        'total_quantity_sold': totals['quantity'],
        'payment_method_totals': payment_method_totals,
        'transaction_count': totals['transaction_count'],
    }
