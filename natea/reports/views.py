import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.settings import api_settings
from django.db.models import Sum
from django.utils import timezone

from natea.core.cache_utils import get_cached_dashboard_summary, cache_dashboard_summary
from natea.finance.filters import ExpenseRecordFilter
from natea.finance.models import ExpenseRecord
from natea.finance.serializers import ExpenseRecordSerializer
from natea.inventory.filters import StockAdjustmentFilter
from natea.inventory.models import InventoryItem, StockAdjustment
from natea.inventory.serializers import InventoryItemSerializer, StockAdjustmentSerializer
from natea.inventory.utils import filter_low_stock_items
from natea.pos.models import Sale
from natea.pos.utils import date_range_from_params
from .export import sales_sheet, inventory_sheet, expense_sheet
from .renderers import SpreadsheetRenderer
from .utils import build_dashboard_summary, build_sales_line_items, summarize_sales

logger = logging.getLogger(__name__)

REPORT_RENDERERS = list(api_settings.DEFAULT_RENDERER_CLASSES) + [SpreadsheetRenderer]
EMPTY_SALES_EXPORT_MESSAGE = 'Tidak ada transaksi untuk diekspor.'


def wants_spreadsheet(request):
    return getattr(request.accepted_renderer, 'format', None) == SpreadsheetRenderer.format


def spreadsheet_response(sheet):
    logger.info(f"Exporting {sheet['sheet_name']}: {len(sheet['rows'])} rows -> {sheet['filename']}")
    return Response(sheet, headers={'Content-Disposition': f'attachment; filename="{sheet["filename"]}"'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_summary(request):
    """Today's revenue, quantity sold and totals per payment method"""
    today = timezone.localdate()
    cached_data, cache_key = get_cached_dashboard_summary(today)
    if cached_data is not None:
        return Response(cached_data)

    data = build_dashboard_summary(today)
    cache_dashboard_summary(cache_key, data)
    return Response(data)


def _sales_report(request):
    try:
        date_from, date_to = date_range_from_params(request.query_params)
    except ValueError:
        return Response({'error': 'Invalid date range. Use YYYY-MM-DD and make sure from is not after to.'},
                        status=status.HTTP_400_BAD_REQUEST)

    sales = Sale.objects.filter(
        created_at__date__gte=date_from,
        created_at__date__lte=date_to,
    ).prefetch_related('items')
    line_items = build_sales_line_items(sales)

    if wants_spreadsheet(request):
        if not line_items:
            return Response({'error': EMPTY_SALES_EXPORT_MESSAGE}, status=status.HTTP_400_BAD_REQUEST)
        return spreadsheet_response(sales_sheet(line_items))

    return Response({
        'period': {
            'from': date_from.isoformat(),
            'to': date_to.isoformat(),
        },
        'line_items': line_items,
        'totals': summarize_sales(sales),
    })


def _inventory_report(request):
    adjustment_filter = StockAdjustmentFilter(request.query_params, queryset=StockAdjustment.objects.select_related('created_by'))
    if not adjustment_filter.is_valid():
        return Response(adjustment_filter.errors, status=status.HTTP_400_BAD_REQUEST)
    adjustments = adjustment_filter.qs

    if wants_spreadsheet(request):
        return spreadsheet_response(inventory_sheet(adjustments))

    items = InventoryItemSerializer(InventoryItem.objects.all(), many=True).data
    return Response({
        'items': items,
        'low_stock_count': len(filter_low_stock_items(items)),
        'adjustments': StockAdjustmentSerializer(adjustments, many=True).data,
    })


def _expense_report(request):
    expense_filter = ExpenseRecordFilter(request.query_params, queryset=ExpenseRecord.objects.select_related('created_by'))
    if not expense_filter.is_valid():
        return Response(expense_filter.errors, status=status.HTTP_400_BAD_REQUEST)
    records = expense_filter.qs
    grand_total = records.aggregate(total=Sum('total'))['total'] or 0

    if wants_spreadsheet(request):
        return spreadsheet_response(expense_sheet(records, grand_total))

    return Response({
        'month_year': request.query_params.get('month_year'),
        'records': ExpenseRecordSerializer(records, many=True).data,
        'grand_total': grand_total,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@renderer_classes(REPORT_RENDERERS)
def sales_report(request):
    """Sales line items and totals for a date range (default today)"""
    return _sales_report(request)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@renderer_classes([SpreadsheetRenderer])
def sales_report_export(request):
    return _sales_report(request)


@api_view(['GET'])
@permission_classes([AllowAny])
@renderer_classes(REPORT_RENDERERS)
def inventory_report(request):
    """Inventory items with low-stock flags plus the adjustment history"""
    return _inventory_report(request)


@api_view(['GET'])
@permission_classes([AllowAny])
@renderer_classes([SpreadsheetRenderer])
def inventory_report_export(request):
    return _inventory_report(request)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@renderer_classes(REPORT_RENDERERS)
def expense_report(request):
    """Expense rows and grand total, optionally for one month (YYYY-MM)"""
    return _expense_report(request)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@renderer_classes([SpreadsheetRenderer])
def expense_report_export(request):
    return _expense_report(request)
