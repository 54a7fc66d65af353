"""
Spreadsheet export.

Reports are exported as an HTML table wrapped in the Office namespaces,
which Excel opens as a worksheet. A sheet is a plain dict so it can be
handed to a DRF ``Response`` and rendered by ``SpreadsheetRenderer``.
"""
from django.template.loader import render_to_string
from django.utils import timezone

from natea.core.formatting import format_date, format_datetime, get_expense_category_label

SPREADSHEET_CONTENT_TYPE = 'application/vnd.ms-excel'
SPREADSHEET_TEMPLATE = 'reports/spreadsheet.html'

SALES_COLUMNS = [
    ('ID Transaksi', False),
    ('Tanggal & Jam', False),
    ('Metode Pembayaran', False),
    ('Produk', False),
    ('Qty', True),
    ('HPP', True),
    ('Harga Jual', True),
    ('Harga Total', True),
]

INVENTORY_COLUMNS = [
    ('Tanggal', False),
    ('Item', False),
    ('Ukuran', False),
    ('Jenis', False),
    ('Quantity', True),
    ('Stok Akhir', True),
    ('Keterangan', False),
]

EXPENSE_COLUMNS = [
    ('Tanggal', False),
    ('Bulan', False),
    ('Item', False),
    ('Kategori', False),
    ('Nominal', True),
    ('Qty', True),
    ('Total', True),
    ('PIC', False),
]


def export_filename(prefix, day=None):
    """Laporan_Penjualan + 2024-05-17 -> 'Laporan_Penjualan_2024-05-17.xls'"""
    day = day or timezone.localdate()
    return f'{prefix}_{day.isoformat()}.xls'


def _cells(values, columns):
    return [{'value': value, 'numeric': numeric} for value, (_, numeric) in zip(values, columns)]


def build_sheet(sheet_name, filename_prefix, columns, rows, footer=None):
    return {
        'sheet_name': sheet_name,
        'filename': export_filename(filename_prefix),
        'columns': [{'title': title, 'numeric': numeric} for title, numeric in columns],
        'rows': [_cells(row, columns) for row in rows],
        'footer': _cells(footer, columns) if footer else None,
    }


def sales_sheet(line_items):
    """line_items: dicts from ``build_sales_line_items``"""
    rows = [
        [
            item['sale_id'],
            format_datetime(item['transaction_date']),
            item['payment_method'],
            item['product_name'],
            item['quantity'],
            item['cogs'],
            item['unit_price'],
            item['line_total'],
        ]
        for item in line_items
    ]
    return build_sheet('Laporan Penjualan', 'Laporan_Penjualan', SALES_COLUMNS, rows)


def inventory_sheet(adjustments):
    rows = [
        [
            format_datetime(adjustment.created_at),
            adjustment.item_name,
            adjustment.item_size,
            adjustment.get_adjustment_type_display(),
            adjustment.signed_quantity,
            adjustment.final_stock_after,
            adjustment.description,
        ]
        for adjustment in adjustments
    ]
    return build_sheet('Laporan Inventori', 'Laporan_Inventori', INVENTORY_COLUMNS, rows)


def expense_sheet(records, grand_total):
    rows = [
        [
            format_date(record.date),
            record.month_year,
            record.item,
            get_expense_category_label(record.category),
            record.nominal_amount,
            record.quantity,
            record.total,
            record.pic_name,
        ]
        for record in records
    ]
    footer = ['Grand Total', '', '', '', '', '', grand_total, '']
    return build_sheet('Laporan Pengeluaran', 'Laporan_Pengeluaran', EXPENSE_COLUMNS, rows, footer)


def render_spreadsheet(sheet):
    """Render a sheet to the HTML workbook markup; cell text is escaped by the template engine"""
    return render_to_string(SPREADSHEET_TEMPLATE, sheet)
