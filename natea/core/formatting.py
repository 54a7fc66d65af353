"""
Indonesian (id-ID) display formatting for money, numbers, dates and
payment methods.
"""
from datetime import datetime

from django.utils import timezone

# Symbol and amount are separated by a no-break space
CURRENCY_SYMBOL = 'Rp\xa0'

PAYMENT_METHOD_LABELS = {
    'tunai': 'Tunai',
    'qris': 'QRIS',
    'dana': 'DANA',
    'trf': 'Transfer',
}

EXPENSE_CATEGORY_LABELS = {
    'bahan-baku': 'Bahan Baku',
    'operasional': 'Operasional',
    'lain-lain': 'Lain-lain',
}


def format_number(value):
    """Group thousands with '.', rounding to a whole number: 1234567 -> '1.234.567'"""
    rounded = int(round(value or 0))
    sign = '-' if rounded < 0 else ''
    return sign + f'{abs(rounded):,}'.replace(',', '.')


def format_currency(amount):
    """Format a Rupiah amount without decimals: 15000 -> 'Rp 15.000'"""
    rounded = int(round(amount or 0))
    sign = '-' if rounded < 0 else ''
    return f'{sign}{CURRENCY_SYMBOL}{format_number(abs(rounded))}'


def format_datetime(value):
    """Format a datetime as 'dd/mm/yyyy, HH.MM.SS' in the current time zone"""
    if isinstance(value, datetime) and timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime('%d/%m/%Y, %H.%M.%S')


def format_date(value):
    return value.strftime('%d/%m/%Y')


def get_payment_method_label(method):
    return PAYMENT_METHOD_LABELS.get(method, method)


def get_expense_category_label(category):
    return EXPENSE_CATEGORY_LABELS.get(category, category)
