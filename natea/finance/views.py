import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Sum
from django.shortcuts import get_object_or_404

from natea.core.formatting import get_expense_category_label
from natea.core.utils import create_audit_log
from .filters import CashTransactionFilter, ExpenseRecordFilter
from .models import CashTransaction, ExpenseRecord, EXPENSE_CATEGORIES
from .serializers import CashTransactionSerializer, ExpenseRecordSerializer

logger = logging.getLogger(__name__)


def summarize_cash(queryset):
    """Totals in/out and the resulting balance for a set of cash transactions"""
    total_in = queryset.filter(transaction_type='in').aggregate(total=Sum('amount'))['total'] or 0
    total_out = queryset.filter(transaction_type='out').aggregate(total=Sum('amount'))['total'] or 0
    return {
        'total_in': total_in,
        'total_out': total_out,
        'balance': total_in - total_out,
    }


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def cash_transaction_list_create(request):
    """List cash transactions or record a new one"""
    if request.method == 'GET':
        cash_filter = CashTransactionFilter(request.query_params, queryset=CashTransaction.objects.select_related('created_by'))
        if not cash_filter.is_valid():
            return Response(cash_filter.errors, status=status.HTTP_400_BAD_REQUEST)
        return Response(CashTransactionSerializer(cash_filter.qs, many=True).data)

    serializer = CashTransactionSerializer(data=request.data)
    if serializer.is_valid():
        transaction_obj = serializer.save(created_by=request.user)
        create_audit_log(
            request=request,
            action='create',
            model_name='CashTransaction',
            object_id=transaction_obj.id,
            object_name=f"Cash {transaction_obj.transaction_type} {transaction_obj.amount}",
            changes={
                'transaction_type': transaction_obj.transaction_type,
                'amount': transaction_obj.amount,
                'payment_method': transaction_obj.payment_method,
                'transaction_date': transaction_obj.transaction_date.isoformat(),
            },
        )
        logger.info(f"Cash transaction {transaction_obj.id} ({transaction_obj.transaction_type} {transaction_obj.amount}) recorded by {request.user.username}")
        return Response(CashTransactionSerializer(transaction_obj).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def cash_transaction_detail(request, pk):
    """Retrieve or delete a cash transaction"""
    transaction_obj = get_object_or_404(CashTransaction, pk=pk)

    if request.method == 'GET':
        return Response(CashTransactionSerializer(transaction_obj).data)

    create_audit_log(
        request=request,
        action='delete',
        model_name='CashTransaction',
        object_id=transaction_obj.id,
        object_name=f"Cash {transaction_obj.transaction_type} {transaction_obj.amount}",
    )
    transaction_obj.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def cash_summary(request):
    """Totals in/out and balance, honoring the same filters as the list"""
    cash_filter = CashTransactionFilter(request.query_params, queryset=CashTransaction.objects.all())
    if not cash_filter.is_valid():
        return Response(cash_filter.errors, status=status.HTTP_400_BAD_REQUEST)
    return Response(summarize_cash(cash_filter.qs))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def expense_list_create(request):
    """List expense records (newest first) or add one"""
    if request.method == 'GET':
        expense_filter = ExpenseRecordFilter(request.query_params, queryset=ExpenseRecord.objects.select_related('created_by'))
        if not expense_filter.is_valid():
            return Response(expense_filter.errors, status=status.HTTP_400_BAD_REQUEST)
        return Response(ExpenseRecordSerializer(expense_filter.qs, many=True).data)

    serializer = ExpenseRecordSerializer(data=request.data)
    if serializer.is_valid():
        expense = serializer.save(created_by=request.user)
        create_audit_log(
            request=request,
            action='create',
            model_name='ExpenseRecord',
            object_id=expense.id,
            object_name=expense.item,
            changes={
                'category': expense.category,
                'nominal_amount': expense.nominal_amount,
                'quantity': expense.quantity,
                'total': expense.total,
                'month_year': expense.month_year,
            },
        )
        logger.info(f"Expense {expense.id} '{expense.item}' ({expense.total}) recorded by {request.user.username}")
        return Response(ExpenseRecordSerializer(expense).data, status=status.HTTP_201_CREATED)
    logger.warning(f"Expense rejected: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def expense_detail(request, pk):
    """Retrieve, update or delete an expense record"""
    expense = get_object_or_404(ExpenseRecord, pk=pk)

    if request.method == 'GET':
        return Response(ExpenseRecordSerializer(expense).data)
    elif request.method in ('PUT', 'PATCH'):
        old_total = expense.total
        serializer = ExpenseRecordSerializer(expense, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            expense = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='ExpenseRecord',
                object_id=expense.id,
                object_name=expense.item,
                changes={'old_total': old_total, 'new_total': expense.total},
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='ExpenseRecord',
            object_id=expense.id,
            object_name=expense.item,
        )
        expense.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def expense_options(request):
    """Expense categories with their display labels"""
    return Response({
        'categories': [
            {'value': value, 'label': get_expense_category_label(value)}
            for value in EXPENSE_CATEGORIES
        ],
    })
