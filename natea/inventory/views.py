import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly, AllowAny
from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404

from .filters import StockAdjustmentFilter
from .models import InventoryItem, StockAdjustment, INVENTORY_CATEGORIES, INVENTORY_SIZES, INVENTORY_UNITS
from .serializers import (
    InventoryItemSerializer, StockAdjustmentSerializer, StockAdjustmentRequestSerializer, DUPLICATE_NAME_MESSAGE
)
from .utils import filter_low_stock_items
from natea.core.utils import create_audit_log

logger = logging.getLogger(__name__)


def duplicate_name_response():
    """A concurrent save won the unique name, report it like the validation error"""
    return Response({'item_name': [DUPLICATE_NAME_MESSAGE]}, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def inventory_list_create(request):
    """List inventory items or add a new one"""
    if request.method == 'GET':
        items = InventoryItem.objects.all()
        return Response(InventoryItemSerializer(items, many=True).data)

    serializer = InventoryItemSerializer(data=request.data)
    if serializer.is_valid():
        try:
            with transaction.atomic():
                item = serializer.save()
        except IntegrityError:
            logger.warning(f"Inventory item name clash on save: {serializer.validated_data['item_name']}")
            return duplicate_name_response()
        create_audit_log(
            request=request,
            action='create',
            model_name='InventoryItem',
            object_id=item.id,
            object_name=item.item_name,
            changes={'initial_stock': item.initial_stock, 'reject': item.reject, 'final_stock': item.final_stock},
        )
        logger.info(f"Inventory item {item.id} '{item.item_name}' created by {request.user.username}")
        return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)
    logger.warning(f"Inventory item rejected: {serializer.errors}")
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def inventory_detail(request, pk):
    """Retrieve, update or delete an inventory item"""
    item = get_object_or_404(InventoryItem, pk=pk)

    if request.method == 'GET':
        return Response(InventoryItemSerializer(item).data)
    elif request.method in ('PUT', 'PATCH'):
        old_values = {'item_name': item.item_name, 'final_stock': item.final_stock, 'minimum_stock': item.minimum_stock}
        serializer = InventoryItemSerializer(item, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            try:
                with transaction.atomic():
                    item = serializer.save()
            except IntegrityError:
                return duplicate_name_response()
            create_audit_log(
                request=request,
                action='update',
                model_name='InventoryItem',
                object_id=item.id,
                object_name=item.item_name,
                changes={
                    'old': old_values,
                    'new': {'item_name': item.item_name, 'final_stock': item.final_stock, 'minimum_stock': item.minimum_stock},
                },
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='InventoryItem',
            object_id=item.id,
            object_name=item.item_name,
        )
        item.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inventory_adjust(request, pk):
    """Add stock to or reduce stock from an item, recording the adjustment"""
    request_serializer = StockAdjustmentRequestSerializer(data=request.data)
    if not request_serializer.is_valid():
        return Response(request_serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    quantity = request_serializer.validated_data['quantity']
    is_addition = request_serializer.validated_data['is_addition']
    description = request_serializer.validated_data['description']

    with transaction.atomic():
        item = get_object_or_404(InventoryItem.objects.select_for_update(), pk=pk)

        if is_addition:
            new_stock = item.final_stock + quantity
        else:
            new_stock = item.final_stock - quantity
            if new_stock < 0:
                logger.warning(f"Stock reduction rejected for item {item.id}: {item.final_stock} - {quantity} < 0")
                return Response({
                    'error': 'Failed to adjust stock. Stock cannot go below zero.',
                    'final_stock': item.final_stock,
                }, status=status.HTTP_400_BAD_REQUEST)

        item.final_stock = new_stock
        item.save(update_fields=['final_stock', 'updated_at'])

        adjustment = StockAdjustment.objects.create(
            item=item,
            item_name=item.item_name,
            item_size=item.size,
            adjustment_type='add' if is_addition else 'reduce',
            quantity=quantity,
            final_stock_after=new_stock,
            description=description,
            created_by=request.user,
        )

    create_audit_log(
        request=request,
        action='stock_adjust',
        model_name='StockAdjustment',
        object_id=adjustment.id,
        object_name=item.item_name,
        changes={
            'adjustment_type': adjustment.adjustment_type,
            'quantity': quantity,
            'description': description,
            'new_stock_quantity': new_stock,
        },
    )
    logger.info(f"Stock {adjustment.adjustment_type} {quantity} for item {item.id}, final stock now {new_stock}")

    return Response({
        'item': InventoryItemSerializer(item).data,
        'adjustment': StockAdjustmentSerializer(adjustment).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([AllowAny])
def inventory_low_stock(request):
    """Items whose final stock has reached or fallen below the minimum"""
    items = filter_low_stock_items(InventoryItem.objects.all())
    serializer = InventoryItemSerializer(items, many=True)
    return Response({
        'count': len(serializer.data),
        'results': serializer.data,
    })


@api_view(['GET'])
@permission_classes([AllowAny])
def inventory_reports(request):
    """Stock adjustment history, newest first"""
    adjustment_filter = StockAdjustmentFilter(request.query_params, queryset=StockAdjustment.objects.select_related('created_by'))
    if not adjustment_filter.is_valid():
        return Response(adjustment_filter.errors, status=status.HTTP_400_BAD_REQUEST)
    serializer = StockAdjustmentSerializer(adjustment_filter.qs, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([AllowAny])
def inventory_options(request):
    """Allowed values for the inventory form"""
    return Response({
        'categories': INVENTORY_CATEGORIES,
        'sizes': INVENTORY_SIZES,
        'units': INVENTORY_UNITS,
    })
