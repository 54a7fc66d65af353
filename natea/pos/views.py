import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404

from natea.core.formatting import format_currency
from natea.core.utils import create_audit_log
from .models import Cart, CartItem, Sale, SaleItem
from .serializers import (
    CartSerializer, CartAddSerializer, CartItemUpdateSerializer, CheckoutSerializer,
    SaleSerializer, SaleWriteSerializer,
)
from .utils import date_range_from_params, recalculate_sale_totals

logger = logging.getLogger(__name__)


def get_active_cart(user):
    """Return the user's active cart, creating one when needed"""
    cart = Cart.objects.filter(user=user, status='active').order_by('-updated_at').first()
    if cart is None:
        cart = Cart.objects.create(user=user)
    return cart


def _cart_response(cart, status_code=status.HTTP_200_OK):
    cart = Cart.objects.prefetch_related('items__product').get(pk=cart.pk)
    return Response(CartSerializer(cart).data, status=status_code)


def _sale_audit_changes(sale):
    return {
        'payment_method': sale.payment_method,
        'total_tax': sale.total_tax,
        'amount': sale.amount,
        'total_quantity': sale.total_quantity,
        'items': [
            {'product_name': item.product_name, 'quantity': item.quantity, 'unit_price': item.unit_price}
            for item in sale.items.all()
        ],
    }


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def cart_current(request):
    """Get the caller's active cart, or clear it"""
    cart = get_active_cart(request.user)
    if request.method == 'DELETE':
        cart.items.all().delete()
        cart.save(update_fields=['updated_at'])
    return _cart_response(cart)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def cart_items(request):
    """Add a product to the active cart; an existing line gets its quantity increased"""
    serializer = CartAddSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    product = serializer.validated_data['product']
    quantity = serializer.validated_data['quantity']
    cart = get_active_cart(request.user)

    with transaction.atomic():
        item, created = CartItem.objects.select_for_update().get_or_create(
            cart=cart, product=product, defaults={'quantity': quantity}
        )
        if not created:
            item.quantity += quantity
            item.save(update_fields=['quantity'])
        cart.save(update_fields=['updated_at'])

    create_audit_log(
        request=request,
        action='cart_add',
        model_name='Cart',
        object_id=cart.id,
        object_name=product.name,
        changes={'product_id': product.id, 'quantity_added': quantity, 'quantity': item.quantity},
    )
    return _cart_response(cart, status.HTTP_201_CREATED if created else status.HTTP_200_OK)


@api_view(['PATCH', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def cart_item_detail(request, item_id):
    """Change the quantity of a cart line or remove it"""
    cart = get_active_cart(request.user)
    item = get_object_or_404(CartItem, pk=item_id, cart=cart)

    if request.method == 'DELETE':
        create_audit_log(
            request=request,
            action='cart_remove',
            model_name='Cart',
            object_id=cart.id,
            object_name=item.product.name,
            changes={'product_id': item.product_id, 'quantity': item.quantity},
        )
        item.delete()
    else:
        serializer = CartItemUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        item.quantity = serializer.validated_data['quantity']
        item.save(update_fields=['quantity'])

    cart.save(update_fields=['updated_at'])
    return _cart_response(cart)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def cart_checkout(request):
    """Turn the active cart into a sale and empty the cart"""
    serializer = CheckoutSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    cart_id = get_active_cart(request.user).pk

    with transaction.atomic():
        # Lock the cart so a repeated checkout waits and then finds it completed
        cart = Cart.objects.select_for_update().filter(pk=cart_id, status='active').first()
        lines = list(cart.items.select_related('product')) if cart is not None else []
        if not lines:
            return Response({'error': 'Cart is empty'}, status=status.HTTP_400_BAD_REQUEST)

        sale = Sale.objects.create(
            payment_method=serializer.validated_data['payment_method'],
            total_tax=serializer.validated_data['total_tax'],
            created_by=request.user,
        )
        SaleItem.objects.bulk_create([
            SaleItem(
                sale=sale,
                product=line.product,
                product_name=line.product.name,
                quantity=line.quantity,
                unit_price=line.product.sale_price,
                cogs=line.product.hpp,
            )
            for line in lines
        ])
        recalculate_sale_totals(sale)
        cart.items.all().delete()
        cart.status = 'completed'
        cart.save(update_fields=['status', 'updated_at'])

    create_audit_log(
        request=request,
        action='cart_checkout',
        model_name='Sale',
        object_id=sale.id,
        object_name=f"Sale #{sale.id}",
        changes=_sale_audit_changes(sale),
    )
    logger.info(f"Checkout: cart {cart.id} -> sale {sale.id}, amount={format_currency(sale.amount)}, method={sale.payment_method}")

    return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sale_list_create(request):
    """List sales in a date range (newest first) or record a sale directly"""
    if request.method == 'GET':
        try:
            date_from, date_to = date_range_from_params(request.query_params)
        except ValueError:
            return Response({'error': 'Invalid date range. Use YYYY-MM-DD and make sure from is not after to.'},
                            status=status.HTTP_400_BAD_REQUEST)
        sales = Sale.objects.select_related('created_by').prefetch_related('items').filter(
            created_at__date__gte=date_from,
            created_at__date__lte=date_to,
        )
        return Response({
            'results': SaleSerializer(sales, many=True).data,
            'count': len(sales),
            'period': {
                'from': date_from.isoformat(),
                'to': date_to.isoformat(),
            },
        })

    serializer = SaleWriteSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Sale rejected: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    sale = serializer.save(created_by=request.user)

    create_audit_log(
        request=request,
        action='sale_create',
        model_name='Sale',
        object_id=sale.id,
        object_name=f"Sale #{sale.id}",
        changes=_sale_audit_changes(sale),
    )
    logger.info(f"Sale {sale.id} recorded by {request.user.username}: amount={format_currency(sale.amount)}, method={sale.payment_method}")
    return Response(SaleSerializer(sale).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def sale_detail(request, pk):
    """Retrieve, replace or delete a sale"""
    sale = get_object_or_404(Sale, pk=pk)

    if request.method == 'GET':
        return Response(SaleSerializer(sale).data)
    elif request.method == 'PUT':
        old_values = _sale_audit_changes(sale)
        serializer = SaleWriteSerializer(sale, data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        sale = serializer.save()
        create_audit_log(
            request=request,
            action='sale_update',
            model_name='Sale',
            object_id=sale.id,
            object_name=f"Sale #{sale.id}",
            changes={'old': old_values, 'new': _sale_audit_changes(sale)},
        )
        logger.info(f"Sale {sale.id} updated by {request.user.username}: amount={format_currency(sale.amount)}")
        return Response(SaleSerializer(sale).data)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='sale_delete',
            model_name='Sale',
            object_id=sale.id,
            object_name=f"Sale #{sale.id}",
            changes=_sale_audit_changes(sale),
        )
        sale.delete()
        logger.info(f"Sale {pk} deleted by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)
