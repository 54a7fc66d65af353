import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticatedOrReadOnly, AllowAny
from django.shortcuts import get_object_or_404

from .filters import ProductFilter
from .models import Product, PRODUCT_CATEGORIES, PRODUCT_SIZES
from .serializers import ProductSerializer
from natea.core.utils import create_audit_log

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticatedOrReadOnly])
def product_list_create(request):
    """List products (public) or add a new product"""
    if request.method == 'GET':
        product_filter = ProductFilter(request.query_params, queryset=Product.objects.all())
        if not product_filter.is_valid():
            return Response(product_filter.errors, status=status.HTTP_400_BAD_REQUEST)
        serializer = ProductSerializer(product_filter.qs, many=True, context={'request': request})
        return Response(serializer.data)

    serializer = ProductSerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        product = serializer.save()
        create_audit_log(
            request=request,
            action='create',
            model_name='Product',
            object_id=product.id,
            object_name=product.name,
            changes={'sale_price': product.sale_price, 'hpp': product.hpp, 'size': product.size},
        )
        logger.info(f"Product {product.id} '{product.name}' created by {request.user.username}")
        return Response(ProductSerializer(product, context={'request': request}).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticatedOrReadOnly])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = get_object_or_404(Product, pk=pk)

    if request.method == 'GET':
        serializer = ProductSerializer(product, context={'request': request})
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        old_values = {'name': product.name, 'sale_price': product.sale_price, 'hpp': product.hpp}
        serializer = ProductSerializer(product, data=request.data, partial=request.method == 'PATCH', context={'request': request})
        if serializer.is_valid():
            product = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Product',
                object_id=product.id,
                object_name=product.name,
                changes={
                    'old': old_values,
                    'new': {'name': product.name, 'sale_price': product.sale_price, 'hpp': product.hpp},
                },
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(
            request=request,
            action='delete',
            model_name='Product',
            object_id=product.id,
            object_name=product.name,
        )
        product.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([AllowAny])
def product_options(request):
    """Allowed values for the product form"""
    return Response({
        'categories': PRODUCT_CATEGORIES,
        'sizes': PRODUCT_SIZES,
    })
