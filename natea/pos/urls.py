from django.urls import path
from .views import (
    cart_current, cart_items, cart_item_detail, cart_checkout,
    sale_list_create, sale_detail
)

urlpatterns = [
    # Cart endpoints (the caller's active cart)
    path('cart/', cart_current, name='cart-current'),
    path('cart/items/', cart_items, name='cart-items'),
    path('cart/items/<int:item_id>/', cart_item_detail, name='cart-item-detail'),
    path('cart/checkout/', cart_checkout, name='cart-checkout'),

    # Sale endpoints
    path('sales/', sale_list_create, name='sale-list-create'),
    path('sales/<int:pk>/', sale_detail, name='sale-detail'),
]
