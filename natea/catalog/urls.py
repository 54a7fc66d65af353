from django.urls import path
from .views import product_list_create, product_detail, product_options

urlpatterns = [
    path('products/', product_list_create, name='product-list-create'),
    path('products/options/', product_options, name='product-options'),
    path('products/<int:pk>/', product_detail, name='product-detail'),
]
