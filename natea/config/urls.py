"""
URL configuration for the Natea Fresh POS project.

Every application mounts its API under ``api/v1/``.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.views.static import serve

admin.site.site_header = "Natea Fresh Admin Panel"
admin.site.site_title = "Natea Fresh Admin Portal"
admin.site.index_title = "Welcome to Natea Fresh Admin Portal"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('natea.core.urls')),
    path('api/v1/', include('natea.catalog.urls')),
    path('api/v1/', include('natea.inventory.urls')),
    path('api/v1/', include('natea.pos.urls')),
    path('api/v1/', include('natea.finance.urls')),
    path('api/v1/', include('natea.reports.urls')),
    re_path(r'^media/(?P<path>.*)$', serve, {'document_root': settings.MEDIA_ROOT}),
]
