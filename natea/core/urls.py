from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, register, user_me,
    caller_role, caller_is_admin, caller_profile,
    user_list, user_profile, user_role,
    audit_log_list
)

urlpatterns = [
    # Auth endpoints
    path('auth/register/', register, name='register'),
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # Caller role and profile
    path('me/role/', caller_role, name='caller-role'),
    path('me/is-admin/', caller_is_admin, name='caller-is-admin'),
    path('me/profile/', caller_profile, name='caller-profile'),

    # User endpoints
    path('users/', user_list, name='user-list'),
    path('users/<int:pk>/profile/', user_profile, name='user-profile'),
    path('users/<int:pk>/role/', user_role, name='user-role'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
]
