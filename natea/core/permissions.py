from rest_framework.permissions import BasePermission


class IsAppAdmin(BasePermission):
    """Allows access only to users holding the application 'admin' role"""
    message = 'Unauthorized: Only admins can perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_app_admin)
