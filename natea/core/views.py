import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError, AuthenticationFailed
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.db import DatabaseError
from django.shortcuts import get_object_or_404

from .models import AuditLog
from .permissions import IsAppAdmin
from .serializers import (
    UserSerializer, UserCreateSerializer, UserProfileSerializer,
    RoleAssignmentSerializer, AuditLogSerializer, profile_data
)
from .utils import create_audit_log

logger = logging.getLogger(__name__)

User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user.role
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except (ObjectDoesNotExist, User.DoesNotExist):
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """User registration endpoint"""
    serializer = UserCreateSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        token = CustomTokenObtainPairSerializer.get_token(user)
        logger.info(f"Registered user {user.username}")
        return Response({
            'user': UserSerializer(user).data,
            'access': str(token.access_token),
            'refresh': str(token),
        }, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user with role flags"""
    data = UserSerializer(request.user).data
    data['is_admin'] = request.user.is_app_admin
    return Response(data)


@api_view(['GET'])
@permission_classes([AllowAny])
def caller_role(request):
    """
    Role of the caller.

    Anonymous callers are guests. For signed-in users a failed lookup falls
    back to 'user' so the console never blocks on this call.
    """
    user = request.user
    if not user or not user.is_authenticated:
        return Response({'role': User.ROLE_GUEST})
    try:
        role = User.objects.values_list('role', flat=True).get(pk=user.pk)
    except (User.DoesNotExist, DatabaseError):
        logger.warning(f"Role lookup failed for user id={user.pk}, using fallback")
        role = User.ROLE_USER
    return Response({'role': role or User.ROLE_USER})


@api_view(['GET'])
@permission_classes([AllowAny])
def caller_is_admin(request):
    user = request.user
    return Response({'is_admin': bool(user and user.is_authenticated and user.is_app_admin)})


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def caller_profile(request):
    """Get or save the caller's profile"""
    if request.method == 'GET':
        return Response(profile_data(request.user))

    serializer = UserProfileSerializer(data=request.data)
    if serializer.is_valid():
        request.user.display_name = serializer.validated_data['name']
        request.user.save(update_fields=['display_name', 'updated_at'])
        return Response(profile_data(request.user))
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_profile(request, pk):
    """Profile of another user (admins, or the user themselves)"""
    if request.user.pk != pk and not request.user.is_app_admin:
        return Response({'error': 'Unauthorized: Can only view your own profile'}, status=status.HTTP_403_FORBIDDEN)
    user = get_object_or_404(User, pk=pk)
    return Response(profile_data(user))


@api_view(['PUT'])
@permission_classes([IsAppAdmin])
def user_role(request, pk):
    """Assign an application role to a user (admin only)"""
    user = get_object_or_404(User, pk=pk)
    serializer = RoleAssignmentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_role = user.role
    user.role = serializer.validated_data['role']
    user.save(update_fields=['role', 'updated_at'])

    create_audit_log(
        request=request,
        action='role_assign',
        model_name='User',
        object_id=user.id,
        object_name=user.username,
        changes={'role': {'old': old_role, 'new': user.role}},
    )
    logger.info(f"User {request.user.username} assigned role {user.role} to {user.username}")
    return Response(UserSerializer(user).data)


@api_view(['GET'])
@permission_classes([IsAppAdmin])
def user_list(request):
    users = User.objects.all().order_by('username')
    return Response(UserSerializer(users, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs; non-admins only see their own entries"""
    queryset = AuditLog.objects.select_related('user')

    if not request.user.is_app_admin:
        queryset = queryset.filter(user=request.user)

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    queryset = queryset.order_by('-created_at')
    serializer = AuditLogSerializer(queryset, many=True)
    return Response(serializer.data)
