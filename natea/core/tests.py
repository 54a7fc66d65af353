"""
Test suite for the core module
Tests: auth, caller role/profile, role assignment, audit logs, error normalization, formatting
"""
from datetime import date, datetime
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from .errors import normalize_error_message
from .formatting import format_currency, format_number, format_datetime, format_date, get_payment_method_label
from .models import AuditLog, User
from .test_utils import TestDataFactory, AuthenticatedAPIClient
from .utils import create_audit_log


class ErrorNormalizationTests(TestCase):
    """Test user-facing error normalization"""

    def test_only_admins_is_sign_in_required(self):
        error = normalize_error_message(Exception('Unauthorized: Only admins can perform this action.'))
        self.assertEqual(error.title, 'Sign In Required')
        self.assertTrue(error.is_auth_error)

    def test_only_users_is_sign_in_required(self):
        error = normalize_error_message('Only users can add products')
        self.assertEqual(error.title, 'Sign In Required')

    def test_unauthorized_is_insufficient_permissions(self):
        error = normalize_error_message('UNAUTHORIZED access')
        self.assertEqual(error.title, 'Insufficient Permissions')
        self.assertTrue(error.is_auth_error)

    def test_connection_errors(self):
        self.assertEqual(normalize_error_message('Service not ready').title, 'Connection Error')
        self.assertEqual(normalize_error_message('Actor not initialized').title, 'Connection Error')

    def test_network_and_timeout(self):
        self.assertEqual(normalize_error_message('Failed to fetch').title, 'Network Error')
        self.assertEqual(normalize_error_message('Request timeout after 30s').title, 'Request Timeout')

    def test_fallback(self):
        error = normalize_error_message(ValueError('boom'))
        self.assertEqual(error.title, 'Error')
        self.assertEqual(error.message, 'An unexpected error occurred. Please try again.')
        self.assertFalse(error.is_auth_error)
        self.assertEqual(normalize_error_message(None).title, 'Error')


class FormattingTests(TestCase):
    """Test Indonesian display formatting"""

    def test_format_currency(self):
        self.assertEqual(format_currency(15000), 'Rp\xa015.000')
        self.assertEqual(format_currency(1234567), 'Rp\xa01.234.567')
        self.assertEqual(format_currency(-15000), '-Rp\xa015.000')
        self.assertEqual(format_currency(0), 'Rp\xa00')

    def test_format_number(self):
        self.assertEqual(format_number(15000), '15.000')
        self.assertEqual(format_number(999), '999')
        self.assertEqual(format_number(1500.6), '1.501')

    def test_format_datetime_uses_local_time(self):
        value = timezone.make_aware(datetime(2024, 5, 17, 14, 5, 9))
        self.assertEqual(format_datetime(value), '17/05/2024, 14.05.09')
        self.assertEqual(format_date(date(2024, 5, 17)), '17/05/2024')

    def test_payment_method_label(self):
        self.assertEqual(get_payment_method_label('trf'), 'Transfer')
        self.assertEqual(get_payment_method_label('cek'), 'cek')


class AuthTests(TestCase):
    """Test registration, login and the error envelope for auth failures"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_register(self):
        data = {'username': 'kasir1', 'password': 'Natea-Fresh-2024', 'password_confirm': 'Natea-Fresh-2024'}
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['role'], 'user')
        self.assertIn('access', response.data)

    def test_register_password_mismatch(self):
        data = {'username': 'kasir1', 'password': 'Natea-Fresh-2024', 'password_confirm': 'other-pass-2024'}
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login(self):
        TestDataFactory.create_user(username='kasir2', password='testpass123')
        response = self.client.post('/api/v1/auth/login/', {'username': 'kasir2', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_unauthenticated_error_is_normalized(self):
        """Auth failures carry the sign-in title"""
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['title'], 'Sign In Required')
        self.assertTrue(response.data['is_auth_error'])

    def test_me(self):
        user = TestDataFactory.create_admin()
        self.client.authenticate_user(user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_admin'])


class CallerRoleAndProfileTests(TestCase):
    """Test caller role, admin check and profiles"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_anonymous_is_guest(self):
        self.client.logout()
        response = self.client.get('/api/v1/me/role/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'role': 'guest'})

    def test_role_of_user(self):
        response = self.client.get('/api/v1/me/role/')
        self.assertEqual(response.data, {'role': 'user'})

    def test_role_lookup_failure_falls_back_to_user(self):
        with mock.patch.object(User.objects, 'values_list', side_effect=User.DoesNotExist):
            response = self.client.get('/api/v1/me/role/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'role': 'user'})

    def test_role_lookup_database_error_falls_back_to_user(self):
        with mock.patch.object(User.objects, 'values_list', side_effect=DatabaseError('connection lost')):
            response = self.client.get('/api/v1/me/role/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'role': 'user'})

    def test_is_admin(self):
        response = self.client.get('/api/v1/me/is-admin/')
        self.assertEqual(response.data, {'is_admin': False})
        self.client.logout()
        response = self.client.get('/api/v1/me/is-admin/')
        self.assertEqual(response.data, {'is_admin': False})

    def test_profile_roundtrip(self):
        """Profile is null until a name is saved"""
        response = self.client.get('/api/v1/me/profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data)

        response = self.client.put('/api/v1/me/profile/', {'name': 'Dewi'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'name': 'Dewi'})

    def test_user_profile_access(self):
        other = TestDataFactory.create_user()
        response = self.client.get(f'/api/v1/users/{self.user.id}/profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get(f'/api/v1/users/{other.id}/profile/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        admin = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_admin())
        response = admin.get(f'/api/v1/users/{other.id}/profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class RoleAssignmentTests(TestCase):
    """Test admin role assignment"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_assign_role(self):
        response = self.client.put(f'/api/v1/users/{self.user.id}/role/', {'role': 'admin'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, 'admin')
        log = AuditLog.objects.get(action='role_assign')
        self.assertEqual(log.changes, {'role': {'old': 'user', 'new': 'admin'}})

    def test_unknown_role(self):
        response = self.client.put(f'/api/v1/users/{self.user.id}/role/', {'role': 'owner'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_user(self):
        response = self.client.put('/api/v1/users/9999/role/', {'role': 'user'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_non_admin_forbidden(self):
        self.client.authenticate_user(self.user)
        response = self.client.put(f'/api/v1/users/{self.admin.id}/role/', {'role': 'user'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['title'], 'Insufficient Permissions')

    def test_user_list_admin_only(self):
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_assign_role_command(self):
        out = StringIO()
        call_command('assign_role', self.user.username, 'admin', stdout=out)
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, 'admin')
        self.assertIn('user -> admin', out.getvalue())

    def test_assign_role_command_unknown_user(self):
        with self.assertRaises(CommandError):
            call_command('assign_role', 'nobody', 'admin')


class AuditLogTests(TestCase):
    """Test audit log creation and listing"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_missing_fields_are_skipped(self):
        self.assertIsNone(create_audit_log(action='create', model_name=None, object_id=1))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_failures_do_not_raise(self):
        with mock.patch.object(AuditLog.objects, 'create', side_effect=RuntimeError('db down')):
            self.assertIsNone(create_audit_log(action='create', model_name='Product', object_id=1, user=self.user))

    def test_non_admin_sees_own_entries(self):
        other = TestDataFactory.create_user()
        create_audit_log(action='create', model_name='Product', object_id=1, user=self.user)
        create_audit_log(action='delete', model_name='Product', object_id=2, user=other)

        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['username'], self.user.username)

        admin = AuthenticatedAPIClient().authenticate_user(TestDataFactory.create_admin())
        response = admin.get('/api/v1/audit-logs/?action=delete')
        self.assertEqual(len(response.data), 1)
