"""
Test suite for Core module
Tests: JWT login/refresh, current user, audit log visibility and helpers
"""
from unittest import mock
from django.test import TestCase, RequestFactory
from rest_framework import status
from rest_framework.test import APIClient
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import AuditLog
from backend.core.utils import create_audit_log, get_client_ip, has_unique_error


class AuthTests(TestCase):
    """Test token endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='alice', password='s3cret-pass')
        self.client = APIClient()

    def test_login_returns_token_pair(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'alice', 'password': 's3cret-pass'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_login_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {'username': 'alice', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_inactive_user(self):
        self.user.is_active = False
        self.user.save()
        response = self.client.post('/api/v1/auth/login/', {'username': 'alice', 'password': 's3cret-pass'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh(self):
        login = self.client.post('/api/v1/auth/login/', {'username': 'alice', 'password': 's3cret-pass'}, format='json')
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_invalid_token(self):
        response = self.client.post('/api/v1/auth/refresh/', {'refresh': 'not-a-token'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        login = self.client.post('/api/v1/auth/login/', {'username': 'alice', 'password': 's3cret-pass'}, format='json')
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['username'], 'alice')

    def test_me_requires_token(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AuditLogAPITests(TestCase):
    """Test audit log endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.other = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_user(is_staff=True)
        self.own_log = create_audit_log(action='create', model_name='Product', object_id=1, user=self.user)
        self.other_log = create_audit_log(action='delete', model_name='Asset', object_id=2, user=self.other)
        self.client = AuthenticatedAPIClient()

    def test_user_sees_only_own_logs(self):
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([log['id'] for log in response.data], [self.own_log.id])
        self.assertEqual(response.data[0]['username'], self.user.username)

    def test_staff_sees_all_logs(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(len(response.data), 2)

    def test_filters(self):
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/v1/audit-logs/?action=delete')
        self.assertEqual([log['id'] for log in response.data], [self.other_log.id])
        response = self.client.get('/api/v1/audit-logs/?model_name=Product')
        self.assertEqual([log['id'] for log in response.data], [self.own_log.id])

    def test_detail_permission(self):
        self.client.authenticate_user(self.user)
        response = self.client.get(f'/api/v1/audit-logs/{self.own_log.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.get(f'/api/v1/audit-logs/{self.other_log.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class AuditUtilsTests(TestCase):
    """Test audit and error helpers"""

    def test_create_audit_log_skips_incomplete(self):
        self.assertIsNone(create_audit_log(action='create', model_name=None, object_id=1))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_create_audit_log_records_ip(self):
        request = RequestFactory().get('/', HTTP_X_FORWARDED_FOR='10.0.0.5, 10.0.0.1')
        request.user = TestDataFactory.create_user()
        log = create_audit_log(request=request, action='update', model_name='Staff', object_id=3)
        self.assertEqual(log.ip_address, '10.0.0.5')
        self.assertEqual(log.user, request.user)
        self.assertEqual(log.object_id, '3')

    def test_get_client_ip_without_request(self):
        self.assertIsNone(get_client_ip(None))

    def test_has_unique_error(self):
        from rest_framework.exceptions import ErrorDetail
        self.assertTrue(has_unique_error({'sku': [ErrorDetail('exists', code='unique')]}))
        self.assertFalse(has_unique_error({'sku': [ErrorDetail('required', code='required')]}))


class ExceptionHandlerTests(TestCase):
    """Unhandled errors in any API view become a logged JSON 500"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_unexpected_error_returns_json_500(self):
        with mock.patch('backend.assets.views.AssetSerializer', side_effect=RuntimeError('serializer exploded')):
            with self.assertLogs('backend.assets', level='ERROR') as logs:
                response = self.client.get('/api/v1/assets/')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response['Content-Type'], 'application/json')
        self.assertEqual(response.json(), {'error': 'An unexpected error occurred'})
        self.assertIn('serializer exploded', logs.output[0])

    def test_framework_errors_keep_their_status(self):
        """Authentication and routing errors are not turned into 500s"""
        self.client.logout()
        response = self.client.get('/api/v1/assets/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.client.authenticate_user(self.user)
        response = self.client.delete('/api/v1/transactions/')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
