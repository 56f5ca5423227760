"""
Test suite for Staff module
Tests: Staff CRUD, active list, uniqueness conflicts, protected delete
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.staff.models import Staff


class StaffModelTests(TestCase):

    def test_full_name(self):
        staff = TestDataFactory.create_staff(first_name='Ada', last_name='Lovelace')
        self.assertEqual(staff.full_name, 'Ada Lovelace')


class StaffAPITests(TestCase):
    """Test staff endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def staff_payload(self, **overrides):
        data = {
            'employee_id': 'E-001',
            'first_name': 'Grace',
            'last_name': 'Hopper',
            'email': 'grace@example.com',
            'department': 'Receiving',
            'position': 'Supervisor',
            'hire_date': '2024-03-01',
        }
        data.update(overrides)
        return data

    def test_create_staff(self):
        response = self.client.post('/api/v1/staff/', self.staff_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['full_name'], 'Grace Hopper')
        self.assertEqual(response.data['status'], 'ACTIVE')

    def test_duplicate_employee_id_conflict(self):
        TestDataFactory.create_staff(employee_id='E-001')
        response = self.client.post('/api/v1/staff/', self.staff_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'Staff member with this employee ID or email already exists')

    def test_duplicate_email_conflict(self):
        TestDataFactory.create_staff(email='grace@example.com')
        response = self.client.post('/api/v1/staff/', self.staff_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_blank_emails_do_not_conflict(self):
        """Blank email is stored as NULL, so several staff may omit it"""
        first = self.client.post('/api/v1/staff/', self.staff_payload(employee_id='E-1', email=''), format='json')
        second = self.client.post('/api/v1/staff/', self.staff_payload(employee_id='E-2', email=''), format='json')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(Staff.objects.get(employee_id='E-1').email)

    def test_invalid_status_rejected(self):
        response = self.client.post('/api/v1/staff/', self.staff_payload(status='ON_LEAVE'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data)

    def test_list_filters(self):
        TestDataFactory.create_staff(department='Receiving', status='ACTIVE')
        TestDataFactory.create_staff(department='Shipping', status='INACTIVE')
        response = self.client.get('/api/v1/staff/?department=receiving')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/staff/?status=inactive')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['department'], 'Shipping')

    def test_active_list(self):
        active = TestDataFactory.create_staff(status='ACTIVE')
        TestDataFactory.create_staff(status='TERMINATED')
        response = self.client.get('/api/v1/staff/active/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [active.id])

    def test_get_missing_staff(self):
        response = self.client.get('/api/v1/staff/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Staff member not found')

    def test_patch_staff(self):
        staff = TestDataFactory.create_staff(department='Receiving')
        response = self.client.patch(f'/api/v1/staff/{staff.id}/', {'department': 'Shipping'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        staff.refresh_from_db()
        self.assertEqual(staff.department, 'Shipping')

    def test_delete_staff(self):
        staff = TestDataFactory.create_staff()
        response = self.client.delete(f'/api/v1/staff/{staff.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Staff.objects.filter(id=staff.id).exists())

    def test_delete_staff_with_transactions_conflict(self):
        """Staff referenced by inventory transactions cannot be deleted"""
        staff = TestDataFactory.create_staff()
        product = TestDataFactory.create_product()
        TestDataFactory.create_transaction(product, 'RECEIVE', 3, staff=staff)
        response = self.client.delete(f'/api/v1/staff/{staff.id}/')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Staff.objects.filter(id=staff.id).exists())
