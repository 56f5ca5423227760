"""
Test suite for Assets module
Tests: Asset CRUD, asset tag conflicts, maintenance records
"""
from datetime import date
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import AuditLog
from backend.assets.models import Asset, AssetMaintenance


class AssetAPITests(TestCase):
    """Test asset endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def asset_payload(self, **overrides):
        data = {
            'asset_tag': 'FL-001',
            'name': 'Forklift',
            'category': 'Vehicles',
            'serial_number': 'SN-998',
            'purchase_date': '2023-06-01',
            'purchase_price': '25000.00',
            'current_value': '18000.00',
            'location': 'Dock 2',
        }
        data.update(overrides)
        return data

    def test_create_asset(self):
        response = self.client.post('/api/v1/assets/', self.asset_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'ACTIVE')
        self.assertEqual(response.data['current_value'], '18000.00')

    def test_duplicate_asset_tag_conflict(self):
        TestDataFactory.create_asset(asset_tag='FL-001')
        response = self.client.post('/api/v1/assets/', self.asset_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'Asset with this asset tag already exists')

    def test_negative_value_rejected(self):
        response = self.client.post('/api/v1/assets/', self.asset_payload(current_value='-5.00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('current_value', response.data)

    def test_list_filters(self):
        forklift = TestDataFactory.create_asset(asset_tag='F-1', name='Forklift', category='Vehicles')
        laptop = TestDataFactory.create_asset(asset_tag='L-1', name='Laptop', category='IT', status='MAINTENANCE')
        response = self.client.get('/api/v1/assets/?category=vehicles')
        self.assertEqual([item['id'] for item in response.data], [forklift.id])
        response = self.client.get('/api/v1/assets/?status=maintenance')
        self.assertEqual([item['id'] for item in response.data], [laptop.id])
        response = self.client.get('/api/v1/assets/?search=lap')
        self.assertEqual([item['id'] for item in response.data], [laptop.id])

    def test_get_missing_asset(self):
        response = self.client.get('/api/v1/assets/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Asset not found')

    def test_patch_asset(self):
        asset = TestDataFactory.create_asset(name='Scanner')
        response = self.client.patch(f'/api/v1/assets/{asset.id}/', {'status': 'MAINTENANCE'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        asset.refresh_from_db()
        self.assertEqual(asset.status, 'MAINTENANCE')
        self.assertEqual(asset.name, 'Scanner')

    def test_delete_asset_cascades_maintenance(self):
        asset = TestDataFactory.create_asset()
        TestDataFactory.create_maintenance(asset)
        response = self.client.delete(f'/api/v1/assets/{asset.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Asset.objects.filter(id=asset.id).exists())
        self.assertEqual(AssetMaintenance.objects.count(), 0)


class MaintenanceAPITests(TestCase):
    """Test maintenance record endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.asset = TestDataFactory.create_asset(asset_tag='GEN-1', name='Generator')

    def test_log_maintenance(self):
        response = self.client.post('/api/v1/assets/maintenance/', {
            'asset_id': self.asset.id,
            'maintenance_type': 'Oil change',
            'cost': '120.00',
            'performed_date': '2024-05-10',
            'next_due_date': '2024-11-10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['asset_tag'], 'GEN-1')
        self.assertEqual(response.data['asset_name'], 'Generator')
        self.assertTrue(AuditLog.objects.filter(action='maintenance_record', object_reference='GEN-1').exists())

    def test_log_maintenance_missing_asset(self):
        response = self.client.post('/api/v1/assets/maintenance/', {
            'asset_id': 99999,
            'maintenance_type': 'Inspection',
            'performed_date': '2024-05-10',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Asset not found')

    def test_performed_date_required(self):
        response = self.client.post('/api/v1/assets/maintenance/', {
            'asset_id': self.asset.id,
            'maintenance_type': 'Inspection',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('performed_date', response.data)

    def test_next_due_before_performed_rejected(self):
        response = self.client.post('/api/v1/assets/maintenance/', {
            'asset_id': self.asset.id,
            'maintenance_type': 'Inspection',
            'performed_date': '2024-05-10',
            'next_due_date': '2024-05-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('next_due_date', response.data)

    def test_asset_history_newest_first(self):
        older = TestDataFactory.create_maintenance(self.asset, performed_date=date(2024, 1, 1))
        newer = TestDataFactory.create_maintenance(self.asset, performed_date=date(2024, 6, 1))
        TestDataFactory.create_maintenance(TestDataFactory.create_asset())
        response = self.client.get(f'/api/v1/assets/{self.asset.id}/maintenance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data], [newer.id, older.id])

    def test_asset_history_missing_asset(self):
        response = self.client.get('/api/v1/assets/99999/maintenance/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_all_maintenance(self):
        TestDataFactory.create_maintenance(self.asset)
        TestDataFactory.create_maintenance(TestDataFactory.create_asset())
        response = self.client.get('/api/v1/assets/maintenance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
