"""
Test suite for Reports module
Tests: Inventory, Assets, Low Stock, Transactions, Maintenance, Dashboard
"""
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from django.test import TestCase, override_settings
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.inventory.models import InventoryTransaction


class ReportTestCase(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)


class InventoryReportTests(ReportTestCase):
    """Test inventory report and low-stock report"""

    def setUp(self):
        super().setUp()
        self.hammer = TestDataFactory.create_product(name='Hammer', category='Tools', unit_price=Decimal('10.00'),
                                                     reorder_level=5, quantity_on_hand=50)
        self.drill = TestDataFactory.create_product(name='Drill', category='Tools', unit_price=Decimal('20.00'),
                                                    reorder_level=5, quantity_on_hand=3)
        self.tape = TestDataFactory.create_product(name='Tape', category=None, unit_price=Decimal('5.00'),
                                                   reorder_level=10, quantity_on_hand=0)
        self.gloves = TestDataFactory.create_product(name='Gloves', category='', unit_price=Decimal('1.00'),
                                                     reorder_level=0, quantity_on_hand=4)
        self.chisel = TestDataFactory.create_product(name='Chisel', category='Tools', unit_price=Decimal('2.00'),
                                                     reorder_level=0, quantity_on_hand=0)

    def test_inventory_report_totals(self):
        response = self.client.get('/api/v1/reports/inventory/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_products'], 5)
        self.assertEqual(response.data['total_value'], 564.0)
        self.assertEqual(response.data['low_stock_items'], 1)
        self.assertEqual(response.data['out_of_stock_items'], 2)

    def test_inventory_report_categories(self):
        """Missing and blank categories are grouped as Uncategorized, highest value first"""
        response = self.client.get('/api/v1/reports/inventory/')
        self.assertEqual(response.data['categories'], [
            {'category': 'Tools', 'count': 3, 'value': 560.0},
            {'category': 'Uncategorized', 'count': 2, 'value': 4.0},
        ])

    def test_low_stock_report(self):
        """Most depleted first; zero reorder level sorts last"""
        response = self.client.get('/api/v1/reports/low-stock/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        products = response.data['products']
        self.assertEqual([p['id'] for p in products], [self.tape.id, self.drill.id, self.chisel.id])
        self.assertEqual(products[1]['quantity_on_hand'], 3)
        self.assertEqual(products[1]['reorder_level'], 5)
        self.assertEqual(products[1]['unit_price'], 20.0)

    def test_empty_inventory_report(self):
        from backend.catalog.models import Product
        Product.objects.all().delete()
        response = self.client.get('/api/v1/reports/inventory/')
        self.assertEqual(response.data['total_products'], 0)
        self.assertEqual(response.data['total_value'], 0.0)
        self.assertEqual(response.data['categories'], [])


class AssetReportTests(ReportTestCase):

    def test_asset_report(self):
        TestDataFactory.create_asset(category='Vehicles', current_value=Decimal('1000.00'))
        TestDataFactory.create_asset(category='Vehicles', current_value=Decimal('500.00'), status='MAINTENANCE')
        TestDataFactory.create_asset(category=None, current_value=None)
        response = self.client.get('/api/v1/reports/assets/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_assets'], 3)
        self.assertEqual(response.data['total_value'], 1500.0)
        self.assertEqual(response.data['active_assets'], 2)
        self.assertEqual(response.data['maintenance_assets'], 1)
        self.assertEqual(response.data['categories'], [
            {'category': 'Vehicles', 'count': 2, 'value': 1500.0},
            {'category': 'Uncategorized', 'count': 1, 'value': 0.0},
        ])


@override_settings(TIME_ZONE='UTC')
class TransactionReportTests(ReportTestCase):
    """Test transaction report date filtering"""

    def setUp(self):
        super().setUp()
        self.staff = TestDataFactory.create_staff(first_name='Lee', last_name='Park')
        self.product = TestDataFactory.create_product(name='Rope', sku='ROPE-1')
        self.early = TestDataFactory.create_transaction(self.product, 'RECEIVE', 10, staff=self.staff)
        self.late = TestDataFactory.create_transaction(self.product, 'ISSUE', 2)
        InventoryTransaction.objects.filter(pk=self.early.pk).update(
            created_at=datetime(2024, 1, 10, 9, 0, tzinfo=dt_timezone.utc))
        InventoryTransaction.objects.filter(pk=self.late.pk).update(
            created_at=datetime(2024, 1, 15, 23, 30, tzinfo=dt_timezone.utc))

    def ids(self, response):
        return [t['id'] for t in response.data['transactions']]

    def test_all_transactions_newest_first(self):
        response = self.client.get('/api/v1/reports/transactions/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.ids(response), [self.late.id, self.early.id])
        early = response.data['transactions'][1]
        self.assertEqual(early['product_name'], 'Rope')
        self.assertEqual(early['product_sku'], 'ROPE-1')
        self.assertEqual(early['staff_name'], 'Lee Park')

    def test_end_date_includes_whole_day(self):
        response = self.client.get('/api/v1/reports/transactions/?end_date=2024-01-15')
        self.assertEqual(self.ids(response), [self.late.id, self.early.id])

    def test_start_date(self):
        response = self.client.get('/api/v1/reports/transactions/?start_date=2024-01-11')
        self.assertEqual(self.ids(response), [self.late.id])

    def test_datetime_bounds(self):
        response = self.client.get('/api/v1/reports/transactions/?end_date=2024-01-15T12:00:00Z')
        self.assertEqual(self.ids(response), [self.early.id])

    def test_malformed_date(self):
        response = self.client.get('/api/v1/reports/transactions/?start_date=last-tuesday')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('start_date', response.data['error'])

    def test_impossible_date(self):
        response = self.client.get('/api/v1/reports/transactions/?end_date=2024-02-30')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class MaintenanceReportTests(ReportTestCase):

    def test_maintenance_report(self):
        asset = TestDataFactory.create_asset(asset_tag='PUMP-1', name='Pump')
        older = TestDataFactory.create_maintenance(asset, performed_date=date(2024, 2, 1))
        newer = TestDataFactory.create_maintenance(asset, performed_date=date(2024, 8, 1))
        response = self.client.get('/api/v1/reports/maintenance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        records = response.data['maintenance']
        self.assertEqual([r['id'] for r in records], [newer.id, older.id])
        self.assertEqual(records[0]['asset_tag'], 'PUMP-1')
        self.assertEqual(records[0]['asset_name'], 'Pump')


class DashboardTests(ReportTestCase):

    def test_dashboard(self):
        for i in range(7):
            TestDataFactory.create_product(reorder_level=10, quantity_on_hand=i)
        TestDataFactory.create_product(reorder_level=1, quantity_on_hand=100)
        TestDataFactory.create_asset(current_value=Decimal('250.00'))
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['inventory']['total_products'], 8)
        self.assertNotIn('categories', response.data['inventory'])
        self.assertEqual(response.data['assets']['total_value'], 250.0)
        self.assertEqual(response.data['low_stock_count'], 7)
        self.assertEqual(len(response.data['low_stock']), 5)
        self.assertEqual(response.data['low_stock'][0]['quantity_on_hand'], 0)

    def test_reports_require_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/reports/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
