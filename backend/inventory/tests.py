"""
Test suite for Inventory module
Tests: transaction recording and rollback, sign rules, reservations, reconcile command
"""
from io import StringIO
from unittest import mock
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import AuditLog
from backend.inventory.models import MAX_QUANTITY, Inventory, InventoryTransaction
from backend.inventory.services import (
    InventoryLimitError, NegativeInventoryError, ReservationError,
    ledger_totals, record_transaction, set_reserved_quantity,
)


class InventoryServiceTests(TestCase):
    """Test the transaction recording service directly"""

    def setUp(self):
        self.product = TestDataFactory.create_product()

    def test_receive_then_issue(self):
        record_transaction(product_id=self.product.id, transaction_type='RECEIVE', quantity=10)
        _, inventory = record_transaction(product_id=self.product.id, transaction_type='ISSUE', quantity=4)
        self.assertEqual(inventory.quantity_on_hand, 6)

    def test_negative_adjustment(self):
        record_transaction(product_id=self.product.id, transaction_type='RECEIVE', quantity=10)
        _, inventory = record_transaction(product_id=self.product.id, transaction_type='ADJUSTMENT', quantity=-3)
        self.assertEqual(inventory.quantity_on_hand, 7)

    def test_negative_inventory_rolls_back(self):
        """Neither the transaction row nor the stock change survives a rejected issue"""
        record_transaction(product_id=self.product.id, transaction_type='RECEIVE', quantity=2)
        with self.assertRaises(NegativeInventoryError):
            record_transaction(product_id=self.product.id, transaction_type='ISSUE', quantity=5)
        self.assertEqual(Inventory.objects.get(product=self.product).quantity_on_hand, 2)
        self.assertEqual(InventoryTransaction.objects.filter(product=self.product).count(), 1)

    def test_exceeding_maximum_rolls_back(self):
        """Stock above the integer column maximum is rejected like negative stock"""
        Inventory.objects.filter(product=self.product).update(quantity_on_hand=MAX_QUANTITY - 5)
        with self.assertRaises(InventoryLimitError):
            record_transaction(product_id=self.product.id, transaction_type='RECEIVE', quantity=10)
        self.assertEqual(Inventory.objects.get(product=self.product).quantity_on_hand, MAX_QUANTITY - 5)
        self.assertEqual(InventoryTransaction.objects.filter(product=self.product).count(), 0)

    def test_reservation_checked_against_locked_row(self):
        """Stock issued after the inventory was read still bounds the reservation"""
        record_transaction(product_id=self.product.id, transaction_type='RECEIVE', quantity=10)
        inventory = Inventory.objects.get(product=self.product)
        record_transaction(product_id=self.product.id, transaction_type='ISSUE', quantity=8)
        with self.assertRaises(ReservationError):
            set_reserved_quantity(inventory, 5)
        self.assertEqual(Inventory.objects.get(product=self.product).quantity_reserved, 0)
        updated = set_reserved_quantity(inventory, 2)
        self.assertEqual(updated.quantity_available, 0)

    def test_recreates_missing_inventory_row(self):
        Inventory.objects.filter(product=self.product).delete()
        _, inventory = record_transaction(product_id=self.product.id, transaction_type='RECEIVE', quantity=4)
        self.assertEqual(inventory.quantity_on_hand, 4)

    def test_ledger_totals(self):
        other = TestDataFactory.create_product()
        TestDataFactory.create_transaction(self.product, 'RECEIVE', 10)
        TestDataFactory.create_transaction(self.product, 'ISSUE', 3)
        TestDataFactory.create_transaction(self.product, 'ADJUSTMENT', -2)
        totals = ledger_totals()
        self.assertEqual(totals[self.product.id], 5)
        self.assertNotIn(other.id, totals)


class TransactionAPITests(TestCase):
    """Test transaction endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='clerk')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(name='Pallet Wrap', sku='PW-1')
        self.staff = TestDataFactory.create_staff(first_name='Sam', last_name='Jones')

    def post_transaction(self, **data):
        payload = {'product_id': self.product.id}
        payload.update(data)
        return self.client.post('/api/v1/transactions/', payload, format='json')

    def on_hand(self):
        return Inventory.objects.get(product=self.product).quantity_on_hand

    def test_receive_increases_stock(self):
        response = self.post_transaction(transaction_type='RECEIVE', quantity=25, reference_number='PO-7',
                                         staff_id=self.staff.id)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['product_name'], 'Pallet Wrap')
        self.assertEqual(response.data['staff_name'], 'Sam Jones')
        self.assertEqual(response.data['quantity_change'], 25)
        self.assertEqual(self.on_hand(), 25)

    def test_created_by_defaults_to_username(self):
        response = self.post_transaction(transaction_type='RECEIVE', quantity=1)
        self.assertEqual(response.data['created_by'], 'clerk')

    def test_issue_decreases_stock(self):
        TestDataFactory.create_transaction(self.product, 'RECEIVE', 10)
        response = self.post_transaction(transaction_type='ISSUE', quantity=4)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['quantity_change'], -4)
        self.assertEqual(self.on_hand(), 6)

    def test_issue_beyond_stock_rejected(self):
        TestDataFactory.create_transaction(self.product, 'RECEIVE', 3)
        response = self.post_transaction(transaction_type='ISSUE', quantity=4)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Transaction would result in negative inventory')
        self.assertEqual(self.on_hand(), 3)
        self.assertEqual(InventoryTransaction.objects.count(), 1)

    def test_adjustment_below_zero_rejected(self):
        response = self.post_transaction(transaction_type='ADJUSTMENT', quantity=-1)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.on_hand(), 0)

    def test_sign_rules(self):
        for transaction_type, quantity in (('RECEIVE', 0), ('RECEIVE', -5), ('ISSUE', -1), ('ADJUSTMENT', 0)):
            response = self.post_transaction(transaction_type=transaction_type, quantity=quantity)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, (transaction_type, quantity))
            self.assertIn('quantity', response.data)
        self.assertEqual(InventoryTransaction.objects.count(), 0)

    def test_quantity_outside_integer_range_rejected(self):
        for transaction_type, quantity in (('RECEIVE', 2 ** 31), ('RECEIVE', 2 ** 63), ('ADJUSTMENT', -(2 ** 31))):
            response = self.post_transaction(transaction_type=transaction_type, quantity=quantity)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, quantity)
            self.assertIn('quantity', response.data)
        self.assertEqual(InventoryTransaction.objects.count(), 0)

    def test_ids_outside_integer_range_rejected(self):
        response = self.post_transaction(product_id=2 ** 63, transaction_type='RECEIVE', quantity=1)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product_id', response.data)
        response = self.post_transaction(transaction_type='RECEIVE', quantity=1, staff_id=2 ** 63)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('staff_id', response.data)

    def test_receive_past_maximum_rejected(self):
        first = self.post_transaction(transaction_type='RECEIVE', quantity=1500000000)
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        second = self.post_transaction(transaction_type='RECEIVE', quantity=1500000000)
        self.assertEqual(second.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('maximum inventory quantity', second.data['error'])
        self.assertEqual(self.on_hand(), 1500000000)
        self.assertEqual(InventoryTransaction.objects.count(), 1)

    def test_list_out_of_range_id_filter(self):
        response = self.client.get('/api/v1/transactions/?product_id=99999999999999999999')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/transactions/?staff_id=0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unexpected_error_returns_json_500(self):
        with mock.patch('backend.inventory.views.record_transaction', side_effect=RuntimeError('disk full')):
            with self.assertLogs('backend.inventory', level='ERROR') as logs:
                response = self.post_transaction(transaction_type='RECEIVE', quantity=1)
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response['Content-Type'], 'application/json')
        self.assertEqual(response.json(), {'error': 'An unexpected error occurred'})
        self.assertIn('disk full', logs.output[0])

    def test_unknown_type_rejected(self):
        response = self.post_transaction(transaction_type='TRANSFER', quantity=1)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('transaction_type', response.data)

    def test_missing_product(self):
        response = self.post_transaction(product_id=99999, transaction_type='RECEIVE', quantity=1)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Product not found')

    def test_missing_staff_records_nothing(self):
        response = self.post_transaction(transaction_type='RECEIVE', quantity=1, staff_id=99999)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Staff member not found')
        self.assertEqual(InventoryTransaction.objects.count(), 0)
        self.assertEqual(self.on_hand(), 0)

    def test_transaction_audit_log(self):
        response = self.post_transaction(transaction_type='RECEIVE', quantity=2)
        log = AuditLog.objects.get(action='inventory_transaction')
        self.assertEqual(log.object_id, str(response.data['id']))
        self.assertEqual(log.changes['new_quantity_on_hand'], 2)

    def test_list_newest_first_and_filters(self):
        first = TestDataFactory.create_transaction(self.product, 'RECEIVE', 5, staff=self.staff)
        second = TestDataFactory.create_transaction(self.product, 'ISSUE', 1)
        other = TestDataFactory.create_product()
        TestDataFactory.create_transaction(other, 'RECEIVE', 1)

        response = self.client.get(f'/api/v1/transactions/?product_id={self.product.id}')
        self.assertEqual([item['id'] for item in response.data], [second.id, first.id])

        response = self.client.get(f'/api/v1/transactions/?staff_id={self.staff.id}')
        self.assertEqual([item['id'] for item in response.data], [first.id])

        response = self.client.get('/api/v1/transactions/?transaction_type=issue')
        self.assertEqual([item['id'] for item in response.data], [second.id])

    def test_list_invalid_product_id(self):
        response = self.client.get('/api/v1/transactions/?product_id=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_transaction_detail(self):
        txn = TestDataFactory.create_transaction(self.product, 'RECEIVE', 5)
        response = self.client.get(f'/api/v1/transactions/{txn.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity'], 5)
        response = self.client.get('/api/v1/transactions/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_transactions_are_append_only(self):
        txn = TestDataFactory.create_transaction(self.product, 'RECEIVE', 5)
        response = self.client.delete(f'/api/v1/transactions/{txn.id}/')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        response = self.client.patch(f'/api/v1/transactions/{txn.id}/', {'quantity': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_product_transactions(self):
        txn = TestDataFactory.create_transaction(self.product, 'RECEIVE', 5)
        TestDataFactory.create_transaction(TestDataFactory.create_product(), 'RECEIVE', 5)
        response = self.client.get(f'/api/v1/products/{self.product.id}/transactions/')
        self.assertEqual([item['id'] for item in response.data], [txn.id])
        response = self.client.get('/api/v1/products/99999/transactions/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class InventoryAPITests(TestCase):
    """Test inventory level endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(sku='INV-1', reorder_level=4)
        TestDataFactory.create_transaction(self.product, 'RECEIVE', 10)

    def test_inventory_list(self):
        response = self.client.get('/api/v1/inventory/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['product_sku'], 'INV-1')
        self.assertEqual(response.data[0]['reorder_level'], 4)

    def test_inventory_detail(self):
        response = self.client.get(f'/api/v1/inventory/{self.product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity_on_hand'], 10)
        self.assertEqual(response.data['quantity_available'], 10)

    def test_inventory_detail_missing(self):
        response = self.client.get('/api/v1/inventory/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Inventory record not found')

    def test_reserve_updates_available(self):
        response = self.client.patch(f'/api/v1/inventory/{self.product.id}/', {'quantity_reserved': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['quantity_reserved'], 3)
        self.assertEqual(response.data['quantity_available'], 7)
        self.assertTrue(AuditLog.objects.filter(action='reservation_change').exists())

    def test_reserve_more_than_on_hand_rejected(self):
        response = self.client.patch(f'/api/v1/inventory/{self.product.id}/', {'quantity_reserved': 11}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity_reserved', response.data)

    def test_negative_reservation_rejected(self):
        response = self.client.patch(f'/api/v1/inventory/{self.product.id}/', {'quantity_reserved': -1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_on_hand_not_writable(self):
        response = self.client.patch(f'/api/v1/inventory/{self.product.id}/',
                                     {'quantity_reserved': 0, 'quantity_on_hand': 500}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Inventory.objects.get(product=self.product).quantity_on_hand, 10)


class ReconcileInventoryCommandTests(TestCase):
    """Test the reconcile_inventory management command"""

    def setUp(self):
        self.product = TestDataFactory.create_product(sku='REC-1')
        TestDataFactory.create_transaction(self.product, 'RECEIVE', 8)

    def run_command(self, *args):
        out = StringIO()
        call_command('reconcile_inventory', *args, stdout=out)
        return out.getvalue()

    def test_no_discrepancies(self):
        output = self.run_command()
        self.assertIn('Discrepancies found: 0', output)

    def test_reports_without_fixing(self):
        Inventory.objects.filter(product=self.product).update(quantity_on_hand=20)
        output = self.run_command()
        self.assertIn('Discrepancies found: 1', output)
        self.assertIn('REC-1', output)
        self.assertEqual(Inventory.objects.get(product=self.product).quantity_on_hand, 20)

    def test_fix_rewrites_on_hand(self):
        Inventory.objects.filter(product=self.product).update(quantity_on_hand=20)
        self.run_command('--fix')
        self.assertEqual(Inventory.objects.get(product=self.product).quantity_on_hand, 8)
        self.assertTrue(AuditLog.objects.filter(action='inventory_reconcile', object_reference='REC-1').exists())

    def test_single_product(self):
        other = TestDataFactory.create_product()
        Inventory.objects.filter(product=other).update(quantity_on_hand=5)
        output = self.run_command('--product-id', str(self.product.id))
        self.assertIn('Products checked: 1', output)
        self.assertIn('Discrepancies found: 0', output)

    def test_product_id_zero_matches_nothing(self):
        Inventory.objects.filter(product=self.product).update(quantity_on_hand=20)
        output = self.run_command('--product-id', '0', '--fix')
        self.assertIn('Products checked: 0', output)
        self.assertEqual(Inventory.objects.get(product=self.product).quantity_on_hand, 20)
