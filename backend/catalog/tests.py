"""
Test suite for Catalog module
Tests: Product CRUD, SKU conflicts, inventory row creation, list filters
"""
from django.test import TestCase
from rest_framework import status
from decimal import Decimal
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.models import AuditLog
from backend.catalog.models import Product
from backend.inventory.models import Inventory


class ProductModelTests(TestCase):
    """Test Product model behaviour"""

    def test_product_str(self):
        product = TestDataFactory.create_product(name='Widget', sku='W-1')
        self.assertEqual(str(product), 'Widget (W-1)')

    def test_inventory_created_with_product(self):
        """Every new product gets a zeroed inventory row"""
        product = TestDataFactory.create_product()
        inventory = Inventory.objects.get(product=product)
        self.assertEqual(inventory.quantity_on_hand, 0)
        self.assertEqual(inventory.quantity_reserved, 0)


class ProductAPITests(TestCase):
    """Test product endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def product_payload(self, **overrides):
        data = {
            'name': 'Copper Wire',
            'sku': 'CW-100',
            'category': 'Electrical',
            'unit_of_measure': 'meter',
            'unit_price': '2.50',
            'reorder_level': 20,
        }
        data.update(overrides)
        return data

    def test_requires_authentication(self):
        """Unauthenticated requests are rejected"""
        self.client.logout()
        response = self.client.get('/api/v1/products/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_product(self):
        response = self.client.post('/api/v1/products/', self.product_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sku'], 'CW-100')
        self.assertEqual(response.data['unit_price'], '2.50')
        self.assertEqual(response.data['inventory']['quantity_on_hand'], 0)
        self.assertEqual(response.data['inventory']['quantity_available'], 0)
        self.assertTrue(Product.objects.filter(sku='CW-100').exists())

    def test_create_product_writes_audit_log(self):
        response = self.client.post('/api/v1/products/', self.product_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        log = AuditLog.objects.get(action='create', model_name='Product')
        self.assertEqual(log.object_id, str(response.data['id']))
        self.assertEqual(log.object_reference, 'CW-100')
        self.assertEqual(log.user, self.user)

    def test_create_duplicate_sku_conflict(self):
        """A second product with the same SKU returns 409"""
        TestDataFactory.create_product(sku='CW-100')
        response = self.client.post('/api/v1/products/', self.product_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'Product with this SKU already exists')
        self.assertEqual(Product.objects.filter(sku='CW-100').count(), 1)

    def test_create_product_missing_fields(self):
        response = self.client.post('/api/v1/products/', {'name': 'No SKU'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sku', response.data)
        self.assertIn('unit_of_measure', response.data)

    def test_create_product_negative_price(self):
        response = self.client.post('/api/v1/products/', self.product_payload(unit_price='-1.00'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('unit_price', response.data)

    def test_get_product(self):
        product = TestDataFactory.create_product(name='Bolt', quantity_on_hand=7)
        response = self.client.get(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Bolt')
        self.assertEqual(response.data['inventory']['quantity_on_hand'], 7)

    def test_get_missing_product(self):
        response = self.client.get('/api/v1/products/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Product not found')

    def test_patch_changes_only_given_fields(self):
        product = TestDataFactory.create_product(name='Bolt', sku='B-1', unit_price=Decimal('1.00'))
        response = self.client.patch(f'/api/v1/products/{product.id}/', {'unit_price': '1.25'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.unit_price, Decimal('1.25'))
        self.assertEqual(product.name, 'Bolt')
        self.assertEqual(product.sku, 'B-1')

    def test_put_replaces_product(self):
        product = TestDataFactory.create_product()
        response = self.client.put(f'/api/v1/products/{product.id}/', self.product_payload(name='Renamed'), format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.name, 'Renamed')
        self.assertEqual(product.sku, 'CW-100')

    def test_update_to_existing_sku_conflict(self):
        TestDataFactory.create_product(sku='TAKEN')
        product = TestDataFactory.create_product(sku='MINE')
        response = self.client.patch(f'/api/v1/products/{product.id}/', {'sku': 'TAKEN'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        product.refresh_from_db()
        self.assertEqual(product.sku, 'MINE')

    def test_delete_product_cascades(self):
        product = TestDataFactory.create_product()
        TestDataFactory.create_transaction(product, 'RECEIVE', 5)
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(id=product.id).exists())
        self.assertFalse(Inventory.objects.filter(product_id=product.id).exists())
        response = self.client.get(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ProductFilterTests(TestCase):
    """Test product list filters"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.hammer = TestDataFactory.create_product(name='Claw Hammer', sku='HAM-1', category='Tools',
                                                     reorder_level=5, quantity_on_hand=50)
        self.drill = TestDataFactory.create_product(name='Cordless Drill', sku='DRL-1', category='Tools',
                                                    reorder_level=5, quantity_on_hand=3)
        self.tape = TestDataFactory.create_product(name='Duct Tape', sku='TAPE-1', category='Supplies',
                                                   reorder_level=10, quantity_on_hand=0)

    def ids(self, response):
        return sorted(item['id'] for item in response.data)

    def test_list_returns_all_products(self):
        response = self.client.get('/api/v1/products/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsInstance(response.data, list)
        self.assertEqual(len(response.data), 3)

    def test_list_ordered_by_name(self):
        response = self.client.get('/api/v1/products/')
        names = [item['name'] for item in response.data]
        self.assertEqual(names, ['Claw Hammer', 'Cordless Drill', 'Duct Tape'])

    def test_search_matches_name_and_sku(self):
        response = self.client.get('/api/v1/products/?search=drill')
        self.assertEqual(self.ids(response), [self.drill.id])
        response = self.client.get('/api/v1/products/?search=tape-1')
        self.assertEqual(self.ids(response), [self.tape.id])

    def test_category_filter_is_case_insensitive(self):
        response = self.client.get('/api/v1/products/?category=tools')
        self.assertEqual(self.ids(response), sorted([self.hammer.id, self.drill.id]))

    def test_low_stock_filter_excludes_out_of_stock(self):
        response = self.client.get('/api/v1/products/?low_stock=true')
        self.assertEqual(self.ids(response), [self.drill.id])

    def test_out_of_stock_filter(self):
        response = self.client.get('/api/v1/products/?out_of_stock=true')
        self.assertEqual(self.ids(response), [self.tape.id])

    def test_false_flag_does_not_filter(self):
        response = self.client.get('/api/v1/products/?low_stock=false')
        self.assertEqual(len(response.data), 3)
