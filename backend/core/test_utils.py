"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.catalog.models import Product
from backend.staff.models import Staff
from backend.assets.models import Asset, AssetMaintenance
from backend.inventory.models import Inventory
from backend.inventory.services import record_transaction
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )
        return user

    @staticmethod
    def create_product(name=None, sku=None, category=None, unit_price=None, reorder_level=10,
                       quantity_on_hand=0, unit_of_measure='each'):
        """Create a test product; its inventory row is created by the post_save signal"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if not sku:
            sku = f'SKU_{TestDataFactory.random_string(8)}'
        if unit_price is None:
            unit_price = Decimal('10.00')
        product = Product.objects.create(
            name=name,
            sku=sku,
            category=category,
            unit_price=unit_price,
            reorder_level=reorder_level,
            unit_of_measure=unit_of_measure
        )
        if quantity_on_hand:
            # Seed stock directly, bypassing the transaction ledger
            Inventory.objects.filter(product=product).update(quantity_on_hand=quantity_on_hand)
        return product

    @staticmethod
    def create_staff(employee_id=None, first_name='Test', last_name=None, email=None,
                     department='Warehouse', status='ACTIVE'):
        """Create a test staff member"""
        if not employee_id:
            employee_id = f'EMP_{TestDataFactory.random_string(6).upper()}'
        if not last_name:
            last_name = f'Staff_{TestDataFactory.random_string(4)}'
        return Staff.objects.create(
            employee_id=employee_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            department=department,
            position='Clerk',
            hire_date=timezone.now().date(),
            status=status
        )

    @staticmethod
    def create_transaction(product, transaction_type='RECEIVE', quantity=10, staff=None,
                           reference_number=None, created_by='tester'):
        """Record a transaction through the inventory service so stock stays consistent"""
        inventory_transaction, _ = record_transaction(
            product_id=product.id,
            transaction_type=transaction_type,
            quantity=quantity,
            reference_number=reference_number,
            created_by=created_by,
            staff_id=staff.id if staff else None,
        )
        return inventory_transaction

    @staticmethod
    def create_asset(asset_tag=None, name=None, category=None, status='ACTIVE', current_value=None):
        """Create a test asset"""
        if not asset_tag:
            asset_tag = f'AST_{TestDataFactory.random_string(6).upper()}'
        if not name:
            name = f'Asset_{TestDataFactory.random_string(6)}'
        return Asset.objects.create(
            asset_tag=asset_tag,
            name=name,
            category=category,
            status=status,
            current_value=current_value,
            purchase_date=timezone.now().date()
        )

    @staticmethod
    def create_maintenance(asset, maintenance_type='Inspection', performed_date=None, cost=None):
        """Create a test maintenance record"""
        if performed_date is None:
            performed_date = timezone.now().date()
        return AssetMaintenance.objects.create(
            asset=asset,
            maintenance_type=maintenance_type,
            performed_date=performed_date,
            cost=cost,
            performed_by='Tech'
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
