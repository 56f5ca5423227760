"""
Inventory transaction recording.

A transaction row and the matching change to the product's quantity_on_hand
are written inside one database transaction. If the change would leave the
product with negative stock, or with more than an integer column can hold,
both writes are rolled back.
"""
import logging
from django.db import transaction
from django.db.models import F, Sum, Case, When, IntegerField
from django.utils import timezone
from backend.catalog.models import Product
from backend.staff.models import Staff
from .models import MAX_QUANTITY, Inventory, InventoryTransaction

logger = logging.getLogger('backend.inventory')


class InventoryError(Exception):
    """Base class for inventory rule violations"""


class NegativeInventoryError(InventoryError):
    def __init__(self, product, resulting_quantity):
        self.product = product
        self.resulting_quantity = resulting_quantity
        super().__init__('Transaction would result in negative inventory')


class InventoryLimitError(InventoryError):
    def __init__(self, product, resulting_quantity):
        self.product = product
        self.resulting_quantity = resulting_quantity
        super().__init__(f'Transaction would exceed the maximum inventory quantity of {MAX_QUANTITY}')


class ReservationError(InventoryError):
    def __init__(self, quantity_on_hand):
        self.quantity_on_hand = quantity_on_hand
        super().__init__(f'Cannot reserve more than the {quantity_on_hand} units on hand')
def quantity_change_for(transaction_type, quantity):
    """Signed change to quantity_on_hand for a transaction"""
    if transaction_type == InventoryTransaction.RECEIVE:
        return quantity
    if transaction_type == InventoryTransaction.ISSUE:
        return -quantity
    if transaction_type == InventoryTransaction.ADJUSTMENT:
        return quantity
    raise ValueError(f"Unknown transaction type: {transaction_type}")


def record_transaction(*, product_id, transaction_type, quantity, reference_number=None,
                       notes=None, created_by=None, staff_id=None):
    """
    Record an inventory transaction and apply it to the product's stock.

    Raises Product.DoesNotExist / Staff.DoesNotExist when a referenced row is
    missing, NegativeInventoryError when quantity_on_hand would drop below
    zero and InventoryLimitError when it would pass MAX_QUANTITY. Nothing is
    persisted in any of those cases.

    Returns (InventoryTransaction, Inventory) with the inventory refreshed.
    """
    change = quantity_change_for(transaction_type, quantity)

    with transaction.atomic():
        product = Product.objects.get(pk=product_id)
        staff = Staff.objects.get(pk=staff_id) if staff_id is not None else None

        inventory_transaction = InventoryTransaction.objects.create(
            product=product,
            transaction_type=transaction_type,
            quantity=quantity,
            reference_number=reference_number,
            notes=notes,
            created_by=created_by,
            staff=staff,
        )

        # Row lock serializes concurrent transactions on the same product
        inventory, _ = Inventory.objects.select_for_update().get_or_create(product=product)
        resulting_quantity = inventory.quantity_on_hand + change

        if resulting_quantity < 0:
            logger.warning(
                f"Rejected {transaction_type} of {quantity} for product {product.pk} ({product.sku}): "
                f"on hand would be {resulting_quantity}"
            )
            raise NegativeInventoryError(product, resulting_quantity)
        if resulting_quantity > MAX_QUANTITY:
            logger.warning(
                f"Rejected {transaction_type} of {quantity} for product {product.pk} ({product.sku}): "
                f"on hand would be {resulting_quantity}, above {MAX_QUANTITY}"
            )
            raise InventoryLimitError(product, resulting_quantity)

        Inventory.objects.filter(pk=inventory.pk).update(
            quantity_on_hand=F('quantity_on_hand') + change,
            last_updated=timezone.now(),
        )
        inventory.refresh_from_db()

    logger.info(
        f"Recorded {transaction_type} #{inventory_transaction.pk} for product {product.pk} "
        f"({change:+d}); on hand now {inventory.quantity_on_hand}"
    )
    return inventory_transaction, inventory


def set_reserved_quantity(inventory, quantity_reserved):
    """
    Update the reserved quantity under a row lock; returns the refreshed row.
    Raises ReservationError when the locked row has fewer units on hand.
    """
    with transaction.atomic():
        locked = Inventory.objects.select_for_update().get(pk=inventory.pk)
        if quantity_reserved > locked.quantity_on_hand:
            raise ReservationError(locked.quantity_on_hand)
        locked.quantity_reserved = quantity_reserved
        locked.save(update_fields=['quantity_reserved', 'last_updated'])
    locked.refresh_from_db()
    return locked


def ledger_totals(product_ids=None):
    """
    Signed sum of transactions per product: {product_id: total}.
    Products without transactions are absent from the result.
    """
    queryset = InventoryTransaction.objects.all()
    if product_ids is not None:
        queryset = queryset.filter(product_id__in=product_ids)
    rows = queryset.values('product_id').annotate(
        total=Sum(Case(
            When(transaction_type=InventoryTransaction.ISSUE, then=-F('quantity')),
            default=F('quantity'),
            output_field=IntegerField(),
        ))
    )
    return {row['product_id']: row['total'] or 0 for row in rows}
