from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F
from backend.catalog.models import Product
from backend.staff.models import Staff

# Largest value the 32-bit integer quantity columns hold
MAX_QUANTITY = 2147483647


class Inventory(models.Model):
    """Stock level of a product; one row per product"""
    product = models.OneToOneField(Product, on_delete=models.CASCADE, related_name='inventory')
    quantity_on_hand = models.IntegerField(default=0)
    quantity_reserved = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    quantity_available = models.GeneratedField(
        expression=F('quantity_on_hand') - F('quantity_reserved'),
        output_field=models.IntegerField(),
        db_persist=True,
    )
    last_updated = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.product.sku}: {self.quantity_on_hand} on hand"

    class Meta:
        db_table = 'inventory'
        verbose_name_plural = 'inventory'


class InventoryTransaction(models.Model):
    """Append-only ledger of stock movements"""
    RECEIVE = 'RECEIVE'
    ISSUE = 'ISSUE'
    ADJUSTMENT = 'ADJUSTMENT'

    TRANSACTION_TYPE_CHOICES = [
        (RECEIVE, 'Receive'),
        (ISSUE, 'Issue'),
        (ADJUSTMENT, 'Adjustment'),
    ]

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='transactions')
    transaction_type = models.CharField(max_length=20, choices=TRANSACTION_TYPE_CHOICES)
    # RECEIVE and ISSUE store a positive amount; ADJUSTMENT stores a signed delta
    quantity = models.IntegerField()
    reference_number = models.CharField(max_length=100, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_by = models.CharField(max_length=100, blank=True, null=True)
    staff = models.ForeignKey(Staff, on_delete=models.PROTECT, null=True, blank=True, related_name='inventory_transactions')
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def quantity_change(self):
        """Signed effect of this transaction on quantity_on_hand"""
        if self.transaction_type == self.ISSUE:
            return -self.quantity
        return self.quantity

    def __str__(self):
        return f"{self.transaction_type} {self.quantity} x {self.product_id}"

    class Meta:
        db_table = 'inventory_transactions'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['transaction_type'], name='idx_inv_txn_type'),
            models.Index(fields=['created_at'], name='idx_inv_txn_created'),
        ]
