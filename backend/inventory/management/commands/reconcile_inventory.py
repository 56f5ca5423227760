"""
Django management command to compare Inventory.quantity_on_hand with the
signed sum of each product's transactions, and optionally repair it
"""
import logging
from django.core.management.base import BaseCommand
from django.db import transaction
from backend.catalog.models import Product
from backend.core.utils import create_audit_log
from backend.inventory.models import Inventory
from backend.inventory.services import ledger_totals

logger = logging.getLogger('backend.inventory')


class Command(BaseCommand):
    help = 'Compare inventory on-hand quantities with the transaction ledger'

    def add_arguments(self, parser):
        parser.add_argument(
            '--product-id',
            type=int,
            help='Check specific product ID only',
        )
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Rewrite quantity_on_hand to the ledger total (never below zero)',
        )

    def handle(self, *args, **options):
        product_id = options.get('product_id')
        fix = options.get('fix', False)

        self.stdout.write("=" * 80)
        self.stdout.write(self.style.SUCCESS("INVENTORY vs TRANSACTION LEDGER"))
        self.stdout.write("=" * 80)

        products = Product.objects.order_by('id')
        if product_id is not None:
            products = products.filter(id=product_id)

        product_ids = list(products.values_list('id', flat=True))
        totals = ledger_totals(product_ids)
        discrepancies = []

        with transaction.atomic():
            inventories = {
                inv.product_id: inv
                for inv in Inventory.objects.select_for_update().filter(product_id__in=product_ids)
            }
            for product in products:
                inventory = inventories.get(product.id)
                if inventory is None:
                    inventory = Inventory.objects.create(product=product)
                    self.stdout.write(self.style.WARNING(f"Created missing inventory record for {product.sku}"))

                expected = totals.get(product.id, 0)
                if inventory.quantity_on_hand == expected:
                    continue

                discrepancies.append((product, inventory.quantity_on_hand, expected))
                if fix:
                    inventory.quantity_on_hand = max(expected, 0)
                    inventory.save(update_fields=['quantity_on_hand', 'last_updated'])

        self.stdout.write(f"Products checked: {len(product_ids)}")
        self.stdout.write(f"Discrepancies found: {len(discrepancies)}")

        if not discrepancies:
            self.stdout.write(self.style.SUCCESS("✓ Inventory matches the transaction ledger."))
            return

        for product, on_hand, expected in discrepancies:
            line = f"  {product.sku} ({product.name}): on hand {on_hand}, ledger {expected} ({on_hand - expected:+d})"
            if fix:
                line += f" -> set to {max(expected, 0)}"
                create_audit_log(
                    action='inventory_reconcile',
                    model_name='Inventory',
                    object_id=product.inventory.id,
                    object_name=product.name,
                    object_reference=product.sku,
                    changes={'old': on_hand, 'new': max(expected, 0), 'ledger': expected},
                )
            self.stdout.write(self.style.WARNING(line))

        if fix:
            logger.info(f"reconcile_inventory repaired {len(discrepancies)} inventory records")
            self.stdout.write(self.style.SUCCESS(f"✓ Updated {len(discrepancies)} inventory records"))
        else:
            self.stdout.write("Run with --fix to apply the ledger totals.")
