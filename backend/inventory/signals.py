"""
Every product gets an inventory row (0 on hand, 0 reserved) when it is
created, whether through the API, the admin or a management command.
"""
import logging
from django.db.models.signals import post_save
from django.dispatch import receiver
from backend.catalog.models import Product
from .models import Inventory

logger = logging.getLogger('backend.inventory')


@receiver(post_save, sender=Product, dispatch_uid='inventory_create_for_product')
def create_inventory_for_product(sender, instance, created, raw=False, **kwargs):
    if not created or raw:
        return
    _, inventory_created = Inventory.objects.get_or_create(product=instance)
    if inventory_created:
        logger.debug(f"Created inventory record for product {instance.pk} ({instance.sku})")
