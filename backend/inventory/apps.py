from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.inventory'
    verbose_name = 'Inventory'

    def ready(self):
        """Import signals when app is ready"""
        import backend.inventory.signals  # noqa: F401
