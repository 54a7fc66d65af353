from django.apps import AppConfig


class PosConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'natea.pos'

    def ready(self):
        """Import signals when app is ready"""
        import natea.pos.cache_signals  # noqa: F401
