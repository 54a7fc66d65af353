"""
Cache invalidation signals
Drop the cached dashboard summary when sales change
"""
import logging

from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from django.utils import timezone

from natea.core.cache_utils import invalidate_dashboard_cache
from .models import Sale, SaleItem

logger = logging.getLogger(__name__)


def invalidate_dashboard_cache_for_sale(sale):
    """Invalidate the summary of the local day the sale belongs to, after commit"""
    try:
        day = timezone.localdate(sale.created_at) if sale.created_at else None
        sale_id = sale.pk

        # Clearing before commit lets a concurrent read re-cache the old totals
        def invalidate_after_commit():
            invalidate_dashboard_cache(day)
            logger.info(f"Invalidated dashboard cache for sale {sale_id}")

        transaction.on_commit(invalidate_after_commit)
    except Exception as e:
        logger.warning(f"Error invalidating dashboard cache: {e}")


@receiver([post_save, post_delete], sender=Sale)
def invalidate_sale_cache(sender, instance, **kwargs):
    """Invalidate dashboard cache when a sale is saved or deleted"""
    invalidate_dashboard_cache_for_sale(instance)


@receiver([post_save, post_delete], sender=SaleItem)
def invalidate_sale_item_cache(sender, instance, **kwargs):
    """Invalidate dashboard cache when sale lines change"""
    try:
        sale = Sale.objects.filter(pk=instance.sale_id).first()
    except Exception as e:
        logger.warning(f"Error in invalidate_sale_item_cache signal: {e}")
        return
    if sale is not None:
        invalidate_dashboard_cache_for_sale(sale)
