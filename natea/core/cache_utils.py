"""
Caching helpers for expensive summary queries.

Uses the configured Django cache (Redis in production, local memory in
development and tests).
"""
from django.core.cache import cache
from django.utils import timezone
import hashlib
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
DASHBOARD_SUMMARY_CACHE_TTL = 300  # 5 minutes


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def dashboard_summary_cache_key(day=None):
    day = day or timezone.localdate()
    return make_cache_key("dashboard_summary", day.isoformat())


def get_cached_dashboard_summary(day=None):
    """Returns tuple: (cached_data or None, cache_key)"""
    cache_key = dashboard_summary_cache_key(day)
    cached_data = cache.get(cache_key)
    if cached_data is not None:
        logger.debug(f"Cache HIT for dashboard summary: {cache_key}")
    return cached_data, cache_key


def cache_dashboard_summary(cache_key, data, ttl=DASHBOARD_SUMMARY_CACHE_TTL):
    cache.set(cache_key, data, ttl)
    logger.debug(f"Cached dashboard summary: {cache_key}")


def invalidate_dashboard_cache(day=None):
    """Drop the cached summary for a day (today by default)"""
    cache.delete(dashboard_summary_cache_key(day))
    logger.debug("Invalidated dashboard summary cache")
