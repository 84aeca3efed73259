"""Django signals for cache invalidation.

QuerySet.update() does not send these signals; code that bumps counters in
bulk invalidates explicitly through events.cache.
"""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from events.cache import invalidate_event
from events.models import Event, TicketTier


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    invalidate_event(instance.id)


@receiver([post_save, post_delete], sender=TicketTier)
def invalidate_tier_cache(sender, instance, **kwargs):
    """Invalidate caches when a ticket tier is saved or deleted."""
    invalidate_event(instance.event_id)
