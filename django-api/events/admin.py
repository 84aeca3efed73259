from django.contrib import admin

from events.models import Event, TicketTier


class TicketTierInline(admin.TabularInline):
    model = TicketTier
    extra = 1
    readonly_fields = ["sold"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["name", "host", "starts_at", "ends_at", "total_tickets_sold", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name", "location"]
    readonly_fields = ["total_tickets_sold", "total_revenue"]
    inlines = [TicketTierInline]


@admin.register(TicketTier)
class TicketTierAdmin(admin.ModelAdmin):
    list_display = ["name", "event", "price", "quantity", "sold"]
    list_filter = ["event"]
    readonly_fields = ["sold"]
