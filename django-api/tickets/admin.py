from django.contrib import admin

from tickets.models import Purchase, SettlementRecord


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ["reference", "buyer_name", "event", "tier", "total_amount", "status", "redeemed"]
    list_filter = ["status", "redeemed", "event"]
    search_fields = ["reference", "buyer_name", "buyer_phone", "receipt_number"]
    readonly_fields = ["admission_token", "reference", "status", "redeemed", "redeemed_at"]


@admin.register(SettlementRecord)
class SettlementRecordAdmin(admin.ModelAdmin):
    list_display = ["reference", "amount", "status", "receipt_number", "needs_reconciliation"]
    list_filter = ["status", "needs_reconciliation"]
    search_fields = ["reference", "checkout_id", "receipt_number"]
    readonly_fields = ["raw_payload", "status"]
