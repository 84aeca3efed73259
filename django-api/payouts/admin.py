from django.contrib import admin

from payouts.models import HostBalance, Withdrawal


@admin.register(HostBalance)
class HostBalanceAdmin(admin.ModelAdmin):
    list_display = ["host", "available", "updated_at"]
    readonly_fields = ["available"]


@admin.register(Withdrawal)
class WithdrawalAdmin(admin.ModelAdmin):
    list_display = ["host", "event", "amount", "status", "created_at", "processed_at"]
    list_filter = ["status"]
    search_fields = ["host__username", "mpesa_number", "account_number"]
    readonly_fields = ["amount", "status", "processed_at"]
