from django.contrib import admin

from .models import Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ("id", "plan", "price", "status", "email", "created_at")
    list_filter = ("status", "plan")
    search_fields = ("id", "email", "name")
    ordering = ("-created_at",)
    readonly_fields = (
        "id",
        "plan",
        "price",
        "email",
        "name",
        "fbp",
        "fbc",
        "created_at",
        "updated_at",
    )
