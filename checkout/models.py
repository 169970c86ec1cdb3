from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.utils import timezone


class TransactionStatus(models.TextChoices):
    CREATED = "created", "Criada"
    PAID = "paid", "Paga"
    EXPIRED = "expired", "Expirada"
    CANCELED = "canceled", "Cancelada"


class Transaction(models.Model):
    """Uma cobrança PIX criada na PushinPay; a chave é o id da operadora."""

    id = models.CharField("id na operadora", max_length=120, primary_key=True)
    status = models.CharField(
        "status",
        max_length=20,
        choices=TransactionStatus.choices,
        default=TransactionStatus.CREATED,
    )
    plan = models.CharField("plano", max_length=120)
    email = models.EmailField("e-mail", max_length=254)
    name = models.CharField("nome", max_length=200)
    price = models.DecimalField(
        "valor",
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    fbp = models.CharField("fbp", max_length=255, blank=True, null=True)
    fbc = models.CharField("fbc", max_length=255, blank=True, null=True)
    created_at = models.DateTimeField("criado em", default=timezone.now)
    updated_at = models.DateTimeField("atualizado em", auto_now=True)

    class Meta:
        verbose_name = "transação"
        verbose_name_plural = "transações"
        ordering = ("-created_at",)

    def __str__(self) -> str:
        return f"{self.id} - {self.plan} - {self.status}"
