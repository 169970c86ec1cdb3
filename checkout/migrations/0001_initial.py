from decimal import Decimal

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.CharField(max_length=120, primary_key=True, serialize=False, verbose_name="id na operadora")),
                ("status", models.CharField(choices=[("created", "Criada"), ("paid", "Paga"), ("expired", "Expirada"), ("canceled", "Cancelada")], default="created", max_length=20, verbose_name="status")),
                ("plan", models.CharField(max_length=120, verbose_name="plano")),
                ("email", models.EmailField(max_length=254, verbose_name="e-mail")),
                ("name", models.CharField(max_length=200, verbose_name="nome")),
                ("price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10, verbose_name="valor")),
                ("fbp", models.CharField(blank=True, max_length=255, null=True, verbose_name="fbp")),
                ("fbc", models.CharField(blank=True, max_length=255, null=True, verbose_name="fbc")),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
            ],
            options={
                "verbose_name": "transação",
                "verbose_name_plural": "transações",
                "ordering": ("-created_at",),
            },
        ),
    ]
