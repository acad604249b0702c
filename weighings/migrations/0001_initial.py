from django.db import migrations, models
import django.utils.timezone
import uuid


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Weighing",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "identifier",
                    models.UUIDField(default=uuid.uuid4, editable=False, unique=True, verbose_name="Identificador"),
                ),
                ("recorded_at", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Fecha")),
                ("animal_id", models.CharField(db_index=True, max_length=64, verbose_name="ID del cerdo")),
                ("weight_kg", models.DecimalField(decimal_places=3, max_digits=9, verbose_name="Peso (kg)")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Pesaje",
                "verbose_name_plural": "Pesajes",
                "ordering": ("id",),
            },
        ),
    ]
