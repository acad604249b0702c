import uuid

from django.db import models
from django.utils import timezone

from weighings.services.deltas import WeighingRecord


class Weighing(models.Model):
    """Single weight capture for one animal."""

    identifier = models.UUIDField("Identificador", default=uuid.uuid4, unique=True, editable=False)
    recorded_at = models.DateTimeField("Fecha", default=timezone.now)
    animal_id = models.CharField("ID del cerdo", max_length=64, db_index=True)
    weight_kg = models.DecimalField("Peso (kg)", max_digits=9, decimal_places=3)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Pesaje"
        verbose_name_plural = "Pesajes"
        # Insertion order; the stable sort keeps it for equal animal and date.
        ordering = ("id",)

    def __str__(self) -> str:
        return f"{self.animal_id} · {self.weight_kg} kg"

    def to_record(self) -> WeighingRecord:
        return WeighingRecord(
            identifier=str(self.identifier),
            recorded_at=self.recorded_at,
            animal_id=self.animal_id,
            weight_kg=self.weight_kg,
        )
