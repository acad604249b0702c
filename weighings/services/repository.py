from __future__ import annotations

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from django.db import transaction
from django.utils import timezone

from .collation import collation_key
from .deltas import WeighingRecord

logger = logging.getLogger(__name__)


class WeighingRepository:
    """Owns the collection of weighings handed to the delta computations.

    Views receive an instance instead of reaching for a global store; every
    read returns a fresh snapshot that callers are free to sort or filter.
    """

    def list_records(self) -> list[WeighingRecord]:
        raise NotImplementedError

    def add(
        self,
        *,
        animal_id: str,
        weight_kg: Decimal,
        recorded_at: Optional[datetime] = None,
        identifier: Optional[str] = None,
    ) -> WeighingRecord:
        raise NotImplementedError

    def delete(self, identifier: str) -> bool:
        raise NotImplementedError

    def clear(self) -> int:
        raise NotImplementedError

    def replace_all(self, records: Iterable[WeighingRecord]) -> int:
        raise NotImplementedError

    def animal_ids(self) -> list[str]:
        return sorted({record.animal_id for record in self.list_records()}, key=collation_key)

    def __len__(self) -> int:
        return len(self.list_records())


class InMemoryWeighingRepository(WeighingRepository):
    def __init__(self, records: Optional[Iterable[WeighingRecord]] = None) -> None:
        self._records: list[WeighingRecord] = list(records or [])

    def list_records(self) -> list[WeighingRecord]:
        return list(self._records)

    def add(
        self,
        *,
        animal_id: str,
        weight_kg: Decimal,
        recorded_at: Optional[datetime] = None,
        identifier: Optional[str] = None,
    ) -> WeighingRecord:
        record = WeighingRecord(
            identifier=identifier or str(uuid.uuid4()),
            recorded_at=recorded_at or timezone.now(),
            animal_id=animal_id,
            weight_kg=weight_kg,
        )
        self._records.append(record)
        logger.info("Pesaje %s registrado para %s (%s kg).", record.identifier, animal_id, weight_kg)
        return record

    def delete(self, identifier: str) -> bool:
        remaining = [record for record in self._records if record.identifier != identifier]
        removed = len(remaining) != len(self._records)
        self._records = remaining
        if removed:
            logger.info("Pesaje %s eliminado.", identifier)
        return removed

    def clear(self) -> int:
        removed = len(self._records)
        self._records = []
        logger.info("Se eliminaron %s pesajes.", removed)
        return removed

    def replace_all(self, records: Iterable[WeighingRecord]) -> int:
        self._records = list(records)
        logger.info("Se restauraron %s pesajes.", len(self._records))
        return len(self._records)


class ModelWeighingRepository(WeighingRepository):
    """Repository backed by the ``Weighing`` model."""

    def __init__(self, queryset=None) -> None:
        self._queryset = queryset

    def _get_queryset(self):
        if self._queryset is not None:
            return self._queryset.all()
        from weighings.models import Weighing

        return Weighing.objects.all()

    @property
    def model(self):
        return self._get_queryset().model

    def list_records(self) -> list[WeighingRecord]:
        return [weighing.to_record() for weighing in self._get_queryset().order_by("id")]

    def add(
        self,
        *,
        animal_id: str,
        weight_kg: Decimal,
        recorded_at: Optional[datetime] = None,
        identifier: Optional[str] = None,
    ) -> WeighingRecord:
        values = {
            "animal_id": animal_id,
            "weight_kg": weight_kg,
            "recorded_at": recorded_at or timezone.now(),
        }
        if identifier:
            values["identifier"] = identifier
        weighing = self.model.objects.create(**values)
        weighing.refresh_from_db()
        logger.info("Pesaje %s registrado para %s (%s kg).", weighing.identifier, animal_id, weight_kg)
        return weighing.to_record()

    def delete(self, identifier: str) -> bool:
        try:
            uuid.UUID(str(identifier))
        except (TypeError, ValueError):
            return False
        deleted, _ = self._get_queryset().filter(identifier=identifier).delete()
        if deleted:
            logger.info("Pesaje %s eliminado.", identifier)
        return bool(deleted)

    def clear(self) -> int:
        deleted, _ = self._get_queryset().delete()
        logger.info("Se eliminaron %s pesajes.", deleted)
        return deleted

    def replace_all(self, records: Iterable[WeighingRecord]) -> int:
        model = self.model
        instances = [
            model(
                identifier=record.identifier,
                recorded_at=record.recorded_at,
                animal_id=record.animal_id,
                weight_kg=record.weight_kg,
            )
            for record in records
        ]
        with transaction.atomic():
            self._get_queryset().delete()
            model.objects.bulk_create(instances)
        logger.info("Se restauraron %s pesajes.", len(instances))
        return len(instances)

    def __len__(self) -> int:
        return self._get_queryset().count()
