from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from .collation import collation_key


@dataclass(frozen=True)
class WeighingRecord:
    identifier: str
    recorded_at: datetime
    animal_id: str
    weight_kg: Decimal


@dataclass(frozen=True)
class AnnotatedWeighing:
    """A weighing plus its change against the previous weighing of the same animal.

    ``delta_kg`` is ``None`` when no earlier weighing exists for the animal,
    which is not the same as a zero change.
    """

    record: WeighingRecord
    delta_kg: Optional[Decimal]

    @property
    def identifier(self) -> str:
        return self.record.identifier

    @property
    def recorded_at(self) -> datetime:
        return self.record.recorded_at

    @property
    def animal_id(self) -> str:
        return self.record.animal_id

    @property
    def weight_kg(self) -> Decimal:
        return self.record.weight_kg


def _animal_then_time(record) -> tuple:
    return (collation_key(record.animal_id), record.recorded_at)


def _normalize_filter(animal_id: Optional[str]) -> str:
    return (animal_id or "").strip()


def sort_records(records: Iterable[WeighingRecord], animal_id: Optional[str] = None) -> list[WeighingRecord]:
    """Order records by animal then time, or only by time when filtered to one animal."""
    selected = _normalize_filter(animal_id)
    if not selected:
        return sorted(records, key=_animal_then_time)
    return sorted(
        (record for record in records if record.animal_id == selected),
        key=lambda record: record.recorded_at,
    )


def annotate_deltas(records: Iterable[WeighingRecord]) -> list[AnnotatedWeighing]:
    """Attach to every record the weight change against the animal's previous record.

    The walk always uses the per-animal chronological order, whatever order
    the caller displays afterwards.
    """
    previous_by_animal: dict[str, WeighingRecord] = {}
    annotated: list[AnnotatedWeighing] = []
    for record in sort_records(records):
        previous = previous_by_animal.get(record.animal_id)
        delta = record.weight_kg - previous.weight_kg if previous is not None else None
        annotated.append(AnnotatedWeighing(record=record, delta_kg=delta))
        previous_by_animal[record.animal_id] = record
    return annotated


def select_latest(annotated: Iterable[AnnotatedWeighing]) -> list[AnnotatedWeighing]:
    """Keep the chronologically last entry of each animal, ordered by animal."""
    latest_by_animal: dict[str, AnnotatedWeighing] = {}
    for entry in sorted(annotated, key=_animal_then_time):
        latest_by_animal[entry.animal_id] = entry
    return sorted(latest_by_animal.values(), key=lambda entry: collation_key(entry.animal_id))


def build_history(records: Iterable[WeighingRecord], animal_id: Optional[str] = None) -> list[AnnotatedWeighing]:
    annotated = annotate_deltas(records)
    selected = _normalize_filter(animal_id)
    if not selected:
        return annotated
    return sorted(
        (entry for entry in annotated if entry.animal_id == selected),
        key=lambda entry: entry.recorded_at,
    )


def build_summary(records: Iterable[WeighingRecord]) -> list[AnnotatedWeighing]:
    return select_latest(annotate_deltas(records))


def distinct_animal_ids(records: Iterable[WeighingRecord]) -> list[str]:
    return sorted({record.animal_id for record in records}, key=collation_key)
