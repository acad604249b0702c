from __future__ import annotations

from django import template

from weighings.services.formatting import (
    delta_tone as _delta_tone,
    format_delta,
    format_local_date,
    format_weight,
)

register = template.Library()

DELTA_TONE_CLASSES = {
    "none": "text-neutral-500",
    "gain": "text-emerald-700",
    "loss": "text-red-700",
    "flat": "text-neutral-700",
}


@register.filter(name="weight_kg")
def weight_kg(value: object) -> str:
    """Format a weight with exactly one decimal, rounding half up."""
    if value in (None, ""):
        return ""
    return format_weight(value)


@register.filter(name="delta_kg")
def delta_kg(value: object) -> str:
    """Format a weight change as ``+1.2``, ``-1.2``, ``±0.0`` or ``–``."""
    if value == "":
        value = None
    return format_delta(value)


@register.filter(name="delta_tone")
def delta_tone(value: object) -> str:
    """CSS classes colouring gains, losses and missing deltas."""
    if value == "":
        value = None
    return DELTA_TONE_CLASSES[_delta_tone(value)]


@register.filter(name="local_date")
def local_date(value: object) -> str:
    return format_local_date(value) if value else ""
