"""Template context helpers for exposing global application settings."""

from __future__ import annotations

from django.conf import settings

from weighings.services.formatting import resolve_display_timezone


def branding(request):
    """Expose the brand name and display timezone for templates."""

    tz = resolve_display_timezone()
    return {
        "BRAND_NAME": getattr(settings, "ANNCOR_BRAND_NAME", "ANNCOR"),
        "APP_TIME_ZONE": str(tz),
    }
