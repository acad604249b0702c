from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.test import SimpleTestCase, override_settings

from weighings.services.formatting import (
    delta_tone,
    format_delta,
    format_local_date,
    format_local_datetime,
    format_weight,
    parse_number,
    round_one_decimal,
    sanitize_filename,
)


class WeightFormattingTests(SimpleTestCase):
    def test_rounds_half_up_to_one_decimal(self) -> None:
        self.assertEqual(format_weight(1.05), "1.1")
        self.assertEqual(format_weight(12.34), "12.3")
        self.assertEqual(format_weight(Decimal("2.25")), "2.3")
        self.assertEqual(format_weight(0.05), "0.1")

    def test_always_shows_one_decimal(self) -> None:
        self.assertEqual(format_weight(10), "10.0")
        self.assertEqual(format_weight(Decimal("10.000")), "10.0")

    def test_round_one_decimal_returns_decimal(self) -> None:
        self.assertEqual(round_one_decimal("23.45"), Decimal("23.5"))


class DeltaFormattingTests(SimpleTestCase):
    def test_missing_delta_is_a_dash(self) -> None:
        self.assertEqual(format_delta(None), "–")

    def test_positive_delta_has_plus_sign(self) -> None:
        self.assertEqual(format_delta(2.345), "+2.3")
        self.assertEqual(format_delta(Decimal("1.2")), "+1.2")

    def test_zero_delta_has_plus_minus_sign(self) -> None:
        self.assertEqual(format_delta(0), "±0.0")
        self.assertEqual(format_delta(Decimal("0.000")), "±0.0")

    def test_negative_delta_has_only_minus_sign(self) -> None:
        self.assertEqual(format_delta(Decimal("-1.2")), "-1.2")
        self.assertEqual(format_delta(-0.35), "-0.3")

    def test_negative_ties_round_toward_zero(self) -> None:
        self.assertEqual(format_delta(Decimal("-0.05")), "0.0")
        self.assertEqual(format_delta(Decimal("-1.25")), "-1.2")
        self.assertEqual(format_delta(Decimal("-1.26")), "-1.3")
        self.assertEqual(round_one_decimal(Decimal("-0.35")), Decimal("-0.3"))
        self.assertEqual(format_weight(Decimal("-2.45")), "-2.4")

    def test_delta_between_two_weighings_rounds_up_on_ties(self) -> None:
        self.assertEqual(format_delta(Decimal("10.05") - Decimal("10.30")), "-0.2")

    def test_tiny_changes_keep_their_branch(self) -> None:
        self.assertEqual(format_delta(Decimal("0.04")), "+0.0")
        self.assertEqual(format_delta(Decimal("-0.04")), "0.0")

    def test_delta_tone(self) -> None:
        self.assertEqual(delta_tone(None), "none")
        self.assertEqual(delta_tone(Decimal("0.1")), "gain")
        self.assertEqual(delta_tone(Decimal("-0.1")), "loss")
        self.assertEqual(delta_tone(Decimal("0")), "flat")


class ParseNumberTests(SimpleTestCase):
    def test_accepts_dot_and_comma(self) -> None:
        self.assertEqual(parse_number("23.5"), Decimal("23.5"))
        self.assertEqual(parse_number("23,5"), Decimal("23.5"))
        self.assertEqual(parse_number(" 7 "), Decimal("7"))

    def test_numbers_pass_through(self) -> None:
        self.assertEqual(parse_number(11.2), Decimal("11.2"))
        self.assertEqual(parse_number(10), Decimal("10"))

    def test_invalid_values_become_zero(self) -> None:
        for value in ("abc", "", None, "Infinity", "NaN", "1,2,3", "1_5", "2_5,5"):
            with self.subTest(value=value):
                self.assertEqual(parse_number(value), Decimal("0"))


class DateFormattingTests(SimpleTestCase):
    def test_local_date_uses_bogota_time(self) -> None:
        value = datetime(2025, 1, 3, 0, 0, tzinfo=dt_timezone.utc)
        self.assertEqual(format_local_date(value), "2/1/2025")

    @override_settings(ANNCOR_DISPLAY_TIMEZONE="UTC")
    def test_display_timezone_is_configurable(self) -> None:
        value = datetime(2025, 1, 3, 0, 0, tzinfo=dt_timezone.utc)
        self.assertEqual(format_local_date(value), "3/1/2025")

    @override_settings(ANNCOR_DISPLAY_TIMEZONE="Not/AZone")
    def test_unknown_timezone_falls_back_to_utc(self) -> None:
        value = datetime(2025, 1, 3, 0, 0, tzinfo=dt_timezone.utc)
        self.assertEqual(format_local_date(value), "3/1/2025")

    def test_local_datetime(self) -> None:
        value = datetime(2025, 11, 23, 15, 4, 5, tzinfo=dt_timezone.utc)
        self.assertEqual(format_local_datetime(value), "23/11/2025, 10:04:05")

    def test_empty_dates(self) -> None:
        self.assertEqual(format_local_date(None), "")
        self.assertEqual(format_local_datetime(None), "")


class SanitizeFilenameTests(SimpleTestCase):
    def test_replaces_unsafe_characters(self) -> None:
        self.assertEqual(sanitize_filename("Lote 12/045"), "Lote_12_045")
        self.assertEqual(sanitize_filename("Ñato"), "_ato")

    def test_keeps_safe_characters(self) -> None:
        self.assertEqual(sanitize_filename("A-1_b.c"), "A-1_b.c")
