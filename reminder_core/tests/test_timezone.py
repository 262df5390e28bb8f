"""Tests for reminder time formatting."""

from datetime import datetime
from zoneinfo import ZoneInfo


class TestFormatReminderTime:
    def test_defaults_to_utc(self):
        from reminder_core.timezone import format_reminder_time

        utc_dt = datetime(2025, 6, 10, 15, 0, tzinfo=ZoneInfo("UTC"))

        assert format_reminder_time(utc_dt) == "June 10, 2025 at 3:00 PM (UTC)"

    def test_formats_in_recipient_timezone_with_offset(self):
        from reminder_core.timezone import format_reminder_time

        utc_dt = datetime(2025, 6, 10, 15, 0, tzinfo=ZoneInfo("UTC"))
        result = format_reminder_time(utc_dt, "Asia/Bangkok")

        assert result == "June 10, 2025 at 10:00 PM (UTC+7)"

    def test_date_changes_across_offset(self):
        from reminder_core.timezone import format_reminder_time

        utc_dt = datetime(2025, 6, 10, 1, 0, tzinfo=ZoneInfo("UTC"))
        result = format_reminder_time(utc_dt, "America/Los_Angeles")

        assert result.startswith("June 9, 2025")
        assert "(UTC-7)" in result  # PDT

    def test_half_hour_offset(self):
        from reminder_core.timezone import format_reminder_time

        utc_dt = datetime(2025, 6, 10, 15, 0, tzinfo=ZoneInfo("UTC"))
        result = format_reminder_time(utc_dt, "Asia/Kolkata")

        assert "8:30 PM" in result
        assert "(UTC+5:30)" in result

    def test_falls_back_to_utc_for_invalid_timezone(self):
        from reminder_core.timezone import format_reminder_time

        utc_dt = datetime(2025, 6, 10, 15, 0, tzinfo=ZoneInfo("UTC"))
        result = format_reminder_time(utc_dt, "Invalid/Timezone")

        assert result == "June 10, 2025 at 3:00 PM (UTC)"

    def test_naive_datetime_treated_as_utc(self):
        from reminder_core.timezone import format_reminder_time

        result = format_reminder_time(datetime(2025, 6, 10, 15, 0), "Asia/Tokyo")

        assert result == "June 11, 2025 at 12:00 AM (UTC+9)"
