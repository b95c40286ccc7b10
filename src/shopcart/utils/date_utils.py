from datetime import datetime, timezone


class DateUtils:
    """Timezone-aware datetime helpers; every stored timestamp is UTC."""

    UTC = timezone.utc

    @classmethod
    def now_utc(cls) -> datetime:
        """Get current UTC datetime - always use this for stored timestamps"""
        return datetime.now(cls.UTC)

    @classmethod
    def to_iso_string(cls, dt: datetime) -> str:
        """Convert datetime to ISO 8601 string"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=cls.UTC)

        return dt.isoformat()
