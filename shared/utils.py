"""Shared utility functions."""
import uuid
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse


def generate_article_id() -> str:
    """Generate a unique article ID."""
    return f"art_{uuid.uuid4().hex[:12]}"


def generate_stats_id() -> str:
    """Generate a unique article stats ID."""
    return f"stat_{uuid.uuid4().hex[:12]}"


def get_utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes (Mongo returns naive values unless tz_aware)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def normalize_url(url: str) -> str:
    """Normalize URL for consistent comparison.

    Scheme and host are case-insensitive; the path and query are kept as-is
    since news sites commonly use case-sensitive slugs.
    """
    parsed = urlparse(url.strip())
    normalized = f"{parsed.scheme.lower()}://{parsed.netloc.lower()}{parsed.path.rstrip('/')}"
    if parsed.query:
        normalized += f"?{parsed.query}"
    return normalized


def validate_url(url: str) -> bool:
    """Validate that a URL is properly formatted."""
    try:
        result = urlparse(url)
        return all([result.scheme in ('http', 'https'), result.netloc])
    except ValueError:
        return False


def parse_datetime(value) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp (as sent by news APIs) into an aware datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    try:
        return ensure_utc(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except ValueError:
        return None

