from django.utils import timezone


def to_local_iso(dt):
    """ISO string of ``dt`` in the project's TIME_ZONE."""
    return timezone.localtime(dt).isoformat()
