# services/ledger-service/src/apps/core/models/numbering.py
"""
Sequential document numbers of the form <PREFIX>-<YEAR>-<NNNNN>.
"""

from django.utils import timezone


def next_document_number(model, field: str, prefix: str) -> str:
    """Return the next number for this calendar year."""
    year = timezone.now().year
    stem = f"{prefix}-{year}-"

    latest = (
        model.objects
        .filter(**{f"{field}__startswith": stem})
        .order_by(f"-{field}")
        .values_list(field, flat=True)
        .first()
    )

    sequence = 1
    if latest:
        sequence = int(latest.rsplit('-', 1)[-1] or 0) + 1

    return f"{stem}{sequence:05d}"
