from django.db.models.functions import Length


def next_number(queryset, field: str, prefix: str, width: int = 4) -> str:
    """Next ``<prefix><seq>`` value for ``field`` among rows of ``queryset``.

    Sequences are zero padded to ``width`` digits and keep growing past it,
    so a longer value always holds the larger number.
    """

    rows = queryset.filter(**{f"{field}__startswith": prefix})
    last = (
        rows.order_by(Length(field).desc(), f"-{field}")
        .values_list(field, flat=True)
        .first()
    )
    seq = 0
    if last:
        try:
            seq = int(last[len(prefix):])
        except ValueError:
            seq = rows.count()
    return f"{prefix}{seq + 1:0{width}d}"
