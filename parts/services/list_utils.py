"""Query-string driven filtering, sorting, pagination and CSV export for list
pages and API list endpoints."""

from __future__ import annotations

import csv
from typing import Any, Callable, Dict, Iterable, Mapping, Sequence, Tuple

from django.core.paginator import Paginator
from django.db.models import Q, QuerySet
from django.http import HttpResponse

TRUE_VALUES = {"1", "true", "yes", "on"}


def apply_filters_sort(
    params: Mapping[str, Any],
    qs: QuerySet,
    *,
    search_fields: Sequence[str] = (),
    filter_fields: Mapping[str, str] | None = None,
    flag_filters: Mapping[str, Q] | None = None,
    allowed_sorts: Iterable[str] = (),
    default_sort: str = "id",
) -> Tuple[QuerySet, Dict[str, Any]]:
    """Filter and order ``qs`` from ``params`` (usually ``request.GET``).

    ``q`` searches ``search_fields`` case-insensitively. ``filter_fields``
    maps parameter names to exact ORM lookups. ``flag_filters`` maps boolean
    parameters (``?low_stock=1``) to a ``Q`` applied when the flag is on.
    ``sort`` accepts a field from ``allowed_sorts`` with an optional leading
    ``-``. The resolved values are returned for re-rendering in templates.
    """

    resolved: Dict[str, Any] = {}
    q = (params.get("q") or "").strip()
    if q and search_fields:
        cond = Q()
        for field in search_fields:
            cond |= Q(**{f"{field}__icontains": q})
        qs = qs.filter(cond)
    resolved["q"] = q

    for param, lookup in (filter_fields or {}).items():
        value = (params.get(param) or "").strip()
        if value:
            qs = qs.filter(**{lookup: value})
        resolved[param] = value

    for param, cond in (flag_filters or {}).items():
        on = (params.get(param) or "").strip().lower() in TRUE_VALUES
        if on:
            qs = qs.filter(cond)
        resolved[param] = on

    sort = (params.get("sort") or default_sort).strip()
    if sort.lstrip("-") not in set(allowed_sorts) | {default_sort.lstrip("-")}:
        sort = default_sort
    resolved["sort"] = sort
    return qs.order_by(sort), resolved


def paginate(params: Mapping[str, Any], qs, per_page: int = 25):
    try:
        per_page = max(int(params.get("page_size", per_page)), 1)
    except (TypeError, ValueError):
        pass
    return Paginator(qs, per_page).get_page(params.get("page"))


def export_as_csv(
    rows: Iterable[Any],
    headers: Sequence[str],
    row_builder: Callable[[Any], Sequence[Any]],
    filename: str,
) -> HttpResponse:
    response = HttpResponse(content_type="text/csv")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    writer = csv.writer(response)
    writer.writerow(list(headers))
    for obj in rows:
        writer.writerow(list(row_builder(obj)))
    return response


def build_querystring(params, exclude: Sequence[str] = ("page",)) -> str:
    """``params`` (a QueryDict) re-encoded without the ``exclude`` keys."""
    copy = params.copy()
    for key in exclude:
        copy.pop(key, None)
    return copy.urlencode()
