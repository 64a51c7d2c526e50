import pytest
from django.db.models import F, Q
from django.test import RequestFactory

from parts.models import Part
from parts.services import list_utils


def _params(**query):
    return RequestFactory().get("/parts", query).GET


@pytest.mark.django_db
def test_apply_filters_sort(part_factory):
    part_factory(name="Door motor", category="motor")
    part_factory(name="Drive motor", category="motor")
    part_factory(name="Motor cable", category="cable")

    qs, params = list_utils.apply_filters_sort(
        _params(q="motor", category="motor", sort="-name"),
        Part.objects.all(),
        search_fields=["name"],
        filter_fields={"category": "category"},
        allowed_sorts={"name"},
        default_sort="name",
    )

    assert list(qs.values_list("name", flat=True)) == ["Drive motor", "Door motor"]
    assert params == {"q": "motor", "category": "motor", "sort": "-name"}


@pytest.mark.django_db
def test_flag_filters_and_unknown_sort(part_factory):
    part_factory(name="Low", quantity_on_hand=1, reorder_point=3)
    part_factory(name="Fine", quantity_on_hand=9, reorder_point=3)

    qs, params = list_utils.apply_filters_sort(
        _params(low_stock="yes", sort="password"),
        Part.objects.all(),
        flag_filters={"low_stock": Q(quantity_on_hand__lte=F("reorder_point"))},
        allowed_sorts={"name"},
        default_sort="name",
    )

    assert [p.name for p in qs] == ["Low"]
    assert params["low_stock"] is True
    assert params["sort"] == "name"


@pytest.mark.django_db
def test_paginate(part_factory):
    for _ in range(3):
        part_factory()
    page_obj = list_utils.paginate(
        _params(page_size="2", page="2"), Part.objects.order_by("part_number")
    )
    assert [p.part_number for p in page_obj] == ["P-003"]


@pytest.mark.django_db
def test_paginate_ignores_bad_page_size(part_factory):
    part_factory()
    page_obj = list_utils.paginate(_params(page_size="many"), Part.objects.all())
    assert page_obj.paginator.per_page == 25


@pytest.mark.django_db
def test_export_as_csv(part_factory):
    part_factory(name="Door motor")
    response = list_utils.export_as_csv(
        Part.objects.all(), ["Name"], lambda p: [p.name], "parts.csv"
    )
    content = response.content.decode().strip().splitlines()
    assert response["Content-Disposition"] == 'attachment; filename="parts.csv"'
    assert content == ["Name", "Door motor"]


def test_build_querystring():
    assert list_utils.build_querystring(_params(q="x", page="2")) == "q=x"
