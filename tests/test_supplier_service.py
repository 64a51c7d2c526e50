import pytest

from parts.models import Supplier
from parts.services import supplier_service


@pytest.mark.django_db
def test_add_supplier_generates_code():
    ok, msg, supplier_id = supplier_service.add_supplier(
        {"company_name": "  Otis Spares ", "email": " sales@otis.test ", "city": ""}
    )
    assert ok, msg
    supplier = Supplier.objects.get(pk=supplier_id)
    assert supplier.company_name == "Otis Spares"
    assert supplier.supplier_code == "SUP-0001"
    assert supplier.email == "sales@otis.test"
    assert supplier.city is None


@pytest.mark.django_db
def test_generate_supplier_code_skips_used_numbers(supplier_factory):
    supplier_factory(supplier_code="SUP-0007")
    supplier_factory(supplier_code="LEGACY-1")
    assert supplier_service.generate_supplier_code() == "SUP-0008"


@pytest.mark.django_db
def test_add_supplier_validation():
    assert supplier_service.add_supplier({"company_name": " "}) == (
        False,
        "Supplier name is required and cannot be empty.",
        None,
    )
    assert supplier_service.add_supplier({"company_name": "Kone"})[0]
    ok, msg, _ = supplier_service.add_supplier({"company_name": "Kone"})
    assert not ok
    assert msg == "Supplier 'Kone' already exists."


@pytest.mark.django_db
def test_get_all_suppliers_hides_inactive(supplier_factory):
    active = supplier_factory()
    inactive = supplier_factory(is_active=False)
    assert list(supplier_service.get_all_suppliers()) == [active]
    assert set(supplier_service.get_all_suppliers(include_inactive=True)) == {
        active,
        inactive,
    }
