import os
import sys
from datetime import date
from decimal import Decimal

import django
import pytest

# Ensure project root is on sys.path
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "liftdesk.settings")
django.setup()

from core.roles import Role, set_role  # noqa: E402
from parts.models import Part, PurchaseOrder, Supplier  # noqa: E402
from parts.services import purchase_order_service  # noqa: E402
from projects.models import Project  # noqa: E402
from projects.services import project_service  # noqa: E402
from tickets.models import Building, Client, Technician, Ticket  # noqa: E402


@pytest.fixture
def part_factory():
    counter = {"n": 0}

    def create_part(**kwargs):
        counter["n"] += 1
        defaults = {
            "part_number": f"P-{counter['n']:03d}",
            "name": f"Part {counter['n']}",
            "category": "mechanical",
            "unit_price": Decimal("10.00"),
            "quantity_on_hand": 10,
            "minimum_stock_level": 2,
            "reorder_point": 3,
        }
        defaults.update(kwargs)
        return Part.objects.create(**defaults)

    return create_part


@pytest.fixture
def technician_factory():
    def create_technician(**kwargs):
        defaults = {"full_name": "Dana Levi", "specialization": ["mechanical"]}
        defaults.update(kwargs)
        return Technician.objects.create(**defaults)

    return create_technician


@pytest.fixture
def ticket_factory():
    def create_ticket(**kwargs):
        defaults = {"title": "Lift stuck between floors"}
        defaults.update(kwargs)
        return Ticket.objects.create(**defaults)

    return create_ticket


@pytest.fixture
def supplier_factory():
    counter = {"n": 0}

    def create_supplier(**kwargs):
        counter["n"] += 1
        defaults = {
            "supplier_code": f"SUP-{counter['n']:04d}",
            "company_name": f"Supplier {counter['n']}",
            "email": f"orders{counter['n']}@supplier.test",
        }
        defaults.update(kwargs)
        return Supplier.objects.create(**defaults)

    return create_supplier


@pytest.fixture
def user(django_user_model):
    user, _ = django_user_model.objects.get_or_create(username="tester")
    set_role(user, Role.DISPATCHER)
    return user


@pytest.fixture(autouse=True)
def logged_in_client(client, db, user):
    """Log in a user for tests that go through the views."""

    client.force_login(user)
    yield
    client.logout()


@pytest.fixture
def po_factory(supplier_factory, part_factory):
    """Create a purchase order through the service from ``(part, qty, price)`` lines."""

    def create_po(lines=None, **po_kwargs):
        supplier = po_kwargs.pop("supplier", None) or supplier_factory()
        if lines is None:
            lines = [(part_factory(quantity_on_hand=0), 5, "20.00")]
        po_data = {"supplier_id": supplier.pk, "order_date": date(2024, 3, 1)}
        po_data.update(po_kwargs)
        items = [
            {"part_id": part.pk, "quantity_ordered": qty, "unit_price": price}
            for part, qty, price in lines
        ]
        ok, msg, po_id = purchase_order_service.create_po(po_data, items)
        assert ok, msg
        return PurchaseOrder.objects.get(pk=po_id)

    return create_po


@pytest.fixture
def building_factory():
    """Create a building, with a new client unless ``client`` is given."""
    counter = {"n": 0}

    def create_building(client=None, **kwargs):
        counter["n"] += 1
        if client is None:
            client = Client.objects.create(name=f"Client {counter['n']}")
        defaults = {"name": f"Tower {counter['n']}", "address": "1 Main St", "city": "Haifa"}
        defaults.update(kwargs)
        return Building.objects.create(client=client, **defaults)

    return create_building


@pytest.fixture
def project_factory(building_factory):
    def create_project(**kwargs):
        building = kwargs.pop("building", None) or building_factory()
        details = {
            "name": "Cab modernization",
            "client_id": building.client_id,
            "building_id": building.pk,
        }
        details.update(kwargs)
        ok, msg, project_id = project_service.create_project(details)
        assert ok, msg
        return Project.objects.get(pk=project_id)

    return create_project
