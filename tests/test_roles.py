import pytest
from django.contrib.auth.models import Group

from core.roles import Role, ensure_role_groups, get_role, set_role
from parts.models import PartUsage


@pytest.mark.django_db
def test_role_groups_exist_after_migrate():
    ensure_role_groups()
    assert set(Group.objects.values_list("name", flat=True)) >= set(Role.values)


@pytest.mark.django_db
def test_get_role_prefers_highest_group(django_user_model):
    member = django_user_model.objects.create_user(username="maya")
    assert get_role(member) == Role.READONLY

    ensure_role_groups()
    member.groups.add(Group.objects.get(name="technician"), Group.objects.get(name="dispatcher"))
    assert get_role(member) == Role.DISPATCHER


@pytest.mark.django_db
def test_staff_without_group_is_admin(django_user_model):
    boss = django_user_model.objects.create_user(username="boss", is_staff=True)
    assert get_role(boss) == Role.ADMIN
    set_role(boss, Role.TECHNICIAN)
    assert get_role(boss) == Role.TECHNICIAN


def test_anonymous_has_no_role():
    from django.contrib.auth.models import AnonymousUser

    assert get_role(AnonymousUser()) is None
    assert get_role(None) is None


@pytest.mark.django_db
def test_set_role_replaces_previous_role(user):
    assert set_role(user, Role.TECHNICIAN) == (True, "tester is now technician.")
    assert list(user.groups.values_list("name", flat=True)) == ["technician"]
    assert set_role(user, "owner") == (False, "Unknown role: owner")
    assert get_role(user) == Role.TECHNICIAN


@pytest.mark.django_db
def test_readonly_user_blocked_from_ticket_parts_form(client, user, part_factory, ticket_factory):
    set_role(user, Role.READONLY)
    ticket = ticket_factory()
    url = f"/tickets/{ticket.pk}/parts/"

    assert client.get(url).status_code == 200
    resp = client.post(url, {"part": part_factory().pk, "quantity": 1})
    assert resp.status_code == 403
    assert not PartUsage.objects.exists()


@pytest.mark.django_db
def test_technician_cannot_submit_purchase_order_form(client, user, supplier_factory):
    set_role(user, Role.TECHNICIAN)
    assert client.get("/purchase-orders/new/").status_code == 200
    resp = client.post("/purchase-orders/new/", {"supplier": supplier_factory().pk})
    assert resp.status_code == 403


@pytest.mark.django_db
def test_team_page_is_admin_only(client, user, django_user_model):
    member = django_user_model.objects.create_user(username="lior")
    assert client.get("/team/").status_code == 403

    set_role(user, Role.ADMIN)
    resp = client.get("/team/")
    assert resp.status_code == 200
    roles = {u.username: u.role for u in resp.context["users"]}
    assert roles["lior"] == Role.READONLY
    assert b'href="/team/"' in resp.content

    resp = client.post("/team/", {"user": member.pk, "role": "dispatcher"})
    assert resp.status_code == 302
    assert get_role(member) == Role.DISPATCHER

    assert client.post("/team/", {"user": "x", "role": "dispatcher"}).status_code == 404
