import pytest
from django.core.management import call_command

from ovr_core.categories.models import Category
from ovr_core.common.seed import seed_reference_data
from ovr_core.facilities.models import Facility
from ovr_core.facilities.services import DEFAULT_FACILITIES
from ovr_core.iam.services.accounts import find_user_by_email

pytestmark = pytest.mark.django_db


def test_seed_is_idempotent(settings):
    settings.OVR_DEFAULT_ADMIN_PASSWORD = ""

    first = seed_reference_data()
    assert first == {"facilities": len(DEFAULT_FACILITIES), "categories": 7, "admin_created": False}

    second = seed_reference_data()
    assert second == {"facilities": 0, "categories": 0, "admin_created": False}
    assert Facility.objects.count() == len(DEFAULT_FACILITIES)
    assert Category.objects.count() == 7


def test_seed_creates_admin_when_password_configured(settings):
    settings.OVR_DEFAULT_ADMIN_EMAIL = "admin@r3hc.sa"
    settings.OVR_DEFAULT_ADMIN_PASSWORD = "Bootstrap#2025"

    result = seed_reference_data()
    assert result["admin_created"] is True

    admin = find_user_by_email("admin@r3hc.sa")
    assert admin.profile.role == "admin"
    assert admin.profile.facility.code == "ADH"
    assert admin.check_password("Bootstrap#2025")

    assert seed_reference_data()["admin_created"] is False


def test_seed_command(capsys):
    call_command("seed_reference_data", "--admin-email", "ops@example.com", "--admin-password", "Ops#12345")

    out = capsys.readouterr().out
    assert "Reference data ensured" in out
    assert "admin created: yes" in out
    assert find_user_by_email("ops@example.com") is not None
