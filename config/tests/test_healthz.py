import pytest
from django.urls import reverse


@pytest.mark.django_db
def test_healthz_reports_database(client):
    response = client.get(reverse("healthz"))

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}


def test_healthz_is_get_only(client):
    assert client.post(reverse("healthz")).status_code == 405
