import pytest

from app.domain.models import Team

STATS_URL = "/v1/stats/teams/member-count"
STATS_AUTH = ("stats", "stats-password")


@pytest.fixture
def memberships(store, ctx, volunteer: dict):
    store.authenticate_or_create(ctx, "alterego@example.com", "secret")
    for team_id in ("gophers", "rustaceans", "pythonistas"):
        store.create_team(ctx, Team(id=team_id))

    store.add_team_member(ctx, "gophers", volunteer["email"])
    store.add_team_member(ctx, "gophers", "alterego@example.com")
    store.add_team_member(ctx, "rustaceans", "alterego@example.com")


def test_member_counts(client, memberships):
    response = client.get(STATS_URL, auth=STATS_AUTH)
    assert response.status_code == 200
    # Teams without members are not listed.
    assert response.json() == {"gophers": 2, "rustaceans": 1}


def test_member_counts_empty(client):
    response = client.get(STATS_URL, auth=STATS_AUTH)
    assert response.status_code == 200
    assert response.json() == {}


def test_member_counts_without_credentials(client):
    response = client.get(STATS_URL)
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Basic"


def test_member_counts_wrong_credentials(client):
    response = client.get(STATS_URL, auth=("stats", "wrong"))
    assert response.status_code == 401


def test_member_counts_rejects_bearer_token(client, auth_headers: dict):
    response = client.get(STATS_URL, headers=auth_headers)
    assert response.status_code == 401
