from mams.models import Personnel


def test_logistics_adds_personnel_to_own_base(client, seed, headers):
    response = client.post(
        "/api/personnel/",
        json={"name": "Dee Park", "rank": "Private", "service_number": "SN-100", "base_id": seed.bravo},
        headers=headers.log_alpha,
    )

    assert response.status_code == 201
    # The base always comes from the caller, never the body
    assert response.json()["base_id"] == seed.alpha
    assert response.json()["is_active"] is True


def test_admin_cannot_change_personnel(client, seed, headers, count):
    response = client.post(
        "/api/personnel/",
        json={"name": "Eli Ward", "service_number": "SN-101", "base_id": seed.bravo},
        headers=headers.admin,
    )
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"
    assert count(Personnel, service_number="SN-101") == 0

    response = client.put(f"/api/personnel/{seed.soldier}", json={"rank": "General"}, headers=headers.admin)
    assert response.status_code == 403

    response = client.post(f"/api/personnel/{seed.soldier}/deactivate", headers=headers.admin)
    assert response.status_code == 403

    response = client.delete(f"/api/personnel/{seed.retired}", headers=headers.admin)
    assert response.status_code == 403

    response = client.get(f"/api/personnel/{seed.soldier}", headers=headers.admin)
    assert response.json()["is_active"] is True
    assert response.json()["rank"] != "General"
    assert count(Personnel, id=seed.retired) == 1


def test_service_numbers_are_unique(client, seed, headers, count):
    response = client.post(
        "/api/personnel/", json={"name": "Copy Cat", "service_number": "SN-001"}, headers=headers.cmd_alpha
    )

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_input"
    assert count(Personnel, service_number="SN-001") == 1


def test_listing_is_scoped_to_the_callers_base(client, seed, headers):
    response = client.get("/api/personnel/", headers=headers.cmd_bravo)
    assert [p["service_number"] for p in response.json()] == ["SN-003"]

    response = client.get("/api/personnel/", params={"active_only": True}, headers=headers.log_alpha)
    assert [p["service_number"] for p in response.json()] == ["SN-001"]

    response = client.get("/api/personnel/", headers=headers.admin)
    assert len(response.json()) == 3

    response = client.get("/api/personnel/", params={"base_id": seed.alpha}, headers=headers.cmd_bravo)
    assert response.status_code == 403


def test_other_bases_personnel_read_as_missing(client, seed, headers):
    response = client.get(f"/api/personnel/{seed.soldier}", headers=headers.cmd_bravo)
    assert response.status_code == 404

    response = client.put(f"/api/personnel/{seed.soldier}", json={"rank": "General"}, headers=headers.cmd_bravo)
    assert response.status_code == 404


def test_update_and_deactivate(client, seed, headers):
    response = client.put(
        f"/api/personnel/{seed.soldier}", json={"rank": "Corporal"}, headers=headers.log_alpha
    )
    assert response.status_code == 200
    assert response.json()["rank"] == "Corporal"

    response = client.post(f"/api/personnel/{seed.soldier}/deactivate", headers=headers.log_alpha)
    assert response.status_code == 200
    assert response.json()["is_active"] is False


def test_personnel_holding_assets_cannot_be_deleted(client, seed, headers, set_stock, count):
    set_stock(seed.alpha, seed.rifle, 1)
    response = client.post(
        "/api/assignments/",
        json={"asset_id": seed.rifle, "assignee": {"type": "personnel", "id": seed.soldier}, "quantity": 1},
        headers=headers.cmd_alpha,
    )
    assert response.status_code == 201

    response = client.delete(f"/api/personnel/{seed.soldier}", headers=headers.cmd_alpha)
    assert response.status_code == 400

    response = client.delete(f"/api/personnel/{seed.retired}", headers=headers.cmd_alpha)
    assert response.status_code == 204
    assert count(Personnel, id=seed.retired) == 0
