"""HTTP API: envelopes, auth, chores, completions and the point ledger."""

from conftest import API, login


def create_chore(client, admin, **fields):
    body = {"title": "Feed the cat", "points": 10}
    body.update(fields)
    r = client.post(f"{API}/chores", json=body, headers=admin["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]


# --- Setup and auth ---

def test_setup_flow(client):
    status = client.get(f"{API}/setup/status").json()["data"]
    assert status == {"isSetupComplete": False, "hasAdmin": False, "hasFamilyMember": False}

    r = client.post(f"{API}/setup", json={"adminName": "Pat", "password": "secret123", "currency": "eur"})
    assert r.status_code == 201
    assert client.get(f"{API}/setup/status").json()["data"]["isSetupComplete"] is True

    again = client.post(f"{API}/setup", json={"adminName": "Other", "password": "secret123"})
    assert again.status_code == 409
    assert again.json() == {"error": "Setup has already been completed"}


def test_login_failures(client, admin):
    r = client.post(f"{API}/auth/login", json={"familyMemberId": admin["id"], "password": "wrong"})
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid password"}

    r = client.post(f"{API}/auth/login", json={"familyMemberId": 999, "password": "x"})
    assert r.status_code == 401
    assert r.json() == {"error": "User not found"}


def test_member_without_password_cannot_log_in(client, admin):
    r = client.post(f"{API}/family-members", json={
        "name": "Robin", "avatarValue": "robin", "color": "#FFB3BA",
    }, headers=admin["headers"])
    member_id = r.json()["data"]["id"]

    r = client.post(f"{API}/auth/login", json={"familyMemberId": member_id, "password": "anything"})
    assert r.status_code == 401
    assert r.json()["error"] == "Password not set for this user"


def test_me_and_logout(client, admin):
    me = client.get(f"{API}/auth/me", headers=admin["headers"])
    assert me.status_code == 200
    assert me.json()["data"]["name"] == "Pat"
    assert me.json()["data"]["isAdmin"] is True

    assert client.post(f"{API}/auth/logout", headers=admin["headers"]).status_code == 200
    after = client.get(f"{API}/auth/me", headers=admin["headers"])
    assert after.status_code == 401


def test_authentication_required(client, admin):
    r = client.get(f"{API}/chores")
    assert r.status_code == 401
    assert r.json() == {"error": "Authentication required"}

    r = client.get(f"{API}/chores", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401


def test_admin_only_routes(client, kid):
    r = client.post(f"{API}/chores", json={"title": "Sneaky"}, headers=kid["headers"])
    assert r.status_code == 403
    assert r.json() == {"error": "Admin access required"}


def test_login_members_list_is_public(client, kid):
    members = client.get(f"{API}/auth/members").json()["data"]
    assert [m["name"] for m in members] == ["Pat", "Sam"]
    assert all(m["hasPassword"] for m in members)
    assert "passwordHash" not in members[0]


# --- Members ---

def test_member_color_must_be_from_palette(client, admin):
    r = client.post(f"{API}/family-members", json={
        "name": "Robin", "avatarValue": "robin", "color": "#123456",
    }, headers=admin["headers"])
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid color selection"}


def test_admin_cannot_be_deleted(client, admin):
    r = client.delete(f"{API}/family-members/{admin['id']}", headers=admin["headers"])
    assert r.status_code == 400
    assert r.json() == {"error": "Cannot delete the admin account"}


def test_deleting_member_removes_their_ledger(client, admin, kid):
    chore = create_chore(client, admin, isPermanent=True)
    r = client.post(f"{API}/chores/{chore['id']}/complete", json={"completedBy": kid["id"]}, headers=admin["headers"])
    assert r.status_code == 200

    r = client.delete(f"{API}/family-members/{kid['id']}", headers=admin["headers"])
    assert r.status_code == 200

    board = client.get(f"{API}/points/leaderboard", headers=admin["headers"]).json()["data"]
    assert [e["name"] for e in board] == ["Pat"]

    feed = client.get(f"{API}/activity", headers=admin["headers"]).json()["data"]
    assert feed[0]["familyMemberId"] is None
    assert feed[0]["familyMember"] is None
    assert feed[0]["chore"] == {"title": "Feed the cat"}


# --- Categories ---

def test_category_names_are_unique(client, admin):
    body = {"name": "Kitchen", "color": "#FFB3BA"}
    assert client.post(f"{API}/categories", json=body, headers=admin["headers"]).status_code == 201
    r = client.post(f"{API}/categories", json=body, headers=admin["headers"])
    assert r.status_code == 409
    assert r.json() == {"error": "A category with this name already exists"}


def test_deleting_category_uncategorizes_chores(client, admin):
    category = client.post(f"{API}/categories", json={"name": "Garden"}, headers=admin["headers"]).json()["data"]
    chore = create_chore(client, admin, categoryId=category["id"])
    assert chore["category"]["name"] == "Garden"

    client.delete(f"{API}/categories/{category['id']}", headers=admin["headers"])
    r = client.get(f"{API}/chores/{chore['id']}", headers=admin["headers"])
    assert r.json()["data"]["category"] is None


# --- Chores ---

def test_create_chore(client, admin, kid):
    chore = create_chore(client, admin, assigneeIds=[kid["id"]], isPermanent=True,
                         cooldown={"type": "hours", "hours": 4})
    assert chore["cooldown"] == {"type": "hours", "hours": 4}
    assert chore["cooldownLabel"] == "Every 4h"
    assert chore["qrToken"]
    assert [a["name"] for a in chore["assignees"]] == ["Sam"]
    assert chore["createdAt"].endswith("Z")


def test_permanent_chore_defaults_to_unlimited(client, admin):
    chore = create_chore(client, admin, isPermanent=True)
    assert chore["cooldown"] == {"type": "unlimited", "hours": None}


def test_cooldown_on_one_time_chore_is_rejected(client, admin):
    r = client.post(f"{API}/chores", json={
        "title": "Paint fence", "cooldown": {"type": "daily"},
    }, headers=admin["headers"])
    assert r.status_code == 422
    assert "Only permanent chores can have a cooldown" in r.json()["error"]


def test_unknown_assignee(client, admin):
    r = client.post(f"{API}/chores", json={"title": "x", "assigneeIds": [999]}, headers=admin["headers"])
    assert r.status_code == 404
    assert r.json() == {"error": "Family member not found"}


def test_list_chores_by_day(client, admin):
    create_chore(client, admin, title="Bins", recurringType="weekly",
                 recurringConfig={"type": "weekly", "dayOfWeek": 2})
    create_chore(client, admin, title="Tidy room")

    tuesday = client.get(f"{API}/chores", params={"dueOn": "2030-01-01"}, headers=admin["headers"]).json()["data"]
    assert sorted(c["title"] for c in tuesday) == ["Bins", "Tidy room"]

    wednesday = client.get(f"{API}/chores", params={"dueOn": "2030-01-02"}, headers=admin["headers"]).json()["data"]
    assert [c["title"] for c in wednesday] == ["Tidy room"]


def test_soft_and_hard_delete(client, admin):
    chore = create_chore(client, admin)
    client.delete(f"{API}/chores/{chore['id']}", headers=admin["headers"])

    active = client.get(f"{API}/chores", headers=admin["headers"]).json()["data"]
    assert active == []
    everything = client.get(f"{API}/chores", params={"includeDeleted": "true"}, headers=admin["headers"]).json()["data"]
    assert everything[0]["deletedAt"] is not None

    client.delete(f"{API}/chores/{chore['id']}", params={"hard": "true"}, headers=admin["headers"])
    assert client.get(f"{API}/chores/{chore['id']}", headers=admin["headers"]).status_code == 404


# --- Completion ---

def test_complete_chore(client, admin, kid):
    chore = create_chore(client, admin, title="Walk the dog", points=15, isPermanent=True)
    r = client.post(f"{API}/chores/{chore['id']}/complete", json={"completedBy": kid["id"]}, headers=kid["headers"])

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["pointsEarned"] == 15
    assert data["choreName"] == "Walk the dog"
    assert data["completedByName"] == "Sam"
    assert data["completion"]["choreId"] == chore["id"]
    assert data["completion"]["completedBy"] == kid["id"]
    assert data["completion"]["completedAt"].endswith("Z")


def test_completion_failures(client, admin, kid):
    r = client.post(f"{API}/chores/999/complete", json={"completedBy": kid["id"]}, headers=kid["headers"])
    assert r.status_code == 404
    assert r.json() == {"error": "Chore not found"}

    chore = create_chore(client, admin, isPermanent=True)
    r = client.post(f"{API}/chores/{chore['id']}/complete", json={"completedBy": 999}, headers=kid["headers"])
    assert r.status_code == 404
    assert r.json() == {"error": "Family member not found"}


def test_completion_on_cooldown(client, admin, kid):
    chore = create_chore(client, admin, isPermanent=True, cooldown={"type": "hours", "hours": 4})
    url = f"{API}/chores/{chore['id']}/complete"
    assert client.post(url, json={"completedBy": kid["id"]}, headers=kid["headers"]).status_code == 200

    r = client.post(url, json={"completedBy": kid["id"]}, headers=kid["headers"])
    assert r.status_code == 409
    body = r.json()
    assert body["error"] == "Chore is on cooldown"
    assert body["cooldownEndsAt"].endswith("Z")

    status = client.get(f"{API}/chores/{chore['id']}/cooldown", headers=kid["headers"]).json()["data"]
    assert status["canComplete"] is False
    assert status["reason"] == "Wait 4h between completions"

    other = client.get(f"{API}/chores/{chore['id']}/cooldown", params={"memberId": admin["id"]},
                       headers=kid["headers"]).json()["data"]
    assert other["canComplete"] is True


def test_one_time_chore_disappears_after_completion(client, admin, kid):
    chore = create_chore(client, admin, title="Clean garage")
    url = f"{API}/chores/{chore['id']}/complete"
    assert client.post(url, json={"completedBy": kid["id"]}, headers=kid["headers"]).status_code == 200

    assert client.get(f"{API}/chores", headers=kid["headers"]).json()["data"] == []
    r = client.post(url, json={"completedBy": kid["id"]}, headers=kid["headers"])
    assert r.status_code == 409
    assert r.json() == {"error": "Chore has been deleted"}


def test_complete_by_qr(client, admin, kid):
    chore = create_chore(client, admin, isPermanent=True)
    qr = client.get(f"{API}/chores/{chore['id']}/qr", headers=kid["headers"]).json()["data"]
    assert qr["qrData"] == f"familyhub://chore/{qr['qrToken']}"

    r = client.post(f"{API}/chores/complete-by-qr", json={"token": qr["qrToken"]}, headers=kid["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["completedByName"] == "Sam"

    r = client.post(f"{API}/chores/complete-by-qr", json={"token": "bogus"}, headers=kid["headers"])
    assert r.status_code == 404
    assert r.json() == {"error": "Invalid QR code or chore not found"}


def test_regenerated_qr_invalidates_old_token(client, admin, kid):
    chore = create_chore(client, admin, isPermanent=True)
    old_token = chore["qrToken"]
    new = client.post(f"{API}/chores/{chore['id']}/qr", headers=admin["headers"]).json()["data"]
    assert new["qrToken"] != old_token

    r = client.post(f"{API}/chores/complete-by-qr", json={"token": old_token}, headers=kid["headers"])
    assert r.status_code == 404


def test_nfc_binding_and_completion(client, admin, kid):
    first = create_chore(client, admin, title="Dishes", isPermanent=True)
    second = create_chore(client, admin, title="Laundry", isPermanent=True)

    r = client.put(f"{API}/chores/{first['id']}/nfc", json={"nfcTagId": "04a2b3c4"}, headers=admin["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["chore"]["nfcTagId"] == "04a2b3c4"

    r = client.put(f"{API}/chores/{second['id']}/nfc", json={"nfcTagId": "04a2b3c4"}, headers=admin["headers"])
    assert r.status_code == 409
    assert r.json() == {"error": "NFC tag is already bound to another chore", "boundTo": "Dishes"}

    r = client.post(f"{API}/chores/complete-by-nfc", json={"tagId": "04a2b3c4"}, headers=kid["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["choreName"] == "Dishes"

    client.put(f"{API}/chores/{first['id']}/nfc", json={"nfcTagId": None}, headers=admin["headers"])
    r = client.post(f"{API}/chores/complete-by-nfc", json={"tagId": "04a2b3c4"}, headers=kid["headers"])
    assert r.status_code == 404
    assert r.json() == {"error": "NFC tag not linked to any chore"}


def test_undo(client, admin, kid):
    chore = create_chore(client, admin, points=10)
    done = client.post(f"{API}/chores/{chore['id']}/complete", json={"completedBy": kid["id"]},
                       headers=kid["headers"]).json()["data"]
    completion_id = done["completion"]["id"]

    r = client.post(f"{API}/chores/completions/{completion_id}/undo", headers=kid["headers"])
    assert r.status_code == 200
    assert r.json()["data"] == {"success": True, "choreId": chore["id"]}

    restored = client.get(f"{API}/chores/{chore['id']}", headers=kid["headers"]).json()["data"]
    assert restored["deletedAt"] is None
    history = client.get(f"{API}/points/history/{kid['id']}", headers=kid["headers"]).json()["data"]
    assert history == {"balance": 0, "transactions": []}

    again = client.post(f"{API}/chores/completions/{completion_id}/undo", headers=kid["headers"])
    assert again.status_code == 404
    assert again.json() == {"error": "Completion not found"}


# --- Points ---

def test_points_and_redemption(client, admin, kid):
    chore = create_chore(client, admin, points=10, isPermanent=True)
    client.post(f"{API}/chores/{chore['id']}/complete", json={"completedBy": kid["id"]}, headers=kid["headers"])

    board = client.get(f"{API}/points/leaderboard", headers=kid["headers"]).json()["data"]
    assert [(e["name"], e["totalPoints"]) for e in board] == [("Sam", 10), ("Pat", 0)]

    r = client.post(f"{API}/points/redeem", json={"familyMemberId": kid["id"]}, headers=kid["headers"])
    assert r.status_code == 403

    r = client.post(f"{API}/points/redeem", json={"familyMemberId": kid["id"]}, headers=admin["headers"])
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["pointsRedeemed"] == 10
    assert data["moneyValue"] == "USD 10.00"
    assert data["memberName"] == "Sam"

    history = client.get(f"{API}/points/history/{kid['id']}", headers=kid["headers"]).json()["data"]
    assert history["balance"] == 0
    assert [t["type"] for t in history["transactions"]] == ["redeemed", "earned"]

    r = client.post(f"{API}/points/redeem", json={"familyMemberId": kid["id"]}, headers=admin["headers"])
    assert r.status_code == 409
    assert r.json() == {"error": "No points to redeem"}


def test_redeem_unknown_member(client, admin):
    r = client.post(f"{API}/points/redeem", json={"familyMemberId": 999}, headers=admin["headers"])
    assert r.status_code == 404


def test_history_of_unknown_member(client, admin):
    r = client.get(f"{API}/points/history/999", headers=admin["headers"])
    assert r.status_code == 404


# --- Activity ---

def test_activity_feed(client, admin, kid):
    chore = create_chore(client, admin, title="Dishes", points=5, isPermanent=True)
    client.post(f"{API}/chores/{chore['id']}/complete", json={"completedBy": kid["id"]}, headers=kid["headers"])
    client.post(f"{API}/points/redeem", json={"familyMemberId": kid["id"]}, headers=admin["headers"])

    feed = client.get(f"{API}/activity", headers=kid["headers"]).json()["data"]
    assert [e["type"] for e in feed] == ["points_redeemed", "chore_completed"]
    assert feed[1]["metadata"] == {"points": 5, "choreName": "Dishes"}
    assert feed[1]["familyMember"]["name"] == "Sam"
    assert feed[0]["metadata"]["moneyValue"] == "USD 5.00"

    page = client.get(f"{API}/activity", params={"limit": 1, "offset": 1}, headers=kid["headers"]).json()["data"]
    assert [e["type"] for e in page] == ["chore_completed"]


# --- Settings ---

def test_settings(client, admin, kid):
    current = client.get(f"{API}/settings", headers=kid["headers"]).json()["data"]
    assert current["currency"] == "USD"

    r = client.put(f"{API}/settings", json={"currency": "eur", "pointValue": "0.25"}, headers=kid["headers"])
    assert r.status_code == 403

    r = client.put(f"{API}/settings", json={"currency": "eur", "pointValue": "0.25"}, headers=admin["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["currency"] == "EUR"


def test_change_admin_password(client, admin):
    r = client.put(f"{API}/settings/security", json={
        "currentPassword": "wrong", "newPassword": "newsecret",
    }, headers=admin["headers"])
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid current password"}

    r = client.put(f"{API}/settings/security", json={
        "currentPassword": "secret123", "newPassword": "newsecret",
    }, headers=admin["headers"])
    assert r.status_code == 200
    login(client, admin["id"], "newsecret")


def test_verify_admin_password(client, admin, kid):
    r = client.post(f"{API}/settings/verify", json={"credential": "secret123"}, headers=kid["headers"])
    assert r.status_code == 200
    assert r.json() == {"data": {"success": True, "authType": "password"}}

    r = client.post(f"{API}/settings/verify", json={"password": "secret123"}, headers=kid["headers"])
    assert r.status_code == 200

    r = client.post(f"{API}/settings/verify", json={"credential": "kidpass"}, headers=kid["headers"])
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid password"}

    assert client.post(f"{API}/settings/verify", json={"credential": "secret123"}).status_code == 401


def test_health(client):
    assert client.get(f"{API}/health").json() == {"status": "ok"}
