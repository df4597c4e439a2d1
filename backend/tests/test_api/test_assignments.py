"""Тесты API заданий."""
from tests.conftest import create_assignment, create_user


class TestAssignmentsCRUD:
    """CRUD операции с заданиями."""

    def test_create_assignment(self, client):
        user = create_user(client)
        resp = client.post(
            "/api/v1/assignments",
            json={"user_id": user["id"], "title": "Essay 1", "deadline": "2024-06-10T23:59:00"},
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["title"] == "Essay 1"
        assert data["deadline"] == "2024-06-10T23:59:00"
        assert data["is_done"] is False
        assert data["last_notification_type"] is None

    def test_create_with_utc_deadline(self, client):
        user = create_user(client)
        data = create_assignment(client, user["id"], deadline="2024-06-10T16:59:00Z")
        assert data["deadline"] == "2024-06-10T23:59:00"

    def test_create_requires_title(self, client):
        user = create_user(client)
        resp = client.post(
            "/api/v1/assignments",
            json={"user_id": user["id"], "title": "", "deadline": "2024-06-10T23:59:00"},
        )
        assert resp.status_code == 422

    def test_list_assignments(self, client):
        user = create_user(client)
        other = create_user(client, name="Other")
        create_assignment(client, user["id"], title="A", deadline="2024-06-12T10:00:00")
        create_assignment(client, user["id"], title="B", deadline="2024-06-11T10:00:00")
        create_assignment(client, other["id"], title="C")

        resp = client.get("/api/v1/assignments", params={"user_id": user["id"]})
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 2
        assert [a["title"] for a in body["items"]] == ["B", "A"]

    def test_get_assignment_not_found(self, client):
        resp = client.get("/api/v1/assignments/9999")
        assert resp.status_code == 404

    def test_update_deadline_resets_marker(self, client, db_session):
        user = create_user(client)
        assignment = create_assignment(client, user["id"])

        from app.models.assignment import Assignment
        row = db_session.query(Assignment).filter(Assignment.id == assignment["id"]).one()
        row.last_notification_type = "h_minus_3"
        db_session.commit()

        resp = client.patch(
            f"/api/v1/assignments/{assignment['id']}",
            json={"deadline": "2024-06-20T23:59:00"},
        )
        assert resp.status_code == 200
        assert resp.json()["deadline"] == "2024-06-20T23:59:00"
        assert resp.json()["last_notification_type"] is None

    def test_mark_done(self, client):
        user = create_user(client)
        assignment = create_assignment(client, user["id"])

        resp = client.post(f"/api/v1/assignments/{assignment['id']}/done")
        assert resp.status_code == 200
        assert resp.json()["is_done"] is True

        resp = client.get("/api/v1/assignments", params={"user_id": user["id"]})
        assert resp.json()["total"] == 0
        resp = client.get("/api/v1/assignments", params={"user_id": user["id"], "include_done": True})
        assert resp.json()["total"] == 1

    def test_delete_assignment(self, client):
        user = create_user(client)
        assignment = create_assignment(client, user["id"])

        resp = client.delete(f"/api/v1/assignments/{assignment['id']}")
        assert resp.status_code == 204

        resp = client.get(f"/api/v1/assignments/{assignment['id']}")
        assert resp.status_code == 404

    def test_delete_assignment_not_found(self, client):
        resp = client.delete("/api/v1/assignments/9999")
        assert resp.status_code == 404

    def test_list_by_status(self, client):
        user = create_user(client)
        done = create_assignment(client, user["id"], title="Done one", deadline="2024-06-11T10:00:00")
        create_assignment(client, user["id"], title="Open one", deadline="2024-06-12T10:00:00")
        client.post(f"/api/v1/assignments/{done['id']}/done")

        resp = client.get("/api/v1/assignments", params={"user_id": user["id"], "status": "done"})
        assert [a["title"] for a in resp.json()["items"]] == ["Done one"]
        resp = client.get("/api/v1/assignments", params={"user_id": user["id"], "status": "pending"})
        assert [a["title"] for a in resp.json()["items"]] == ["Open one"]

    def test_list_unknown_status(self, client):
        user = create_user(client)
        resp = client.get("/api/v1/assignments", params={"user_id": user["id"], "status": "archived"})
        assert resp.status_code == 422

    def test_list_search(self, client):
        user = create_user(client)
        create_assignment(client, user["id"], title="Calculus homework", deadline="2024-06-11T10:00:00")
        create_assignment(client, user["id"], title="History essay", deadline="2024-06-12T10:00:00")

        resp = client.get("/api/v1/assignments", params={"user_id": user["id"], "search": "ESSAY"})
        body = resp.json()
        assert body["total"] == 1
        assert body["items"][0]["title"] == "History essay"

    def test_update_title_of_control_characters(self, client):
        user = create_user(client)
        assignment = create_assignment(client, user["id"])

        resp = client.patch(f"/api/v1/assignments/{assignment['id']}", json={"title": "\u0001\u0002"})
        assert resp.status_code == 400
        assert resp.json()["error_code"] == "VALIDATION_ERROR"

        resp = client.get(f"/api/v1/assignments/{assignment['id']}")
        assert resp.json()["title"] == "Essay 1"
