import pytest

from fieldtasks.core.enums import TaskStatus, TaskPriority


@pytest.mark.crud
class TestTaskCRUD:

    async def test_create_task_applies_defaults(self, test_client, manager_headers):
        response = await test_client.post(
            "/api/tasks",
            json={"title": "Fix router", "client": "Acme"},
            headers=manager_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["status"] == TaskStatus.PENDING.value
        assert data["priority"] == TaskPriority.MEDIUM.value
        assert data["technicianId"] is None
        assert data["description"] == ""
        assert data["createdAt"]

    async def test_technician_can_create_task(self, test_client, technician_headers, valid_task_data):
        response = await test_client.post("/api/tasks", json=valid_task_data, headers=technician_headers)
        assert response.status_code == 201
        assert response.json()["title"] == valid_task_data["title"]

    async def test_create_task_missing_client_rejected(self, test_client, manager_headers):
        response = await test_client.post("/api/tasks", json={"title": "No client"}, headers=manager_headers)
        assert response.status_code == 400

    async def test_create_task_unknown_status_rejected(self, test_client, manager_headers, valid_task_data):
        valid_task_data["status"] = "ON_HOLD"
        response = await test_client.post("/api/tasks", json=valid_task_data, headers=manager_headers)
        assert response.status_code == 400

    async def test_create_task_unknown_priority_rejected(self, test_client, manager_headers, valid_task_data):
        valid_task_data["priority"] = "URGENT"
        response = await test_client.post("/api/tasks", json=valid_task_data, headers=manager_headers)
        assert response.status_code == 400

    async def test_list_tasks_newest_first(self, test_client, manager_headers, create_task_factory):
        created = [await create_task_factory(title=f"Task {i}") for i in range(3)]

        response = await test_client.get("/api/tasks", headers=manager_headers)
        assert response.status_code == 200
        ids = [task["id"] for task in response.json()]
        assert ids == [task["id"] for task in reversed(created)]

    async def test_list_tasks_empty(self, test_client, technician_headers):
        response = await test_client.get("/api/tasks", headers=technician_headers)
        assert response.status_code == 200
        assert response.json() == []

    async def test_update_task_replaces_every_field(
        self, test_client, manager_headers, create_task_factory, signup_factory
    ):
        tech = await signup_factory(email="fixer@example.com")
        task = await create_task_factory(title="Original", description="before")

        replacement = {
            "title": "Replaced",
            "description": "after",
            "status": "IN_PROGRESS",
            "priority": "HIGH",
            "technicianId": tech["id"],
            "client": "Globex",
        }
        response = await test_client.put(f"/api/tasks/{task['id']}", json=replacement, headers=manager_headers)
        assert response.status_code == 200
        assert response.text == f"Task {task['id']} updated successfully"

        listed = (await test_client.get("/api/tasks", headers=manager_headers)).json()
        stored = next(t for t in listed if t["id"] == task["id"])
        for field, value in replacement.items():
            assert stored[field] == value
        assert stored["createdAt"] == task["createdAt"]

    async def test_update_task_unassigns_when_technician_omitted(
        self, test_client, manager_headers, create_task_factory, signup_factory
    ):
        tech = await signup_factory(email="assigned@example.com")
        task = await create_task_factory(technicianId=tech["id"], priority="LOW")

        response = await test_client.put(
            f"/api/tasks/{task['id']}",
            json={"title": task["title"], "client": task["client"]},
            headers=manager_headers
        )
        assert response.status_code == 200

        listed = (await test_client.get("/api/tasks", headers=manager_headers)).json()
        assert listed[0]["technicianId"] is None
        assert listed[0]["priority"] == "MEDIUM"

    async def test_technician_can_progress_status(self, test_client, technician_headers, create_task_factory):
        task = await create_task_factory()
        body = {"title": task["title"], "client": task["client"]}

        for status in ["IN_PROGRESS", "COMPLETED", "PENDING"]:
            response = await test_client.put(
                f"/api/tasks/{task['id']}",
                json={**body, "status": status},
                headers=technician_headers
            )
            assert response.status_code == 200

    async def test_update_nonexistent_task(self, test_client, manager_headers, valid_task_data):
        response = await test_client.put("/api/tasks/999999", json=valid_task_data, headers=manager_headers)
        assert response.status_code == 404

    async def test_update_task_invalid_id(self, test_client, manager_headers, valid_task_data):
        response = await test_client.put("/api/tasks/abc", json=valid_task_data, headers=manager_headers)
        assert response.status_code == 400

    async def test_update_task_malformed_body(self, test_client, manager_headers, create_task_factory):
        task = await create_task_factory()
        response = await test_client.put(
            f"/api/tasks/{task['id']}",
            content="not json",
            headers={**manager_headers, "Content-Type": "application/json"}
        )
        assert response.status_code == 400

    async def test_delete_task_is_idempotent(self, test_client, manager_headers, create_task_factory):
        task = await create_task_factory()

        first = await test_client.delete(f"/api/tasks/{task['id']}", headers=manager_headers)
        assert first.status_code == 204
        assert first.content == b""

        second = await test_client.delete(f"/api/tasks/{task['id']}", headers=manager_headers)
        assert second.status_code == 204

        listed = (await test_client.get("/api/tasks", headers=manager_headers)).json()
        assert task["id"] not in [t["id"] for t in listed]

    async def test_delete_task_invalid_id(self, test_client, manager_headers):
        response = await test_client.delete("/api/tasks/abc", headers=manager_headers)
        assert response.status_code == 400

    async def test_technician_cannot_delete_task(self, test_client, technician_headers, create_task_factory):
        task = await create_task_factory()
        response = await test_client.delete(f"/api/tasks/{task['id']}", headers=technician_headers)
        assert response.status_code == 403
