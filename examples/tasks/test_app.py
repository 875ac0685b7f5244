"""Tests for the tasks example."""

import json

from perch.testing import TestClient

JSON = {"accept": "application/json"}
API = {"x-api-key": "let-me-in"}


class TestRouteTable:
    def test_actions_register_in_directory_order(self, example_app) -> None:
        table = [(sorted(r.methods)[0], r.path, r.handler_name) for r in example_app.routes]
        assert table == [
            ("DELETE", "/admin/tasks", "PurgeTasks.purge"),
            ("POST", "/tasks/{task_id:int}/complete", "CompleteTask"),
            ("POST", "/tasks", "CreateTask"),
            ("GET", "/tasks", "ListTasks"),
            ("GET", "/tasks/{task_id:int}", "ShowTask"),
        ]


class TestTasks:
    async def test_create_and_list(self, example_app) -> None:
        async with TestClient(example_app) as client:
            created = await client.post("/tasks", json={"title": "Write docs"})
            listed = await client.get("/tasks", headers=JSON)

        assert created.status == 201
        assert json.loads(created.text) == {"id": 1, "title": "Write docs", "done": False}
        assert json.loads(listed.text) == {"data": [{"id": 1, "title": "Write docs", "done": False}]}

    async def test_browser_gets_html_list(self, example_app) -> None:
        async with TestClient(example_app) as client:
            await client.post("/tasks", form={"title": "<b>Ship</b>"})
            response = await client.get("/tasks", headers={"accept": "text/html"})

        assert response.content_type.startswith("text/html")
        assert response.text == '<ul><li class="open">&lt;b&gt;Ship&lt;/b&gt;</li></ul>'

    async def test_title_is_required(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.post("/tasks", json={"title": ""}, headers=JSON)

        assert response.status == 422
        assert json.loads(response.text)["errors"] == {"title": ["This field is required"]}

    async def test_status_filter_is_validated(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/tasks?status=archived", headers=JSON)

        assert response.status == 422

    async def test_show_missing_task(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/tasks/99", headers=JSON)

        assert response.status == 404
        assert json.loads(response.text)["detail"] == "No task 99"

    async def test_timing_header_on_every_response(self, example_app) -> None:
        async with TestClient(example_app) as client:
            response = await client.get("/tasks")

        assert response.header("x-response-time", "").endswith("s")


class TestCompleteTask:
    async def test_requires_api_key(self, example_app) -> None:
        async with TestClient(example_app) as client:
            await client.post("/tasks", json={"title": "Review"})
            response = await client.post("/tasks/1/complete")

        assert response.status == 401

    async def test_viewer_is_forbidden(self, example_app) -> None:
        async with TestClient(example_app) as client:
            await client.post("/tasks", json={"title": "Review"})
            response = await client.post("/tasks/1/complete", headers={**API, "x-role": "viewer"})

        assert response.status == 403

    async def test_completes_task(self, example_app) -> None:
        async with TestClient(example_app) as client:
            await client.post("/tasks", json={"title": "Review"})
            done = await client.post("/tasks/1/complete", headers=API)
            open_tasks = await client.get("/tasks?status=open", headers=JSON)

        assert json.loads(done.text) == {"id": 1, "title": "Review", "done": True}
        assert json.loads(open_tasks.text) == {"data": []}


class TestPurge:
    async def test_purge_behind_api_key(self, example_app) -> None:
        async with TestClient(example_app) as client:
            await client.post("/tasks", json={"title": "One"})
            await client.post("/tasks", json={"title": "Two"})
            denied = await client.delete("/admin/tasks")
            purged = await client.delete("/admin/tasks", headers=API)

        assert denied.status == 401
        assert json.loads(purged.text) == {"deleted": 2}
