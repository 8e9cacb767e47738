"""Integration tests for task endpoints."""

from datetime import date

import pytest
from fastapi import status

from app.models import AuditLog, Task


def tasks_url(project_id) -> str:
    return f"/api/v1/projects/{project_id}/tasks"


@pytest.fixture
def project(tenant, tenant_admin, project_factory):
    return project_factory(tenant, created_by=tenant_admin, name="Launch")


class TestCreateTask:
    def test_create_with_assignee(self, client, db_session, tenant, project, member, token_for):
        response = client.post(
            tasks_url(project.id),
            json={
                "title": "Write copy",
                "priority": "high",
                "assignedTo": str(member.id),
                "dueDate": "2026-03-01",
            },
            headers=token_for(member),
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["status"] == "todo"
        assert data["priority"] == "high"
        assert data["tenantId"] == str(tenant.id)
        assert data["projectId"] == str(project.id)
        assert data["assignedTo"]["id"] == str(member.id)
        assert data["dueDate"] == "2026-03-01"
        assert db_session.query(AuditLog).filter_by(action="CREATE_TASK").count() == 1

    def test_defaults(self, client, project, member, token_for):
        data = client.post(
            tasks_url(project.id), json={"title": "Plain"}, headers=token_for(member)
        ).json()["data"]
        assert data["priority"] == "medium"
        assert data["assignedTo"] is None
        assert data["dueDate"] is None

    def test_assignee_from_other_tenant_rejected(
        self, client, db_session, project, member, other_tenant, user_factory, token_for
    ):
        outsider = user_factory(other_tenant)
        response = client.post(
            tasks_url(project.id),
            json={"title": "Leak", "assignedTo": str(outsider.id)},
            headers=token_for(member),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert db_session.query(Task).count() == 0

    def test_unknown_assignee_rejected(self, client, project, member, token_for):
        response = client.post(
            tasks_url(project.id),
            json={"title": "Ghost", "assignedTo": "00000000-0000-0000-0000-000000000001"},
            headers=token_for(member),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_priority(self, client, project, member, token_for):
        response = client.post(
            tasks_url(project.id), json={"title": "X", "priority": "urgent"}, headers=token_for(member)
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_project_in_other_tenant_hidden(
        self, client, other_tenant, member, project_factory, token_for
    ):
        foreign = project_factory(other_tenant)
        response = client.post(tasks_url(foreign.id), json={"title": "X"}, headers=token_for(member))
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestListTasks:
    def test_priority_then_due_date_order(self, client, project, member, task_factory, token_for):
        task_factory(project, title="low-early", priority="low", due_date=date(2026, 1, 1))
        task_factory(project, title="high-undated", priority="high")
        task_factory(project, title="medium-late", priority="medium", due_date=date(2026, 6, 1))
        task_factory(project, title="high-late", priority="high", due_date=date(2026, 5, 1))
        task_factory(project, title="medium-early", priority="medium", due_date=date(2026, 2, 1))
        task_factory(project, title="high-early", priority="high", due_date=date(2026, 1, 15))

        response = client.get(tasks_url(project.id), headers=token_for(member))

        assert response.status_code == status.HTTP_200_OK
        titles = [item["title"] for item in response.json()["data"]["items"]]
        assert titles == [
            "high-early",
            "high-late",
            "high-undated",
            "medium-early",
            "medium-late",
            "low-early",
        ]

    def test_unrecognized_priority_sorts_last(self, client, project, member, task_factory, token_for):
        task_factory(project, title="odd", priority="someday")
        task_factory(project, title="low", priority="low")
        titles = [
            item["title"]
            for item in client.get(tasks_url(project.id), headers=token_for(member)).json()["data"]["items"]
        ]
        assert titles == ["low", "odd"]

    def test_filters_combine(self, client, project, member, tenant_admin, task_factory, token_for):
        task_factory(project, title="Fix login bug", priority="high", assigned_to=member.id)
        task_factory(project, title="Fix signup bug", priority="low", assigned_to=member.id)
        task_factory(project, title="Fix logout bug", priority="high", assigned_to=tenant_admin.id)
        task_factory(project, title="Write docs", priority="high", assigned_to=member.id, status="completed")

        response = client.get(
            tasks_url(project.id),
            params={"assignedTo": str(member.id), "priority": "high", "search": "BUG"},
            headers=token_for(member),
        )
        page = response.json()["data"]
        assert page["total"] == 1
        assert page["items"][0]["title"] == "Fix login bug"

        done = client.get(
            tasks_url(project.id), params={"status": "completed"}, headers=token_for(member)
        ).json()["data"]
        assert [item["title"] for item in done["items"]] == ["Write docs"]

    def test_search_wildcards_are_literal(self, client, project, member, task_factory, token_for):
        task_factory(project, title="50% done")
        task_factory(project, title="5000 units")

        percent = client.get(
            tasks_url(project.id), params={"search": "50%"}, headers=token_for(member)
        ).json()["data"]
        everything = client.get(
            tasks_url(project.id), params={"search": "%"}, headers=token_for(member)
        ).json()["data"]

        assert [item["title"] for item in percent["items"]] == ["50% done"]
        assert [item["title"] for item in everything["items"]] == ["50% done"]

    def test_pagination(self, client, project, member, task_factory, token_for):
        for n in range(5):
            task_factory(project, title=f"T{n}")
        page = client.get(
            tasks_url(project.id), params={"page": 3, "limit": 2}, headers=token_for(member)
        ).json()["data"]
        assert page["total"] == 5
        assert len(page["items"]) == 1
        assert page["pagination"] == {"currentPage": 3, "totalPages": 3, "limit": 2}

    def test_other_tenant_project_hidden(self, client, other_tenant, member, project_factory, token_for):
        foreign = project_factory(other_tenant)
        response = client.get(tasks_url(foreign.id), headers=token_for(member))
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestUpdateTask:
    def test_status_change(self, client, project, member, task_factory, token_for):
        task = task_factory(project)
        response = client.patch(
            f"/api/v1/tasks/{task.id}/status", json={"status": "in_progress"}, headers=token_for(member)
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["status"] == "in_progress"

    def test_invalid_status(self, client, project, member, task_factory, token_for):
        task = task_factory(project)
        response = client.patch(
            f"/api/v1/tasks/{task.id}/status", json={"status": "done"}, headers=token_for(member)
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_any_member_edits_any_task(self, client, project, member, task_factory, token_for):
        # project belongs to the admin; tasks carry no creator restriction
        task = task_factory(project, title="Admin's task")
        response = client.put(
            f"/api/v1/tasks/{task.id}",
            json={"title": "Member edit", "priority": "low", "dueDate": "2026-04-30"},
            headers=token_for(member),
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert (data["title"], data["priority"], data["dueDate"]) == ("Member edit", "low", "2026-04-30")

    def test_explicit_null_clears_assignee(self, client, project, member, task_factory, token_for):
        task = task_factory(project, assigned_to=member.id, due_date=date(2026, 1, 1))
        response = client.put(
            f"/api/v1/tasks/{task.id}", json={"assignedTo": None}, headers=token_for(member)
        )
        data = response.json()["data"]
        assert data["assignedTo"] is None
        assert data["dueDate"] == "2026-01-01"

    def test_null_title_rejected(self, client, project, member, task_factory, token_for):
        task = task_factory(project)
        response = client.put(f"/api/v1/tasks/{task.id}", json={"title": None}, headers=token_for(member))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_reassign_outside_tenant_rejected(
        self, client, project, member, other_tenant, user_factory, task_factory, token_for
    ):
        task = task_factory(project)
        outsider = user_factory(other_tenant)
        response = client.put(
            f"/api/v1/tasks/{task.id}", json={"assignedTo": str(outsider.id)}, headers=token_for(member)
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_same_status_twice_audited_once(self, client, db_session, project, member, task_factory, token_for):
        task = task_factory(project)
        for _ in range(2):
            client.patch(
                f"/api/v1/tasks/{task.id}/status", json={"status": "completed"}, headers=token_for(member)
            )
        assert db_session.query(AuditLog).filter_by(action="UPDATE_TASK").count() == 1

    def test_other_tenant_task_hidden(
        self, client, other_tenant, member, project_factory, task_factory, token_for
    ):
        foreign = task_factory(project_factory(other_tenant))
        response = client.put(f"/api/v1/tasks/{foreign.id}", json={"title": "X"}, headers=token_for(member))
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "TASK_NOT_FOUND"


class TestDeleteTask:
    def test_member_deletes(self, client, db_session, project, member, task_factory, token_for):
        task = task_factory(project)
        response = client.delete(f"/api/v1/tasks/{task.id}", headers=token_for(member))
        assert response.status_code == status.HTTP_200_OK
        assert db_session.query(Task).count() == 0

    def test_unknown_task(self, client, member, token_for):
        response = client.delete(
            "/api/v1/tasks/00000000-0000-0000-0000-000000000009", headers=token_for(member)
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
