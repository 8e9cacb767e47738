"""End-to-end isolation between two tenants registered through the API."""

import pytest
from fastapi import status


def register_and_login(client, subdomain: str) -> dict:
    password = f"{subdomain}-Passw0rd"
    email = f"owner@{subdomain}.io"
    registered = client.post(
        "/api/v1/auth/register-tenant",
        json={
            "tenantName": subdomain.title(),
            "subdomain": subdomain,
            "adminEmail": email,
            "adminPassword": password,
            "adminFullName": f"{subdomain.title()} Owner",
        },
    )
    assert registered.status_code == status.HTTP_201_CREATED

    login = client.post(
        "/api/v1/auth/login",
        json={"email": email, "password": password, "tenantSubdomain": subdomain},
    )
    assert login.status_code == status.HTTP_200_OK
    data = login.json()["data"]
    return {
        "tenant_id": registered.json()["data"]["tenantId"],
        "user_id": data["user"]["id"],
        "headers": {"Authorization": f"Bearer {data['token']}"},
    }


@pytest.fixture
def workspaces(client):
    north = register_and_login(client, "north")
    south = register_and_login(client, "south")

    for side in (north, south):
        project = client.post(
            "/api/v1/projects", json={"name": "Shared name"}, headers=side["headers"]
        ).json()["data"]
        task = client.post(
            f"/api/v1/projects/{project['id']}/tasks",
            json={"title": "Confidential", "assignedTo": side["user_id"]},
            headers=side["headers"],
        ).json()["data"]
        side["project_id"] = project["id"]
        side["task_id"] = task["id"]
    return north, south


def test_lists_stay_within_tenant(client, workspaces):
    north, south = workspaces

    projects = client.get("/api/v1/projects", headers=north["headers"]).json()["data"]
    users = client.get(
        f"/api/v1/tenants/{north['tenant_id']}/users", headers=north["headers"]
    ).json()["data"]

    assert [item["id"] for item in projects["items"]] == [north["project_id"]]
    assert [item["id"] for item in users["items"]] == [north["user_id"]]


def test_foreign_ids_are_not_found(client, workspaces):
    north, south = workspaces
    headers = north["headers"]

    attempts = [
        client.get(f"/api/v1/projects/{south['project_id']}", headers=headers),
        client.put(f"/api/v1/projects/{south['project_id']}", json={"name": "Mine"}, headers=headers),
        client.delete(f"/api/v1/projects/{south['project_id']}", headers=headers),
        client.get(f"/api/v1/projects/{south['project_id']}/tasks", headers=headers),
        client.post(f"/api/v1/projects/{south['project_id']}/tasks", json={"title": "X"}, headers=headers),
        client.patch(f"/api/v1/tasks/{south['task_id']}/status", json={"status": "completed"}, headers=headers),
        client.put(f"/api/v1/tasks/{south['task_id']}", json={"title": "X"}, headers=headers),
        client.delete(f"/api/v1/tasks/{south['task_id']}", headers=headers),
        client.put(f"/api/v1/users/{south['user_id']}", json={"fullName": "X"}, headers=headers),
        client.delete(f"/api/v1/users/{south['user_id']}", headers=headers),
    ]

    assert [response.status_code for response in attempts] == [status.HTTP_404_NOT_FOUND] * len(attempts)


def test_foreign_tenant_paths_are_forbidden(client, workspaces):
    north, south = workspaces
    headers = north["headers"]
    base = f"/api/v1/tenants/{south['tenant_id']}"

    attempts = [
        client.get(base, headers=headers),
        client.put(base, json={"name": "Taken"}, headers=headers),
        client.get(f"{base}/users", headers=headers),
        client.post(
            f"{base}/users",
            json={"email": "spy@north.io", "password": "Spy-pass-1", "fullName": "Spy"},
            headers=headers,
        ),
        client.get(f"{base}/audit-logs", headers=headers),
    ]

    for response in attempts:
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error"]["code"] == "CROSS_TENANT_ACCESS"


def test_cannot_assign_task_to_foreign_user(client, workspaces):
    north, south = workspaces
    response = client.put(
        f"/api/v1/tasks/{north['task_id']}",
        json={"assignedTo": south["user_id"]},
        headers=north["headers"],
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_failed_attempts_change_nothing(client, workspaces):
    north, south = workspaces
    client.put(f"/api/v1/tasks/{south['task_id']}", json={"title": "Defaced"}, headers=north["headers"])

    task = client.get(
        f"/api/v1/projects/{south['project_id']}/tasks", headers=south["headers"]
    ).json()["data"]["items"][0]
    assert task["title"] == "Confidential"
    assert task["assignedTo"]["id"] == south["user_id"]

    trail = client.get(
        f"/api/v1/tenants/{south['tenant_id']}/audit-logs", headers=south["headers"]
    ).json()["data"]
    assert {item["userId"] for item in trail["items"]} == {south["user_id"]}
