# tests/v1/test_content_api.py
"""Tests for the publishing endpoints."""

from fastapi import status


def test_create_snippet_cleans_tags(client, bob, bob_headers) -> None:
    response = client.post(
        "/api/snippets",
        json={
            "title": "Debounce",
            "content": "function debounce() {}",
            "language": "javascript",
            "tags": [" JS ", "", "Timers"],
        },
        headers=bob_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["tags"] == ["js", "timers"]
    assert body["author"]["id"] == bob.id
    assert body["is_public"] is True


def test_create_doc_and_bug(client, bob_headers) -> None:
    doc = client.post("/api/docs", json={"title": "Guide", "content": "# Hi"}, headers=bob_headers)
    assert doc.status_code == status.HTTP_201_CREATED

    bug = client.post(
        "/api/bugs",
        json={"title": "NPE", "description": "Null pointer", "content": "stack", "severity": "HIGH"},
        headers=bob_headers,
    )
    assert bug.status_code == status.HTTP_201_CREATED
    assert bug.json()["status"] == "OPEN"
    assert bug.json()["severity"] == "HIGH"


def test_bug_status_permissions(client, alice_headers, bob_headers, admin_headers, bug) -> None:
    url = f"/api/bugs/{bug.id}/status"

    assert client.patch(url, json={"status": "CLOSED"}, headers=alice_headers).status_code == 403

    own = client.patch(url, json={"status": "IN_PROGRESS"}, headers=bob_headers)
    assert own.status_code == status.HTTP_200_OK
    assert own.json()["status"] == "IN_PROGRESS"

    by_admin = client.patch(url, json={"status": "RESOLVED"}, headers=admin_headers)
    assert by_admin.status_code == status.HTTP_200_OK

    inbox = client.get("/api/notifications", headers=bob_headers).json()
    assert [n["type"] for n in inbox["notifications"]] == ["BUG_STATUS_UPDATE"]


def test_bug_status_on_expired_bug(client, bob_headers, expired_bug) -> None:
    response = client.patch(
        f"/api/bugs/{expired_bug.id}/status", json={"status": "CLOSED"}, headers=bob_headers
    )
    assert response.status_code == status.HTTP_410_GONE


def test_delete_content(client, alice_headers, bob_headers, snippet) -> None:
    assert client.delete(f"/api/snippets/{snippet.id}", headers=alice_headers).status_code == 403

    deleted = client.delete(f"/api/snippets/{snippet.id}", headers=bob_headers)
    assert deleted.status_code == status.HTTP_200_OK
    assert deleted.json()["message"] == "Snippet deleted successfully"

    again = client.delete(f"/api/snippets/{snippet.id}", headers=bob_headers)
    assert again.status_code == status.HTTP_404_NOT_FOUND


def test_delete_unknown_collection(client, bob_headers) -> None:
    response = client.delete("/api/widgets/abc", headers=bob_headers)
    assert response.status_code in {status.HTTP_404_NOT_FOUND, status.HTTP_422_UNPROCESSABLE_ENTITY}
