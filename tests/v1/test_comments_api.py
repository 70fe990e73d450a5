# tests/v1/test_comments_api.py
"""Tests for the comment endpoints."""

from fastapi import status


def _comment(client, headers, **body):
    return client.post("/api/comments", json=body, headers=headers)


def test_create_and_list_comments(client, alice, alice_headers, snippet) -> None:
    created = _comment(client, alice_headers, snippet_id=snippet.id, content="Great snippet")
    assert created.status_code == status.HTTP_201_CREATED
    comment = created.json()
    assert comment["author"]["id"] == alice.id

    reply = _comment(
        client, alice_headers, snippet_id=snippet.id, content="Follow-up", parent_id=comment["id"]
    )
    assert reply.status_code == status.HTTP_201_CREATED

    listing = client.get("/api/comments", params={"snippet_id": snippet.id})
    assert listing.status_code == status.HTTP_200_OK
    body = listing.json()
    assert body["total"] == 1
    assert body["comments"][0]["replies"][0]["content"] == "Follow-up"


def test_comment_on_private_doc_is_forbidden(client, alice_headers, private_doc) -> None:
    response = _comment(client, alice_headers, doc_id=private_doc.id, content="Hi")
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_comment_on_expired_bug_is_gone(client, alice_headers, expired_bug) -> None:
    response = _comment(client, alice_headers, bug_id=expired_bug.id, content="Hi")
    assert response.status_code == status.HTTP_410_GONE


def test_comment_content_is_validated(client, alice_headers, snippet) -> None:
    empty = _comment(client, alice_headers, snippet_id=snippet.id, content="")
    too_long = _comment(client, alice_headers, snippet_id=snippet.id, content="x" * 1001)
    assert empty.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert too_long.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_update_and_delete(client, alice_headers, bob_headers, admin_headers, snippet) -> None:
    comment_id = _comment(client, alice_headers, snippet_id=snippet.id, content="v1").json()["id"]

    forbidden = client.put(
        f"/api/comments/{comment_id}", json={"content": "nope"}, headers=bob_headers
    )
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    updated = client.put(
        f"/api/comments/{comment_id}", json={"content": "v2"}, headers=alice_headers
    )
    assert updated.status_code == status.HTTP_200_OK
    assert updated.json()["content"] == "v2"

    assert client.delete(f"/api/comments/{comment_id}", headers=bob_headers).status_code == 403
    deleted = client.delete(f"/api/comments/{comment_id}", headers=admin_headers)
    assert deleted.status_code == status.HTTP_200_OK

    missing = client.delete(f"/api/comments/{comment_id}", headers=admin_headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND
