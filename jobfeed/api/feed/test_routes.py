"""피드 API 테스트

사용법: python -m pytest jobfeed/api/feed/test_routes.py -v
"""

import io

from jobfeed.core.errors import EMPTY_DRAFT_MESSAGE, UPLOAD_FAILED_MESSAGE


def _upload(client, headers, name="a.png"):
    return client.post(
        "/api/feed/draft/image",
        data={"file": (io.BytesIO(b"\x89PNG..."), name)},
        content_type="multipart/form-data",
        headers=headers,
    )


def test_requires_token(client):
    assert client.get("/api/feed/posts").status_code == 401


def test_open_draft(client, auth_headers):
    res = client.post("/api/feed/draft", headers=auth_headers())

    assert res.status_code == 201
    body = res.get_json()
    assert body["message"] == ""
    assert body["image_url"] == ""
    assert body["is_submittable"] is False
    assert body["pending_filename"] is None


def test_draft_routes_need_open_draft(client, auth_headers):
    headers = auth_headers()
    assert client.get("/api/feed/draft", headers=headers).status_code == 404
    assert client.patch("/api/feed/draft", json={"message": "x"}, headers=headers).status_code == 404
    assert client.post("/api/feed/draft/submit", headers=headers).status_code == 404


def test_patch_message_validation(client, auth_headers):
    headers = auth_headers()
    client.post("/api/feed/draft", headers=headers)

    res = client.patch("/api/feed/draft", json={}, headers=headers)

    assert res.status_code == 400
    assert res.get_json()["error_code"] == "VALIDATION_ERROR"


def test_upload_then_submit(client, auth_headers, post_service):
    headers = auth_headers("u1")
    client.post("/api/feed/draft", headers=headers)
    client.patch("/api/feed/draft", json={"message": "We are hiring"}, headers=headers)

    res = _upload(client, headers)
    assert res.status_code == 200
    assert res.get_json()["outcome"] == "committed"
    assert res.get_json()["draft"]["image_url"] == "https://storage.test/public/a.png"

    res = client.post("/api/feed/draft/submit", headers=headers)

    assert res.status_code == 201
    post = res.get_json()
    assert post["message"] == "We are hiring"
    assert post["image"] == "https://storage.test/public/a.png"
    assert post["author_name"] == "Alice"
    assert post["likes"] == []
    assert post["like_count"] == 0
    assert post["is_liked"] is False
    assert post_service.created[0][1] == "/feed"

    draft = client.get("/api/feed/draft", headers=headers).get_json()
    assert draft["message"] == ""
    assert draft["image_url"] == ""


def test_submit_empty_draft(client, auth_headers, post_service):
    headers = auth_headers()
    client.post("/api/feed/draft", headers=headers)

    res = client.post("/api/feed/draft/submit", headers=headers)

    assert res.status_code == 400
    assert res.get_json()["message"] == EMPTY_DRAFT_MESSAGE
    assert client.get("/api/feed/draft", headers=headers).get_json()["error"] == EMPTY_DRAFT_MESSAGE
    assert post_service.created == []


def test_submit_persistence_failure(client, auth_headers, post_service):
    post_service.fail_create = True
    headers = auth_headers()
    client.post("/api/feed/draft", headers=headers)
    client.patch("/api/feed/draft", json={"message": "hi"}, headers=headers)

    res = client.post("/api/feed/draft/submit", headers=headers)

    assert res.status_code == 502
    assert res.get_json()["error_code"] == "PERSISTENCE_FAILED"
    assert client.get("/api/feed/draft", headers=headers).get_json()["message"] == "hi"


def test_upload_failure_sets_draft_error(client, auth_headers, storage):
    storage.fail_upload = True
    headers = auth_headers()
    client.post("/api/feed/draft", headers=headers)

    res = _upload(client, headers)

    assert res.status_code == 502
    body = res.get_json()
    assert body["error_code"] == "UPLOAD_FAILED"
    assert body["draft"]["error"] == UPLOAD_FAILED_MESSAGE
    assert body["draft"]["image_url"] == ""
    assert storage.called("get_public_url") == []


def test_upload_requires_file(client, auth_headers):
    headers = auth_headers()
    client.post("/api/feed/draft", headers=headers)

    res = client.post("/api/feed/draft/image", data={}, content_type="multipart/form-data", headers=headers)

    assert res.status_code == 400


def test_discard_draft(client, auth_headers):
    headers = auth_headers()
    client.post("/api/feed/draft", headers=headers)
    client.patch("/api/feed/draft", json={"message": "never mind"}, headers=headers)

    assert client.delete("/api/feed/draft", headers=headers).status_code == 204
    assert client.get("/api/feed/draft", headers=headers).status_code == 404


def test_like_and_unlike(client, auth_headers, stored_post):
    alice, bob = auth_headers("u1"), auth_headers("u2")

    res = client.post("/api/feed/posts/p1/like", headers=alice)
    assert res.status_code == 200
    assert res.get_json()["is_liked"] is True
    assert res.get_json()["likes"] == [{"reactor_user_id": "u1", "reactor_user_name": "Alice"}]

    res = client.post("/api/feed/posts/p1/like", headers=bob)
    assert [like["reactor_user_id"] for like in res.get_json()["likes"]] == ["u1", "u2"]

    res = client.post("/api/feed/posts/p1/like", headers=alice)
    body = res.get_json()
    assert body["is_liked"] is False
    assert body["like_count"] == 1
    assert body["likes"] == [{"reactor_user_id": "u2", "reactor_user_name": "Bob"}]


def test_like_missing_post(client, auth_headers):
    res = client.post("/api/feed/posts/missing/like", headers=auth_headers())
    assert res.status_code == 404
    assert res.get_json()["error_code"] == "POST_NOT_FOUND"


def test_like_persistence_failure(client, auth_headers, stored_post, post_service):
    post_service.fail_update = True

    res = client.post("/api/feed/posts/p1/like", headers=auth_headers())

    assert res.status_code == 502
    assert post_service.posts["p1"].likes == []


def test_feed_lists_posts_with_like_state(client, auth_headers, stored_post):
    client.post("/api/feed/posts/p1/like", headers=auth_headers("u2"))

    alice_view = client.get("/api/feed/posts", headers=auth_headers("u1")).get_json()["posts"]
    bob_view = client.get("/api/feed/posts", headers=auth_headers("u2")).get_json()["posts"]

    assert alice_view[0]["post_id"] == "p1"
    assert alice_view[0]["like_count"] == 1
    assert alice_view[0]["is_liked"] is False
    assert bob_view[0]["is_liked"] is True


def test_distinct_korean_filenames_do_not_collide(client, auth_headers, storage):
    headers = auth_headers()
    client.post("/api/feed/draft", headers=headers)

    first = _upload(client, headers, "사진.png")
    second = _upload(client, headers, "강아지.png")

    assert first.status_code == 200
    assert second.status_code == 200
    assert second.get_json()["draft"]["image_url"] == "https://storage.test/public/강아지.png"
    assert set(storage.objects) == {"public/사진.png", "public/강아지.png"}


def test_non_ascii_name_without_extension_is_accepted(client, auth_headers, storage):
    headers = auth_headers()
    client.post("/api/feed/draft", headers=headers)

    res = _upload(client, headers, "사진")

    assert res.status_code == 200
    assert "public/사진" in storage.objects


def test_upload_filename_drops_directories(client, auth_headers, storage):
    headers = auth_headers()
    client.post("/api/feed/draft", headers=headers)

    assert _upload(client, headers, "..\\..\\etc\\a.png").status_code == 200
    assert _upload(client, headers, "..").status_code == 400
    assert set(storage.objects) == {"public/a.png"}
