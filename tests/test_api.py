"""API tests through FastAPI's TestClient with fakes for external services."""

import re

import httpx

from bocado.models.user import User
from bocado.schemas.review import ReviewDraft
from bocado.services.review_submission import submit_review


class TestHealth:

    def test_root_and_health(self, client):
        assert client.get("/").status_code == 200
        assert client.get("/health").json() == {"status": "healthy"}
        assert client.get("/api/v1/health").json() == {"status": "ok"}


class TestReviewsApi:

    def test_submit_requires_auth(self, client, draft_payload):
        response = client.post("/api/v1/reviews", json=draft_payload)

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    def test_submit_creates_user_and_awards_points(self, client, auth, draft_payload, db):
        response = client.post("/api/v1/reviews", json=draft_payload, headers=auth())

        assert response.status_code == 201
        body = response.json()
        assert body["points"]["total_points"] == 700
        assert len(body["achievements"]) == 1
        assert "700 puntos" in body["message"]
        assert db.get(User, "user-ana") is not None

    def test_duplicate_submission_conflicts(self, client, auth, draft_payload):
        client.post("/api/v1/reviews", json=draft_payload, headers=auth())

        response = client.post("/api/v1/reviews", json=draft_payload, headers=auth())

        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_review"

    def test_incomplete_place_is_bad_request(self, client, auth, draft_payload):
        draft_payload["place"] = {"name": "Sin id"}

        response = client.post("/api/v1/reviews", json=draft_payload, headers=auth())

        assert response.status_code == 400

    def test_out_of_range_rating_is_rejected(self, client, auth, draft_payload):
        draft_payload["service"] = 11

        assert client.post("/api/v1/reviews", json=draft_payload, headers=auth()).status_code == 422

    def test_read_place_reviews_and_recommendations(self, client, auth, draft_payload):
        created = client.post("/api/v1/reviews", json=draft_payload, headers=auth()).json()

        review = client.get(f"/api/v1/reviews/{created['review_id']}").json()
        place_reviews = client.get(f"/api/v1/places/{created['place_id']}/reviews").json()
        recommendations = client.get("/api/v1/reviews/recommendations").json()

        assert review["primary_photo_url"] == draft_payload["photo_urls"][0]
        assert [r["id"] for r in place_reviews] == [created["review_id"]]
        assert recommendations[0]["dish_name"] == "Lomito"

    def test_delete_review_removes_photos(self, client, auth, draft_payload, s3_client):
        created = client.post("/api/v1/reviews", json=draft_payload, headers=auth()).json()

        assert client.delete(f"/api/v1/reviews/{created['review_id']}", headers=auth("token-beto")).status_code == 403
        assert client.delete(f"/api/v1/reviews/{created['review_id']}", headers=auth()).status_code == 204
        assert s3_client.delete_object.call_count == 1
        assert client.get(f"/api/v1/reviews/{created['review_id']}").status_code == 404

    def test_submit_rejects_photos_of_another_user(self, client, auth, draft_payload):
        response = client.post("/api/v1/reviews", json=draft_payload, headers=auth("token-beto"))

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_delete_review_keeps_photos_of_other_users(self, client, auth, db, make_user, draft_payload, s3_client):
        beto = make_user("user-beto")
        result = submit_review(db, beto.id, ReviewDraft.model_validate(draft_payload))

        response = client.delete(f"/api/v1/reviews/{result.review_id}", headers=auth("token-beto"))

        assert response.status_code == 204
        s3_client.delete_object.assert_not_called()


class TestPlacesApi:

    def test_select_is_idempotent(self, client, draft_payload):
        first = client.post("/api/v1/places/select", json=draft_payload["place"]).json()
        second = client.post("/api/v1/places/select", json=draft_payload["place"]).json()

        assert first["id"] == second["id"]
        assert first["is_temporary"] is False

    def test_categories_and_local_search(self, client, auth, draft_payload):
        client.post("/api/v1/reviews", json=draft_payload, headers=auth())

        categories = {c["category"]: c for c in client.get("/api/v1/places/categories").json()}
        local = client.get("/api/v1/places/local", params={"query": "cairo"}).json()
        by_category = client.get("/api/v1/places/by-category/BARES").json()

        assert categories["BARES"]["place_count"] == 1
        assert categories["BARES"]["label"] == "Bares"
        assert [p["name"] for p in local] == ["Bar El Cairo"]
        assert len(by_category) == 1

    def test_unknown_category_is_rejected(self, client):
        assert client.get("/api/v1/places/by-category/SUSHI").status_code == 422

    def test_search_proxies_mapping_api(self, client, maps_handler):
        maps_handler.response = httpx.Response(
            200,
            json={
                "status": "OK",
                "results": [
                    {
                        "place_id": "ChIJ-la-estancia",
                        "name": "La Estancia",
                        "formatted_address": "Av. Pellegrini 1500, Rosario",
                        "types": ["restaurant"],
                    }
                ],
            },
        )

        response = client.get("/api/v1/places/search", params={"query": "parrilla"})

        assert response.status_code == 200
        assert response.json()[0]["external_id"] == "ChIJ-la-estancia"
        assert response.json()[0]["local_total_reviews"] == 0

    def test_mapping_api_failure_is_bad_gateway(self, client, maps_handler):
        maps_handler.response = httpx.Response(500)

        response = client.get("/api/v1/places/search", params={"query": "parrilla"})

        assert response.status_code == 502
        assert response.json()["error"] == "external_api_unavailable"


class TestAchievementsAndUsersApi:

    def test_anonymous_progress(self, client):
        response = client.get("/api/v1/achievements/progress")

        assert response.status_code == 200
        assert len(response.json()) == 6

    def test_profile_and_points_history(self, client, auth, draft_payload):
        client.post("/api/v1/reviews", json=draft_payload, headers=auth())

        profile = client.get("/api/v1/users/me", headers=auth()).json()
        history = client.get("/api/v1/users/me/points-history", headers=auth()).json()
        level = client.get("/api/v1/users/me/level", headers=auth()).json()

        assert profile["total_reviews"] == 1
        assert profile["places_reviewed"] == 1
        # 700 for the review, 100 for the first BARES achievement
        assert profile["points"] == 800
        assert level["level_name"] == "Explorador"
        assert sum(row["points_earned"] for row in history) == profile["points"]

    def test_levels_ladder(self, client):
        levels = client.get("/api/v1/users/levels").json()

        assert [level["points_range"] for level in levels][-1] == "10000+"
        assert levels[0]["points_range"] == "0-499"

    def test_statistics_require_auth(self, client):
        assert client.get("/api/v1/achievements/statistics").status_code == 401


class TestNotificationsApi:

    def test_list_and_mark_read(self, client, auth, draft_payload):
        client.post("/api/v1/reviews", json=draft_payload, headers=auth())

        unread = client.get("/api/v1/notifications/unread-count", headers=auth()).json()["unread"]
        notifications = client.get("/api/v1/notifications", headers=auth()).json()

        assert unread == len(notifications) > 0
        first = notifications[0]["id"]
        assert client.post(f"/api/v1/notifications/{first}/read", headers=auth()).status_code == 200
        assert client.get("/api/v1/notifications/unread-count", headers=auth()).json()["unread"] == unread - 1
        assert client.post("/api/v1/notifications/read-all", headers=auth()).json()["updated"] == unread - 1

    def test_unknown_notification(self, client, auth):
        assert client.post("/api/v1/notifications/missing/read", headers=auth()).status_code == 404

    def test_websocket_sends_snapshot(self, client, auth, draft_payload):
        client.post("/api/v1/reviews", json=draft_payload, headers=auth())

        with client.websocket_connect("/api/v1/notifications/ws?token=token-ana") as websocket:
            message = websocket.receive_json()

        assert message["event"] == "notification"
        assert message["notification"]["id"]


class TestEnhanceAndPhotosApi:

    def test_enhance_review_text(self, client):
        response = client.post("/api/v1/enhance/review-text", json={"original_text": "Rico"})

        assert response.json() == {"enhanced_text": "Texto mejorado", "success": True}

    def test_enhance_review_rejects_empty_comment(self, client, auth):
        response = client.post("/api/v1/enhance/review", json={"comment": "   "}, headers=auth())

        assert response.status_code == 422

    def test_upload_photos(self, client, auth):
        files = [
            ("photos[]", ("plato.jpg", b"\xff\xd8\xff", "image/jpeg")),
            ("photos[]", ("notas.txt", b"hola", "text/plain")),
        ]

        response = client.post("/api/v1/photos", data={"review_id": "temp-1"}, files=files, headers=auth())

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert len(body["uploaded_urls"]) == 1
        assert len(body["errors"]) == 1

    def test_upload_accepts_alternative_field_names(self, client, auth, s3_client):
        for field in ("photos", "files"):
            files = [(field, ("plato.jpg", b"\xff\xd8\xff", "image/jpeg"))]

            response = client.post("/api/v1/photos", data={"review_id": "temp-1"}, files=files, headers=auth())

            assert response.status_code == 200
            assert len(response.json()["uploaded_urls"]) == 1
        assert s3_client.put_object.call_count == 2

    def test_upload_without_photos_is_rejected(self, client, auth):
        response = client.post(
            "/api/v1/photos",
            data={"review_id": "temp-1"},
            files=[("otro", ("plato.jpg", b"\xff\xd8\xff", "image/jpeg"))],
            headers=auth(),
        )

        assert response.status_code == 422

    def test_upload_single_photo(self, client, auth):
        response = client.post(
            "/api/v1/photos/single",
            data={"tempReviewId": "temp-9"},
            files={"photo": ("plato.png", b"\x89PNG", "image/png")},
            headers=auth(),
        )

        body = response.json()
        assert response.status_code == 200
        assert re.fullmatch(r"https://bucket\.example\.com/review-photos/user-ana_temp-9_0_\d+\.png", body["url"])
        assert body["file_name"].startswith("review-photos/user-ana_temp-9_")
        assert body["original_name"] == "plato.png"
        assert body["size"] == 4

    def test_upload_single_photo_rejects_non_images(self, client, auth, s3_client):
        response = client.post(
            "/api/v1/photos/single",
            data={"tempReviewId": "temp-9"},
            files={"photo": ("notas.txt", b"hola", "text/plain")},
            headers=auth(),
        )

        assert response.status_code == 422
        s3_client.put_object.assert_not_called()

    def test_delete_photo_of_another_user(self, client, auth):
        url = "https://bucket.example.com/review-photos/user-ana_review-1_0_1.jpg"

        assert client.delete("/api/v1/photos", params={"url": url}, headers=auth("token-beto")).status_code == 403
        assert client.delete("/api/v1/photos", params={"url": url}, headers=auth()).json() == {"success": True}

    def test_client_log(self, client):
        response = client.post("/api/v1/log", json={"level": "warning", "message": "algo pasó"})

        assert response.status_code == 202
