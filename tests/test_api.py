"""Route tests: role gating, JSON error mapping and the dashboard endpoints."""

from __future__ import annotations

import pytest


class TestRoleGating:
    @pytest.mark.parametrize("path", [
        "/api/admin/users",
        "/api/admin/payments",
        "/api/teacher/courses",
        "/api/student/courses",
        "/api/messages/conversations",
    ])
    def test_no_user_is_401(self, client, path):
        resp = client.get(path)
        assert resp.status_code == 401
        assert resp.get_json()["kind"] == "unauthorized"

    def test_unknown_email_is_401(self, client):
        resp = client.get("/api/admin/users", headers={"X-User-Email": "ghost@example.com"})
        assert resp.status_code == 401

    def test_wrong_role_is_403(self, client, student_headers, teacher_headers, admin_headers):
        assert client.get("/api/admin/users", headers=student_headers).status_code == 403
        assert client.get("/api/student/courses", headers=teacher_headers).status_code == 403
        assert client.get("/api/teacher/courses", headers=student_headers).status_code == 403
        assert client.get("/api/student/browse", headers=admin_headers).status_code == 403

    def test_public_course_pages(self, client):
        assert client.get("/api/courses/1").status_code == 200
        assert client.get("/api/courses/1/reviews").status_code == 200


class TestAppBasics:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json()["counts"]["users"] == 17

    def test_security_and_request_id_headers(self, client):
        resp = client.get("/health", headers={"X-Request-ID": "abc123"})
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Request-ID"] == "abc123"

    def test_unknown_route_is_json_404(self, client):
        resp = client.get("/api/nowhere")
        assert resp.status_code == 404
        assert resp.get_json()["kind"] == "not_found"

    def test_each_app_has_its_own_store(self, app, app_store):
        from app import create_app
        other = create_app({"SEED_DEMO_DATA": False})
        assert other.extensions["domain_store"] is not app_store
        assert other.extensions["domain_store"].counts()["users"] == 0

    def test_uuid_id_strategy(self):
        from app import create_app
        app = create_app({"ID_STRATEGY": "uuid", "SEED_DEMO_DATA": False})
        assert len(app.extensions["domain_store"].next_id()) == 32


class TestAdminUsers:
    def test_list_paginated_and_filtered(self, client, admin_headers):
        resp = client.get("/api/admin/users?role=student&limit=4", headers=admin_headers)
        data = resp.get_json()
        assert data["pagination"] == {"page": 1, "limit": 4, "total": 6, "pages": 2}
        assert [u["id"] for u in data["items"]] == ["7", "6", "5", "17"]

    def test_create_then_conflict(self, client, admin_headers):
        body = {"email": "new@example.com", "first_name": "New", "last_name": "User", "role": "teacher"}
        resp = client.post("/api/admin/users", json=body, headers=admin_headers)
        assert resp.status_code == 201
        assert resp.get_json()["join_date"] == "2024-02-15"

        resp = client.post("/api/admin/users", json=body, headers=admin_headers)
        assert resp.status_code == 409
        assert resp.get_json() == {"error": "User with this email already exists", "kind": "conflict"}

    def test_invalid_role_is_400(self, client, admin_headers):
        body = {"email": "x@example.com", "first_name": "X", "role": "root"}
        resp = client.post("/api/admin/users", json=body, headers=admin_headers)
        assert resp.status_code == 400
        assert resp.get_json()["kind"] == "validation"

    def test_patch_and_delete(self, client, admin_headers, app_store):
        resp = client.patch("/api/admin/users/7", json={"status": "suspended"}, headers=admin_headers)
        assert resp.get_json()["status"] == "suspended"
        assert client.delete("/api/admin/users/7", headers=admin_headers).status_code == 200
        assert client.get("/api/admin/users/7", headers=admin_headers).status_code == 404
        assert client.delete("/api/admin/users/7", headers=admin_headers).status_code == 404
        assert [e["action"] for e in app_store.audit_log] == ["user_updated", "user_deleted"]

    def test_patch_missing_user_is_404(self, client, admin_headers):
        resp = client.patch("/api/admin/users/999", json={"bio": "x"}, headers=admin_headers)
        assert resp.status_code == 404

    def test_stats(self, client, admin_headers):
        data = client.get("/api/admin/users/stats", headers=admin_headers).get_json()
        assert data["total_users"] == 17


class TestAdminPayments:
    def test_list_search(self, client, admin_headers):
        data = client.get("/api/admin/payments?q=alice&sort_by=id&sort_order=asc", headers=admin_headers).get_json()
        assert [p["id"] for p in data["items"]] == ["pay_4", "pay_8"]

    def test_refund_flow(self, client, admin_headers):
        resp = client.post("/api/admin/payments/pay_1/refund", json={"amount": 20, "reason": "Late"},
                           headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "partially_refunded"

        resp = client.post("/api/admin/payments/pay_1/refund", json={"amount": 20, "reason": "Again"},
                           headers=admin_headers)
        assert resp.status_code == 400

    def test_refund_missing_payment(self, client, admin_headers):
        resp = client.post("/api/admin/payments/pay_999/refund", json={"amount": 1}, headers=admin_headers)
        assert resp.status_code == 404

    def test_status_update(self, client, admin_headers):
        resp = client.post("/api/admin/payments/pay_3/status", json={"status": "completed"}, headers=admin_headers)
        assert resp.get_json()["completed_at"] == "2024-02-15T12:00:00"
        resp = client.post("/api/admin/payments/pay_3/status", json={"status": "bogus"}, headers=admin_headers)
        assert resp.status_code == 400

    def test_stats_and_revenue(self, client, admin_headers):
        stats = client.get("/api/admin/payments/stats", headers=admin_headers).get_json()
        assert stats["net_revenue"] == 561.5
        revenue = client.get("/api/admin/payments/revenue?days=5", headers=admin_headers).get_json()
        assert list(revenue) == ["2024-02-12"]
        assert client.get("/api/admin/payments/revenue?days=0", headers=admin_headers).status_code == 400


class TestAdminSettings:
    def test_update_export_reset(self, client, admin_headers):
        resp = client.put("/api/admin/settings",
                          json={"section": "general", "key": "currency", "value": "USD"},
                          headers=admin_headers)
        assert resp.get_json()["general"]["currency"] == "USD"

        resp = client.get("/api/admin/settings/export", headers=admin_headers)
        assert resp.mimetype == "application/json"
        assert resp.get_json()["general"]["currency"] == "USD"

        resp = client.delete("/api/admin/settings", headers=admin_headers)
        assert resp.get_json()["general"]["currency"] == "ARS"

    def test_unknown_key_is_400(self, client, admin_headers):
        resp = client.put("/api/admin/settings", json={"general": {"bogus": 1}}, headers=admin_headers)
        assert resp.status_code == 400


class TestTeacherRoutes:
    def test_my_courses(self, client, teacher_headers):
        data = client.get("/api/teacher/courses", headers=teacher_headers).get_json()
        assert [c["id"] for c in data] == ["1", "4", "13"]

    def test_create_update_duplicate(self, client, teacher_headers):
        resp = client.post("/api/teacher/courses", json={
            "title": "Trigonometry", "price": 40, "subject": "Mathematics",
            "level": "beginner", "total_lessons": 10,
        }, headers=teacher_headers)
        assert resp.status_code == 201
        course = resp.get_json()
        assert course["teacher_id"] == "2"

        resp = client.patch(f"/api/teacher/courses/{course['id']}", json={"status": "active"}, headers=teacher_headers)
        assert resp.get_json()["status"] == "active"

        resp = client.post(f"/api/teacher/courses/{course['id']}/duplicate", headers=teacher_headers)
        assert resp.get_json()["title"] == "Trigonometry (Copy)"

    def test_cannot_manage_other_teachers_course(self, client, teacher_headers):
        resp = client.patch("/api/teacher/courses/2", json={"price": 1}, headers=teacher_headers)
        assert resp.status_code == 403

    def test_missing_course_is_404(self, client, teacher_headers):
        assert client.delete("/api/teacher/courses/999", headers=teacher_headers).status_code == 404

    def test_students_and_analytics(self, client, teacher_headers):
        students = client.get("/api/teacher/courses/1/students", headers=teacher_headers).get_json()
        assert [s["id"] for s in students] == ["5", "6"]
        analytics = client.get("/api/teacher/courses/1/analytics", headers=teacher_headers).get_json()
        assert analytics["completed_students"] == 2
        overall = client.get("/api/teacher/analytics", headers=teacher_headers).get_json()
        assert overall["total_courses"] == 3

    def test_add_material(self, client, teacher_headers):
        resp = client.post("/api/teacher/courses/1/materials",
                           json={"name": "Cheat sheet.pdf", "type": "pdf", "size": "1 MB", "url": "/m.pdf"},
                           headers=teacher_headers)
        assert resp.status_code == 201
        assert resp.get_json()["download_count"] == 0


class TestStudentRoutes:
    def test_browse(self, client, student_headers):
        data = client.get("/api/student/browse", headers=student_headers).get_json()
        assert len(data) == 12
        data = client.get("/api/student/browse?level=advanced", headers=student_headers).get_json()
        assert {c["id"] for c in data} == {"4", "7"}

    def test_my_courses(self, client, student_headers):
        data = client.get("/api/student/courses?status=active", headers=student_headers).get_json()
        assert [c["id"] for c in data] == ["2"]
        assert data[0]["enrollment"]["progress"] == 45

    def test_enroll(self, client, student_headers):
        client.post("/api/student/wishlist", json={"course_id": "4"}, headers=student_headers)
        resp = client.post("/api/student/courses/4/enroll", json={"payment_method": "PayPal"},
                           headers=student_headers)
        assert resp.status_code == 201
        body = resp.get_json()
        assert body["payment"]["payment_method"] == "PayPal"
        assert body["enrollment"]["payment_id"] == body["payment"]["id"]
        assert client.get("/api/student/wishlist", headers=student_headers).get_json() == []

    def test_enroll_unknown_course(self, client, student_headers):
        assert client.post("/api/student/courses/999/enroll", headers=student_headers).status_code == 404

    def test_wishlist_round_trip(self, client, student_headers):
        resp = client.post("/api/student/wishlist", json={"course_id": "5"}, headers=student_headers)
        assert resp.status_code == 201
        items = client.get("/api/student/wishlist", headers=student_headers).get_json()
        assert items[0]["course"]["title"] == "Biology Essentials"
        resp = client.delete("/api/student/wishlist?course_id=5", headers=student_headers)
        assert resp.get_json() == {"success": True}

    def test_payments_pending_reviews_downloads(self, client, student_headers):
        payments = client.get("/api/student/payments", headers=student_headers).get_json()
        assert [p["id"] for p in payments] == ["pay_1", "pay_2", "pay_3"]
        pending = client.get("/api/student/reviews/pending", headers=student_headers).get_json()
        assert [c["id"] for c in pending] == ["1"]
        downloads = client.get("/api/student/downloads?sort_by=date", headers=student_headers).get_json()
        assert downloads[0]["name"] == "Solutions Manual.pdf"

    def test_complete_lesson(self, client, student_headers):
        resp = client.post("/api/student/enrollments/1/lessons/3", headers=student_headers)
        assert resp.status_code == 200
        assert "3" in resp.get_json()["completed_lessons"]

    def test_complete_unknown_lesson_is_404(self, client, student_headers):
        resp = client.post("/api/student/enrollments/1/lessons/99", headers=student_headers)
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "Lesson not found"

    def test_complete_lesson_on_someone_elses_enrollment(self, client, student_headers):
        assert client.post("/api/student/enrollments/4/lessons/1", headers=student_headers).status_code == 404


class TestCoursePages:
    def test_detail_with_viewer_flags(self, client, student_headers):
        data = client.get("/api/courses/1", headers=student_headers).get_json()
        assert len(data["sections"]) == 2
        assert data["viewer"] == {
            "is_enrolled": True, "is_in_wishlist": False, "has_reviewed": False, "can_review": True,
        }

    def test_detail_missing(self, client):
        assert client.get("/api/courses/999").status_code == 404

    def test_review_flow(self, client, student_headers, app_store):
        resp = client.post("/api/courses/1/reviews", json={"rating": 5, "title": "Great", "comment": "Loved it"},
                           headers=student_headers)
        assert resp.status_code == 201
        assert app_store.get_by_id(app_store.courses, "1").review_count == 3

        resp = client.post("/api/courses/1/reviews", json={"rating": 5, "title": "Again", "comment": "x"},
                           headers=student_headers)
        assert resp.status_code == 409

    def test_reviews_sorted(self, client):
        data = client.get("/api/courses/1/reviews?sort_by=oldest").get_json()
        assert [r["id"] for r in data] == ["2", "1"]

    def test_helpful_vote(self, client, student_headers):
        resp = client.post("/api/reviews/1/helpful", json={"is_helpful": True}, headers=student_headers)
        assert resp.get_json()["helpful_votes"] == 1
        data = client.get("/api/courses/1/reviews", headers=student_headers).get_json()
        assert data[0]["my_vote"] is True

    @pytest.mark.parametrize("value", ["false", 0, None, "yes"])
    def test_helpful_vote_needs_json_boolean(self, client, student_headers, app_store, value):
        resp = client.post("/api/reviews/1/helpful", json={"is_helpful": value}, headers=student_headers)
        assert resp.status_code == 400
        assert resp.get_json()["kind"] == "validation"
        assert app_store.review_votes == []

    def test_helpful_vote_false(self, client, student_headers):
        resp = client.post("/api/reviews/1/helpful", json={"is_helpful": False}, headers=student_headers)
        assert resp.get_json()["vote"]["is_helpful"] is False
        assert resp.get_json()["helpful_votes"] == 0

    def test_material_download_requires_enrollment(self, client, student_headers):
        resp = client.post("/api/materials/3/download", headers=student_headers)
        assert resp.get_json()["download_count"] == 68
        resp = client.post("/api/materials/3/download", headers={"X-User-Email": "bob.smith@example.com"})
        assert resp.status_code == 403


class TestMessageRoutes:
    def test_conversation_flow(self, client, student_headers, teacher_headers):
        resp = client.post("/api/messages/5", json={"content": "Office hours moved", "course_id": "1"},
                           headers=teacher_headers)
        assert resp.status_code == 201

        data = client.get("/api/messages/conversations", headers=student_headers).get_json()
        assert data["unread_total"] == 1
        assert data["conversations"][0]["participant_name"] == "Dr. James Wilson"

        thread = client.get("/api/messages/2", headers=student_headers).get_json()
        assert thread[-1]["content"] == "Office hours moved"
        data = client.get("/api/messages/conversations", headers=student_headers).get_json()
        assert data["unread_total"] == 0

    def test_send_to_unknown_user(self, client, student_headers):
        resp = client.post("/api/messages/999", json={"content": "hi"}, headers=student_headers)
        assert resp.status_code == 404
