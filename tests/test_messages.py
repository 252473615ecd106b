"""Tests for the durable chat store."""

from app.crud import notification_crud


class TestSendMessage:
    def test_student_sends_to_employer(self, client, db, application, student, employer, headers_for):
        response = client.post(
            "/api/messages",
            json={"application_id": application.id, "content": "Hi, when can I start?"},
            headers=headers_for(student),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["sender_id"] == student.id
        assert body["receiver_id"] == employer.id
        assert body["is_read"] is False

        latest = notification_crud.get_user_notifications(db, employer.id)[0]
        assert latest.type == "new_message"
        assert latest.metadata_ == {
            "task_id": application.task_id,
            "application_id": application.id,
            "message_id": body["id"],
        }

    def test_employer_reply_defaults_to_student(self, client, application, student, employer, headers_for):
        response = client.post(
            "/api/messages",
            json={"application_id": application.id, "content": "Tomorrow works."},
            headers=headers_for(employer),
        )
        assert response.json()["receiver_id"] == student.id

    def test_receiver_must_be_counterpart(self, client, application, student, other_student, headers_for):
        response = client.post(
            "/api/messages",
            json={"application_id": application.id, "receiver_id": other_student.id, "content": "psst"},
            headers=headers_for(student),
        )
        assert response.status_code == 400

    def test_outsider_cannot_send(self, client, application, other_student, headers_for):
        response = client.post(
            "/api/messages",
            json={"application_id": application.id, "content": "hello"},
            headers=headers_for(other_student),
        )
        assert response.status_code == 403

    def test_empty_content(self, client, application, student, headers_for):
        response = client.post(
            "/api/messages",
            json={"application_id": application.id, "content": "   "},
            headers=headers_for(student),
        )
        assert response.status_code == 400

    def test_unknown_application(self, client, student, headers_for):
        response = client.post(
            "/api/messages",
            json={"application_id": 9999, "content": "hello"},
            headers=headers_for(student),
        )
        assert response.status_code == 404


class TestHistory:
    def test_oldest_first(self, client, application, student, employer, headers_for):
        for sender, text in ((student, "one"), (employer, "two"), (student, "three")):
            client.post(
                "/api/messages",
                json={"application_id": application.id, "content": text},
                headers=headers_for(sender),
            )

        response = client.get(f"/api/messages/{application.id}", headers=headers_for(employer))
        assert response.status_code == 200
        assert [m["content"] for m in response.json()] == ["one", "two", "three"]

    def test_admin_can_read(self, client, application, admin, headers_for):
        assert client.get(f"/api/messages/{application.id}", headers=headers_for(admin)).status_code == 200

    def test_outsider_cannot_read(self, client, application, other_student, headers_for):
        assert client.get(f"/api/messages/{application.id}", headers=headers_for(other_student)).status_code == 403


class TestMarkRead:
    def test_receiver_marks_read(self, client, application, student, employer, headers_for):
        message = client.post(
            "/api/messages",
            json={"application_id": application.id, "content": "ping"},
            headers=headers_for(student),
        ).json()

        assert client.patch(f"/api/messages/{message['id']}/read", headers=headers_for(student)).status_code == 403

        response = client.patch(f"/api/messages/{message['id']}/read", headers=headers_for(employer))
        assert response.status_code == 200
        assert response.json()["is_read"] is True
