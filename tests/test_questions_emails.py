"""
Tests for job Q&A, email drafting, the inbox and the email assistant.
"""

from conftest import signup


class TestQuestions:
    """Tests for asking and answering questions about a job."""

    def test_ask_and_list_newest_first(self, client, seeker, create_job):
        job = create_job()
        for text in ("Is it remote?", "  What is the salary?  "):
            response = client.post(
                f"/api/jobs/{job['job_id']}/questions", json={"question_text": text}, headers=seeker[0],
            )
            assert response.status_code == 201

        questions = client.get(f"/api/jobs/{job['job_id']}/questions").json()
        assert [q["question_text"] for q in questions] == ["What is the salary?", "Is it remote?"]
        assert questions[0]["user_name"] == "Bob Smith"
        assert questions[0]["answer"] is None

    def test_blank_question(self, client, seeker, create_job):
        job = create_job()
        response = client.post(
            f"/api/jobs/{job['job_id']}/questions", json={"question_text": "   "}, headers=seeker[0],
        )
        assert response.status_code == 400

    def test_question_on_missing_job(self, client, seeker):
        response = client.post("/api/jobs/77/questions", json={"question_text": "Hello?"}, headers=seeker[0])
        assert response.status_code == 404

    def test_owner_answers(self, client, hr, seeker, create_job):
        job = create_job()
        question = client.post(
            f"/api/jobs/{job['job_id']}/questions", json={"question_text": "Is it remote?"}, headers=seeker[0],
        ).json()

        response = client.post(
            f"/api/questions/{question['question_id']}/answer", json={"answer_text": "Yes, fully."}, headers=hr[0],
        )
        assert response.status_code == 200
        answer = response.json()["answer"]
        assert answer["answer_text"] == "Yes, fully."
        assert answer["hr_name"] == "Alice HR"
        assert answer["hr_id"] == hr[1]

    def test_other_hr_cannot_answer(self, client, other_hr, seeker, create_job):
        job = create_job()
        question = client.post(
            f"/api/jobs/{job['job_id']}/questions", json={"question_text": "Is it remote?"}, headers=seeker[0],
        ).json()
        response = client.post(
            f"/api/questions/{question['question_id']}/answer", json={"answer_text": "No."}, headers=other_hr[0],
        )
        assert response.status_code == 404

    def test_missing_question(self, client, hr):
        response = client.post("/api/questions/55/answer", json={"answer_text": "No."}, headers=hr[0])
        assert response.status_code == 404
        assert response.json()["detail"] == "Question not found"


class TestEmailDrafts:
    """Tests for AI-drafted emails."""

    def test_hr_follow_up(self, client, hr, seeker, create_job, apply, llm):
        job = create_job()
        app = apply(seeker[0], job["job_id"]).json()
        llm.reply({"subject": " Update on your application ", "body": "You have been hired!"})

        response = client.post(
            "/api/emails/follow-up", json={"candidate_id": app["candidate_id"], "status": "Hired"}, headers=hr[0],
        )
        assert response.status_code == 200
        assert response.json() == {"subject": "Update on your application", "body": "You have been hired!"}
        assert "Bob Smith" in llm.calls[-1]["user"]
        assert '"Hired"' in llm.calls[-1]["user"]

    def test_follow_up_for_other_hr(self, client, other_hr, seeker, create_job, apply):
        job = create_job()
        app = apply(seeker[0], job["job_id"]).json()
        response = client.post(
            "/api/emails/follow-up", json={"candidate_id": app["candidate_id"], "status": "Hired"},
            headers=other_hr[0],
        )
        assert response.status_code == 404

    def test_incomplete_draft(self, client, hr, seeker, create_job, apply, llm):
        job = create_job()
        app = apply(seeker[0], job["job_id"]).json()
        llm.reply({"subject": "Hi"})
        response = client.post(
            "/api/emails/follow-up", json={"candidate_id": app["candidate_id"], "status": "Rejected"}, headers=hr[0],
        )
        assert response.status_code == 502

    def test_seeker_follow_up(self, client, seeker, create_job, apply, llm):
        job = create_job(company_name="Acme")
        apply(seeker[0], job["job_id"])
        llm.reply({"subject": "Following up", "body": "Any news?"})

        response = client.post(f"/api/emails/seeker-follow-up/{job['job_id']}", headers=seeker[0])
        assert response.status_code == 200
        assert response.json()["subject"] == "Following up"
        assert "Under Review" in llm.calls[-1]["user"]
        assert "Acme" in llm.calls[-1]["user"]


class TestInbox:
    """Tests for sending, listing and reading emails."""

    def test_send_and_mark_read(self, client, hr, seeker):
        response = client.post("/api/emails", json={
            "user_id": seeker[1], "job_title": "Backend Engineer", "subject": "Hello", "body": "Welcome aboard",
        }, headers=hr[0])
        assert response.status_code == 201
        assert response.json()["read"] is False

        client.post("/api/emails", json={
            "user_id": seeker[1], "job_title": "Backend Engineer", "subject": "Second", "body": "Another",
        }, headers=hr[0])
        inbox = client.get("/api/emails", headers=seeker[0]).json()
        assert [e["subject"] for e in inbox] == ["Second", "Hello"]

        marked = client.post("/api/emails/mark-read", headers=seeker[0]).json()
        assert marked["message"] == "2 email(s) marked as read"
        assert all(e["read"] for e in client.get("/api/emails", headers=seeker[0]).json())

    def test_unknown_recipient(self, client, hr):
        response = client.post("/api/emails", json={
            "user_id": 4242, "job_title": "Backend Engineer", "subject": "Hello", "body": "Hi",
        }, headers=hr[0])
        assert response.status_code == 404
        assert response.json()["detail"] == "Recipient not found"

    def test_seeker_cannot_send(self, client, seeker):
        response = client.post("/api/emails", json={
            "user_id": seeker[1], "job_title": "X", "subject": "Hello", "body": "Hi",
        }, headers=seeker[0])
        assert response.status_code == 403


class TestEmailAgent:
    """Tests for the streaming email assistant."""

    def test_stream_is_persisted(self, client, seeker, llm):
        response = client.post("/api/emails/agent", json={"prompt": "Draft a thank you note"}, headers=seeker[0])
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text == "Hello, here is your draft."
        assert llm.stream_messages == [{"role": "user", "content": "Draft a thank you note"}]

        history = client.get("/api/emails/agent/messages", headers=seeker[0]).json()
        assert [(m["role"], m["text"]) for m in history] == [
            ("user", "Draft a thank you note"),
            ("model", "Hello, here is your draft."),
        ]

    def test_history_is_sent_to_the_model(self, client, seeker, llm):
        client.post("/api/emails/agent", json={"prompt": "First"}, headers=seeker[0])
        client.post("/api/emails/agent", json={"prompt": "Second"}, headers=seeker[0])
        assert [m["role"] for m in llm.stream_messages] == ["user", "assistant", "user"]
        assert llm.stream_messages[-1]["content"] == "Second"

    def test_stream_failure(self, client, seeker, llm):
        llm.stream_error = True
        response = client.post("/api/emails/agent", json={"prompt": "Help"}, headers=seeker[0])
        assert response.text.endswith("Sorry, I encountered an error. Please try again.")

        history = client.get("/api/emails/agent/messages", headers=seeker[0]).json()
        assert history[-1]["role"] == "model"
        assert history[-1]["text"] == "Sorry, I encountered an error. Please try again."

    def test_clear(self, client, seeker):
        client.post("/api/emails/agent", json={"prompt": "Hi"}, headers=seeker[0])
        client.delete("/api/emails/agent/messages", headers=seeker[0])
        assert client.get("/api/emails/agent/messages", headers=seeker[0]).json() == []

    def test_conversations_are_private(self, client, seeker):
        client.post("/api/emails/agent", json={"prompt": "Hi"}, headers=seeker[0])
        other, _ = signup(client, "Charlie Brown", "charlie@example.com", "Job Seeker")
        assert client.get("/api/emails/agent/messages", headers=other).json() == []
