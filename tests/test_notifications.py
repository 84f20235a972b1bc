"""
Tests for notifications, the calendar and the app-level endpoints.
"""

from datetime import date, datetime, timedelta

from smarthire.services.calendar_service import interview_slot


class TestNotifications:
    """Tests for the notifications panel."""

    def test_seeker_upcoming_deadlines(self, client, seeker, create_job):
        soon = create_job(title="Soon", application_deadline=(datetime.utcnow() + timedelta(days=3)).isoformat())
        later = create_job(title="Later", application_deadline=(datetime.utcnow() + timedelta(days=10)).isoformat())
        create_job(title="Not saved", application_deadline=(datetime.utcnow() + timedelta(days=2)).isoformat())
        for job in (soon, later):
            client.post(f"/api/profile/saved-jobs/{job['job_id']}", headers=seeker[0])

        data = client.get("/api/notifications", headers=seeker[0]).json()
        assert [d["title"] for d in data["upcoming_deadlines"]] == ["Soon"]
        assert data["upcoming_deadlines"][0]["days_left"] == 3
        assert data["jobs_needing_processing"] == []

    def test_hr_jobs_needing_processing(self, client, hr, create_job):
        past = create_job(application_deadline=(datetime.utcnow() - timedelta(hours=2)).isoformat())
        data = client.get("/api/notifications", headers=hr[0]).json()
        assert [j["job_id"] for j in data["jobs_needing_processing"]] == [past["job_id"]]
        assert data["upcoming_deadlines"] == []


class TestInterviewSlot:
    """Tests for the derived interview slot."""

    def test_slot(self):
        assert interview_slot(1, 2031, 3) == (date(2031, 3, 2), "11:00 AM")
        assert interview_slot(27, 2031, 2) == (date(2031, 2, 28), "13:00 AM")
        assert interview_slot(28, 2031, 2) == (date(2031, 2, 1), "10:00 AM")


class TestCalendar:
    """Tests for the month view."""

    def _interviewing(self, client, hr, seeker, apply, job):
        app = apply(seeker[0], job["job_id"]).json()
        client.patch(
            f"/api/applications/{app['application_id']}/status", json={"status": "Interviewing"}, headers=hr[0],
        )
        return app

    def test_hr_events(self, client, hr, seeker, create_job, apply):
        job = create_job(title="Platform Engineer", application_deadline="2031-03-10T12:00:00")
        create_job(title="Other Month", application_deadline="2031-04-10T12:00:00")
        app = self._interviewing(client, hr, seeker, apply, job)

        data = client.get("/api/calendar", params={"year": 2031, "month": 3}, headers=hr[0]).json()
        assert (data["year"], data["month"]) == (2031, 3)

        deadlines = [e for e in data["events"] if e["type"] == "deadline"]
        assert deadlines == [{
            "date": "2031-03-10", "type": "deadline", "title": "Deadline",
            "job_title": "Platform Engineer", "time": None,
        }]

        day, time = interview_slot(app["candidate_id"], 2031, 3)
        interviews = [e for e in data["events"] if e["type"] == "interview"]
        assert interviews == [{
            "date": day.isoformat(), "type": "interview", "title": "Interview",
            "job_title": "Bob Smith (Platform Engineer)", "time": time,
        }]

    def test_seeker_events(self, client, hr, seeker, create_job, apply):
        job = create_job(title="Platform Engineer", application_deadline="2031-03-10T12:00:00")
        client.post(f"/api/profile/saved-jobs/{job['job_id']}", headers=seeker[0])
        self._interviewing(client, hr, seeker, apply, job)

        events = client.get("/api/calendar", params={"year": 2031, "month": 3}, headers=seeker[0]).json()["events"]
        titles = {e["title"] for e in events}
        assert titles == {"Deadline: Platform Engineer", "Interview: Platform Engineer"}

        today = datetime.utcnow()
        current = client.get("/api/calendar", headers=seeker[0]).json()
        applied = [e for e in current["events"] if e["type"] == "applied"]
        assert applied[0]["title"] == "Applied: Platform Engineer"
        assert applied[0]["date"] == today.date().isoformat()

    def test_past_deadlines_hidden_for_seekers(self, client, seeker, create_job):
        yesterday = datetime.utcnow() - timedelta(days=1)
        job = create_job(application_deadline=yesterday.isoformat())
        client.post(f"/api/profile/saved-jobs/{job['job_id']}", headers=seeker[0])

        data = client.get(
            "/api/calendar", params={"year": yesterday.year, "month": yesterday.month}, headers=seeker[0],
        ).json()
        assert [e for e in data["events"] if e["type"] == "deadline"] == []

    def test_invalid_month(self, client, hr):
        assert client.get("/api/calendar", params={"month": 13}, headers=hr[0]).status_code == 422


class TestAppEndpoints:
    """Tests for the frontend config and health endpoints."""

    def test_config_js_has_no_secrets(self, client):
        response = client.get("/config.js")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/javascript")
        assert response.text.startswith("window.SMARTHIRE_CONFIG = ")
        assert '"API_BASE": "/api"' in response.text
        assert "test-key" not in response.text

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"
