"""
Tests for the job seeker profile, resume tools, recommendations and saved jobs.
"""


class TestProfile:
    """Tests for reading and editing the profile."""

    def test_no_profile_yet(self, client, seeker):
        response = client.get("/api/profile", headers=seeker[0])
        assert response.status_code == 404
        assert response.json()["detail"] == "Profile not found"

    def test_put_creates_then_merges(self, client, seeker):
        response = client.put(
            "/api/profile", json={"summary": "  Backend developer.  ", "skills": ["Python", " ", "Go"]},
            headers=seeker[0],
        )
        assert response.status_code == 200
        assert response.json()["summary"] == "Backend developer."
        assert response.json()["skills"] == ["Python", "Go"]
        assert response.json()["resume_text"] == ""

        client.put("/api/profile", json={"resume_text": "My resume"}, headers=seeker[0])
        profile = client.get("/api/profile", headers=seeker[0]).json()
        assert profile["summary"] == "Backend developer."
        assert profile["resume_text"] == "My resume"

    def test_empty_summary_rejected(self, client, seeker):
        response = client.put("/api/profile", json={"summary": "   "}, headers=seeker[0])
        assert response.status_code == 400

    def test_empty_skills_rejected(self, client, seeker):
        response = client.put("/api/profile", json={"skills": ["", "  "]}, headers=seeker[0])
        assert response.status_code == 400

    def test_nothing_to_update(self, client, seeker):
        response = client.put("/api/profile", json={}, headers=seeker[0])
        assert response.status_code == 400

    def test_hr_has_no_profile(self, client, hr):
        assert client.get("/api/profile", headers=hr[0]).status_code == 403


class TestMasterResume:
    """Tests for building the profile from an uploaded resume."""

    def test_upload(self, client, seeker, llm, mongo):
        llm.reply({"summary": "Seasoned engineer.", "skills": ["Python", "", "AWS"]})
        response = client.post(
            "/api/profile/resume",
            files={"file": ("cv.md", b"# Bob\nPython and AWS.", "text/markdown")},
            headers=seeker[0],
        )
        assert response.status_code == 200, response.text
        profile = response.json()
        assert profile["summary"] == "Seasoned engineer."
        assert profile["skills"] == ["Python", "AWS"]
        assert profile["resume_text"] == "# Bob\nPython and AWS."

        raw = mongo["smarthire_docs"]["raw_resumes"].find_one({"user_id": seeker[1]})
        assert raw["source"] == "profile"

    def test_formats(self, client):
        data = client.get("/api/profile/resume/formats").json()
        assert {f["extension"] for f in data["document_formats"]} == {".pdf", ".docx", ".txt", ".md"}
        assert data["video_formats"] == [".mov", ".mp4", ".webm"]


class TestOptimizeResume:
    """Tests for tailoring the master resume to a job."""

    def test_without_profile(self, client, seeker, create_job):
        job = create_job()
        response = client.post(f"/api/profile/optimize/{job['job_id']}", headers=seeker[0])
        assert response.status_code == 404
        assert response.json()["detail"] == "Job or user profile not found"

    def test_optimize(self, client, seeker, create_job, llm):
        job = create_job()
        client.put("/api/profile", json={"resume_text": "Python dev"}, headers=seeker[0])
        llm.reply({"optimizedResume": "Python and SQL dev", "changes": ["Added SQL"]})

        response = client.post(f"/api/profile/optimize/{job['job_id']}", headers=seeker[0])
        assert response.status_code == 200
        assert response.json() == {"optimized_resume": "Python and SQL dev", "changes": ["Added SQL"]}

    def test_empty_reply(self, client, seeker, create_job, llm):
        job = create_job()
        client.put("/api/profile", json={"resume_text": "Python dev"}, headers=seeker[0])
        llm.reply({"optimizedResume": "", "changes": []})
        response = client.post(f"/api/profile/optimize/{job['job_id']}", headers=seeker[0])
        assert response.status_code == 502


class TestRecommendations:
    """Tests for AI job recommendations."""

    def test_no_profile_means_no_ai_call(self, client, seeker, create_job, llm):
        create_job()
        response = client.get("/api/profile/recommendations", headers=seeker[0])
        assert response.json() == {"recommendations": [], "scores": []}
        assert llm.calls == []

    def test_unknown_and_applied_jobs_are_dropped(self, client, seeker, create_job, apply, llm):
        applied = create_job(title="Applied")
        fresh = create_job(title="Fresh")
        apply(seeker[0], applied["job_id"])
        client.put("/api/profile", json={"summary": "Dev", "skills": ["Python"]}, headers=seeker[0])

        llm.reply({
            "recommendations": [
                {"jobId": fresh["job_id"], "reason": "Good match"},
                {"jobId": applied["job_id"], "reason": "Already applied"},
                {"jobId": 9999, "reason": "Invented"},
            ],
            "scores": [{"jobId": str(fresh["job_id"]), "matchScore": 130}],
        })
        data = client.get("/api/profile/recommendations", headers=seeker[0]).json()
        assert data["recommendations"] == [{"job_id": fresh["job_id"], "reason": "Good match"}]
        assert data["scores"] == [{"job_id": fresh["job_id"], "match_score": 100}]
        assert '"Applied"' not in llm.calls[-1]["user"]


class TestSavedJobs:
    """Tests for saving jobs."""

    def test_save_list_unsave(self, client, seeker, create_job):
        first = create_job(title="First")
        second = create_job(title="Second")
        for job in (first, second, first):
            assert client.post(f"/api/profile/saved-jobs/{job['job_id']}", headers=seeker[0]).status_code == 201

        saved = client.get("/api/profile/saved-jobs", headers=seeker[0]).json()
        assert sorted(j["job_id"] for j in saved) == sorted([first["job_id"], second["job_id"]])

        client.delete(f"/api/profile/saved-jobs/{first['job_id']}", headers=seeker[0])
        saved = client.get("/api/profile/saved-jobs", headers=seeker[0]).json()
        assert [j["title"] for j in saved] == ["Second"]

    def test_save_missing_job(self, client, seeker):
        assert client.post("/api/profile/saved-jobs/123", headers=seeker[0]).status_code == 404


class TestJobAlertSettings:
    """Tests for alert keyword storage."""

    def test_defaults_to_empty(self, client, seeker):
        data = client.get("/api/profile/job-alerts", headers=seeker[0]).json()
        assert data == {"user_id": seeker[1], "keywords": []}

    def test_keywords_are_trimmed(self, client, seeker):
        client.put("/api/profile/job-alerts", json={"keywords": [" react ", "", "  "]}, headers=seeker[0])
        client.put("/api/profile/job-alerts", json={"keywords": ["vue", " rust"]}, headers=seeker[0])
        data = client.get("/api/profile/job-alerts", headers=seeker[0]).json()
        assert data["keywords"] == ["vue", "rust"]
