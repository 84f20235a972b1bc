"""
Shared fixtures.

The app runs against an in-memory SQLite database, mongomock and a scripted
AI client, so no external service is needed.
"""

import json
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["MASTER_AGENT_ENABLED"] = "false"
os.environ["AI_API_KEY"] = "test-key"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="smarthire-uploads-")

import mongomock
import pytest
from fastapi.testclient import TestClient

from smarthire.db.database import engine
from smarthire.db.mongodb import reset_mongo
from smarthire.db.tables import metadata
from smarthire.main import app
from smarthire.services import agents
from smarthire.services.llm_client import AIServiceError, LLMClient, set_llm_client


class FakeLLM(LLMClient):
    """LLMClient whose API calls return scripted replies in order."""

    def __init__(self):
        self.model = "fake-model"
        self.replies = []
        self.calls = []
        self.stream_chunks = ["Hello", ", here is your draft."]
        self.stream_error = False
        self.stream_messages = None

    def reply(self, *replies):
        """Queue replies: dicts are sent as JSON, strings verbatim, exceptions raised."""
        self.replies.extend(replies)
        return self

    def _call_api(self, system_prompt, user_content, max_tokens=1000):
        self.calls.append({"system": system_prompt, "user": user_content})
        if not self.replies:
            raise AIServiceError("No scripted reply")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply if isinstance(reply, str) else json.dumps(reply)

    def _stream_api(self, system_prompt, messages):
        self.stream_messages = messages
        for chunk in self.stream_chunks:
            yield chunk
        if self.stream_error:
            raise AIServiceError("stream broke")


@pytest.fixture(autouse=True)
def fresh_database():
    metadata.drop_all(engine)
    metadata.create_all(engine)
    yield


@pytest.fixture(autouse=True)
def mongo():
    client = mongomock.MongoClient()
    reset_mongo(client)
    yield client
    reset_mongo()


@pytest.fixture(autouse=True)
def llm():
    fake = FakeLLM()
    set_llm_client(fake)
    yield fake
    set_llm_client(None)


@pytest.fixture(autouse=True)
def clear_stop_requests():
    agents._stop_requests.clear()
    agents._active_runs.clear()
    yield


@pytest.fixture
def client():
    return TestClient(app)


def signup(client, name, email, role):
    response = client.post("/api/auth/signup", json={
        "name": name, "email": email, "password": "password123", "role": role,
    })
    assert response.status_code == 201, response.text
    data = response.json()
    return {"Authorization": f"Bearer {data['access_token']}"}, data["user_id"]


@pytest.fixture
def hr(client):
    """(headers, user_id) of an HR user."""
    return signup(client, "Alice HR", "alice@example.com", "HR")


@pytest.fixture
def other_hr(client):
    return signup(client, "Olga HR", "olga@example.com", "HR")


@pytest.fixture
def seeker(client):
    """(headers, user_id) of a job seeker."""
    return signup(client, "Bob Smith", "bob@example.com", "Job Seeker")


@pytest.fixture
def create_job(client, hr):
    def _create(headers=None, **fields):
        payload = {"title": "Backend Engineer", "requirements": "Python, SQL", **fields}
        response = client.post("/api/jobs", json=payload, headers=headers or hr[0])
        assert response.status_code == 201, response.text
        return response.json()
    return _create


def score_reply(score=80, **extra):
    reply = {
        "name": "Parsed Name",
        "email": "parsed@example.com",
        "score": score,
        "summary": "Solid candidate.",
        "strengths": ["Python"],
        "weaknesses": ["Kubernetes"],
        "skills": ["Python", "SQL"],
        "projects": [],
        "publications": [],
        "certifications": [],
    }
    reply.update(extra)
    return reply


@pytest.fixture
def apply(client, llm):
    """Apply to a job as the given seeker with a scripted score."""
    def _apply(headers, job_id, score=80, filename="resume.txt"):
        llm.reply(score_reply(score))
        response = client.post(
            f"/api/jobs/{job_id}/apply",
            files={"file": (filename, b"Experienced Python developer.", "text/plain")},
            headers=headers,
        )
        return response
    return _apply
