"""
Generative AI Client

The hosted model is reached through the openai SDK. Gemini exposes an
OpenAI-compatible endpoint, so the same client works for Gemini, OpenAI or any
other compatible provider by changing AI_BASE_URL / AI_MODEL.

Every "intelligent" feature is one prompt that asks for strict JSON:
- resume scoring against a job
- job description parsing
- profile extraction and resume optimization
- job recommendations
- email drafting
- strategic HR command planning
- intro-video transcript evaluation

Callers validate the returned JSON before storing anything.
"""
import json
import logging
from typing import Iterator, List, Optional

from openai import OpenAI, OpenAIError

from smarthire.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

EMAIL_AGENT_INSTRUCTION = (
    "You are a friendly and professional career assistant for a platform called SmartHire. "
    "Your role is to help job seekers draft emails related to their job applications. "
    "This could include follow-up emails, thank you notes, or questions to the hiring manager. "
    "Be encouraging and provide clear, well-written email drafts."
)


class AIServiceError(Exception):
    """Raised when the AI service is unavailable or returns unusable output."""


class LLMClient:
    """
    Wrapper for the chat completions API with one method per prompt.
    """

    def __init__(self, api_key: str = None, base_url: str = None, model: str = None):
        api_key = api_key if api_key is not None else settings.ai_api_key
        if not api_key:
            raise AIServiceError("AI service is not configured (AI_API_KEY is empty)")
        self.client = OpenAI(
            api_key=api_key,
            base_url=base_url or settings.ai_base_url
        )
        self.model = model or settings.ai_model

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 1000) -> str:
        """
        Internal method to call the chat completions API.
        Returns raw text response.
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content}
                ],
                max_tokens=max_tokens,
                temperature=0.2
            )
        except OpenAIError as e:
            logger.error("AI request failed: %s", e)
            raise AIServiceError(f"AI request failed: {e}") from e
        content = response.choices[0].message.content
        if not content:
            raise AIServiceError("AI returned an empty response")
        return content

    def _stream_api(self, system_prompt: str, messages: List[dict]) -> Iterator[str]:
        """Stream text chunks for a multi-turn conversation."""
        try:
            stream = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": system_prompt}] + messages,
                stream=True
            )
            for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        except OpenAIError as e:
            logger.error("AI stream failed: %s", e)
            raise AIServiceError(f"AI stream failed: {e}") from e

    def _extract_json(self, text: str):
        """
        Extract JSON from API response.
        Handles cases where model wraps JSON in markdown code blocks.
        """
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]
        try:
            return json.loads(text.strip())
        except json.JSONDecodeError as e:
            raise AIServiceError("AI returned an unexpected format") from e

    def generate_json(self, system_prompt: str, user_content: str, max_tokens: int = 1000) -> dict:
        """Call the model and decode a JSON object from its reply."""
        data = self._extract_json(self._call_api(system_prompt, user_content, max_tokens))
        if not isinstance(data, dict):
            raise AIServiceError("AI returned an unexpected format")
        return data

    def score_resume(self, job_title: str, requirements: str, resume_text: str) -> dict:
        """Score a resume against a job (0-100) with summary, strengths and weaknesses."""
        system_prompt = """You are an applicant tracking system. Analyze the resume against the job and return ONLY valid JSON.
Output format:
{
  "name": "string",
  "email": "string",
  "score": integer 0-100,
  "summary": "string",
  "strengths": ["string"],
  "weaknesses": ["string"],
  "skills": ["string"],
  "projects": ["string"],
  "publications": ["string"],
  "certifications": ["string"]
}
Return ONLY the JSON, no explanation."""

        user_content = f"Job: {job_title} - {requirements}\nResume: {resume_text}"
        return self.generate_json(system_prompt, user_content, max_tokens=1200)

    def parse_job_description(self, jd_text: str) -> dict:
        """Extract title, short description and requirements from a JD document."""
        system_prompt = """Parse the job description and return ONLY valid JSON.
Output format:
{
  "title": "string",
  "description": "brief description",
  "requirements": "key requirements as one string"
}
Return ONLY the JSON, no explanation."""

        return self.generate_json(system_prompt, jd_text, max_tokens=800)

    def extract_profile(self, resume_text: str) -> dict:
        """Build a professional summary and skill list from a master resume."""
        system_prompt = """Read the resume and return ONLY valid JSON.
Output format:
{
  "summary": "two or three sentence professional summary",
  "skills": ["skill1", "skill2"]
}
Return ONLY the JSON, no explanation."""

        return self.generate_json(system_prompt, resume_text, max_tokens=600)

    def optimize_resume(self, job_title: str, requirements: str, resume_text: str) -> dict:
        system_prompt = """Rewrite the resume to better match the requirements of the job. Also list the key changes you made.
Return ONLY valid JSON:
{
  "optimizedResume": "string",
  "changes": ["string"]
}"""

        user_content = f"Job: {job_title} - {requirements}\nResume: {resume_text}"
        return self.generate_json(system_prompt, user_content, max_tokens=3000)

    def recommend_jobs(self, summary: str, skills: List[str], jobs: List[dict]) -> dict:
        """Recommend up to 5 jobs and score every listed job for the profile."""
        system_prompt = """Based on the user's profile summary and skills, recommend up to 5 jobs from the list and provide a match score (0-100) for all jobs listed.
Return ONLY valid JSON:
{
  "recommendations": [{"jobId": integer, "reason": "string"}],
  "scores": [{"jobId": integer, "matchScore": integer}]
}"""

        user_content = (
            f"Profile: {summary} Skills: {', '.join(skills)}\n"
            f"Jobs: {json.dumps(jobs)}"
        )
        return self.generate_json(system_prompt, user_content, max_tokens=1500)

    def draft_status_email(self, candidate_name: str, job_title: str, status: str) -> dict:
        system_prompt = """Draft a concise, professional email. Return ONLY valid JSON:
{"subject": "string", "body": "string"}"""

        user_content = (
            f"Draft a professional email to a job candidate named {candidate_name} for the "
            f"{job_title} position. The email should inform them that their application status "
            f"has been updated to \"{status}\". Keep it concise and professional."
        )
        return self.generate_json(system_prompt, user_content, max_tokens=800)

    def draft_seeker_follow_up(self, seeker_name: str, job_title: str, company_name: Optional[str],
                               status: Optional[str]) -> dict:
        system_prompt = """Draft a polite follow-up email from a job applicant to the hiring team. Return ONLY valid JSON:
{"subject": "string", "body": "string"}"""

        user_content = (
            f"Applicant: {seeker_name}\nPosition: {job_title}\n"
            f"Company: {company_name or 'the company'}\n"
            f"Current application status: {status or 'not yet applied'}"
        )
        return self.generate_json(system_prompt, user_content, max_tokens=800)

    def plan_hr_action(self, command: str, job_context: List[dict], today: str) -> dict:
        """Translate a recruiter's natural-language command into one action."""
        system_prompt = """You are an advanced Strategic HR Agent for a platform called SmartHire. Your goal is to understand user commands and translate them into specific actions by responding with a JSON object.
- When asked to create a job, use the 'create_job' action. You can base the new job on an existing job from the context. Generate a suitable description and requirements if not fully specified.
- You must calculate dates. If the user says "in 3 weeks", calculate the ISO date string (YYYY-MM-DD) based on the current date provided.
- When asked to update a job, use the 'update_job' action. You MUST specify which job to target using 'targetJobTitle'. Include ONLY the fields that need updating in 'jobDetails'.
- When asked to close a job posting, use the 'close_job' action and specify the 'targetJobTitle'.
- If the user asks a general question, use the 'answer_question' action and provide the answer in the 'answer' field.
- Always explain your plan in the 'thought' field.
Return ONLY valid JSON:
{
  "thought": "string",
  "action": "create_job" | "update_job" | "close_job" | "answer_question",
  "jobDetails": {"targetJobTitle": "string", "title": "string", "description": "string", "requirements": "string",
                 "location": "string", "salary": "string", "workModel": "On-site" | "Remote" | "Hybrid",
                 "applicationDeadline": "YYYY-MM-DD"},
  "answer": "string"
}"""

        context = json.dumps(job_context, indent=2) if job_context else "No existing jobs."
        user_content = (
            f"User Command: \"{command}\"\n\n"
            f"Existing Jobs Context:\n{context}\n\n"
            f"Current Date: {today}\n"
        )
        return self.generate_json(system_prompt, user_content, max_tokens=1500)

    def evaluate_interview(self, job_title: str, requirements: str, transcript: str) -> dict:
        system_prompt = """You evaluate a job candidate's self-introduction video transcript. Return ONLY valid JSON:
{
  "interviewScore": integer 0-100,
  "skillBreakdown": [{"skill": "string", "score": integer 0-100, "rationale": "string"}],
  "communicationAnalysis": {
    "clarity": {"score": integer, "rationale": "string"},
    "confidence": {"score": integer, "rationale": "string"},
    "articulation": {"score": integer, "rationale": "string"},
    "overallFit": {"score": integer, "rationale": "string"}
  },
  "aiEvaluationSummary": "string",
  "recommendation": "string"
}"""

        user_content = f"Job: {job_title} - {requirements}\nTranscript: {transcript}"
        return self.generate_json(system_prompt, user_content, max_tokens=1500)

    def stream_email_agent(self, history: List[dict]) -> Iterator[str]:
        """
        Stream the career assistant's reply.

        history: [{"role": "user" | "model", "text": "..."}], oldest first,
        ending with the new user message.
        """
        messages = [
            {"role": "assistant" if m["role"] == "model" else "user", "content": m["text"]}
            for m in history
        ]
        return self._stream_api(EMAIL_AGENT_INSTRUCTION, messages)

    def test_connection(self) -> bool:
        """Test if the AI endpoint is reachable"""
        try:
            response = self._call_api(
                "You are a test assistant.",
                "Reply with exactly: OK",
                max_tokens=10
            )
            return "OK" in response.upper()
        except AIServiceError as e:
            logger.warning("AI connection failed: %s", e)
            return False


# Singleton instance
_llm_client: LLMClient = None


def get_llm_client() -> LLMClient:
    """Get or create the AI client (singleton pattern)"""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client


def set_llm_client(client: Optional[LLMClient]) -> None:
    """Replace the shared client (None forces re-creation on next use)."""
    global _llm_client
    _llm_client = client
