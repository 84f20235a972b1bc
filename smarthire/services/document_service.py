"""
Document Service - CRUD operations for MongoDB collections.

Collections in this database:
1. raw_resumes             - Resume text as uploaded (per job application or profile)
2. resume_evaluations      - Raw AI scoring output for a candidate
3. parsed_job_descriptions - AI extraction from uploaded JD files
4. interview_evaluations   - Raw AI evaluation of intro-video transcripts

WHY MongoDB for these?
- Model output varies in shape between prompts and model versions
- Documents are self-contained, no joins needed
- The relational store keeps only the validated fields
"""

from datetime import datetime
from bson import ObjectId
from pymongo.collection import Collection

from smarthire.db.mongodb import get_collection, COLLECTIONS


# ============================================================
# RAW RESUMES
# ============================================================

class RawResumeService:
    """Original resume text, before any AI processing."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["raw_resumes"])

    def insert(self, user_id: int, resume_text: str, filename: str = None,
               job_id: int = None, source: str = "application") -> str:
        """
        Insert a raw resume document.

        Args:
            user_id: owning job seeker
            resume_text: extracted text
            filename: original filename
            job_id: job applied to (None for profile uploads)
            source: "application" or "profile"

        Returns:
            MongoDB ObjectId as string (stored on the candidate row)
        """
        doc = {
            "user_id": user_id,
            "job_id": job_id,
            "source": source,
            "resume_text": resume_text,
            "filename": filename,
            "uploaded_at": datetime.utcnow(),
            "is_evaluated": False,
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def mark_as_evaluated(self, mongo_id: str) -> bool:
        result = self.collection.update_one(
            {"_id": ObjectId(mongo_id)},
            {"$set": {"is_evaluated": True, "evaluated_at": datetime.utcnow()}}
        )
        return result.modified_count > 0


# ============================================================
# RESUME EVALUATIONS
# ============================================================

class ResumeEvaluationService:
    """Raw model output from resume scoring, one per candidate."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["resume_evaluations"])

    def insert(self, candidate_id: int, job_id: int, raw_resume_id: str,
               model: str, response: dict) -> str:
        doc = {
            "candidate_id": candidate_id,
            "job_id": job_id,
            "raw_resume_id": raw_resume_id,
            "model": model,
            "response": response,
            "created_at": datetime.utcnow(),
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)


# ============================================================
# PARSED JOB DESCRIPTIONS
# ============================================================

class ParsedJobDescriptionService:
    """AI parses of JD files uploaded by HR users."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["parsed_jds"])

    def insert(self, hr_id: int, filename: str, jd_text: str, parsed_data: dict) -> str:
        doc = {
            "hr_id": hr_id,
            "filename": filename,
            "jd_text": jd_text,
            "parsed_data": parsed_data,
            "parsed_at": datetime.utcnow(),
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)


# ============================================================
# INTERVIEW EVALUATIONS
# ============================================================

class InterviewEvaluationService:
    """Raw model output from intro-video transcript analysis."""

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["interview_evaluations"])

    def insert(self, application_id: int, transcript: str, model: str, response: dict) -> str:
        doc = {
            "application_id": application_id,
            "transcript": transcript,
            "model": model,
            "response": response,
            "created_at": datetime.utcnow(),
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)
