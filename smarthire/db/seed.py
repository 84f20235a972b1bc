"""
Demo data for a fresh database.

Accounts (password "password"):
- alice@example.com   HR
- bob@example.com     Job Seeker (two applications, a profile)
- charlie@example.com Job Seeker (asked two questions)

Nothing is inserted when the users table already has rows.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy import func, insert, select

from smarthire.core.auth import hash_password
from smarthire.db.database import get_db_session
from smarthire.db.tables import applications, candidates, jobs, questions, user_profiles, users
from smarthire.utils.logo import generate_company_logo

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"


def seed_demo_data() -> bool:
    """Insert the demo records. Returns False when the database is not empty."""
    now = datetime.utcnow()

    def days(n):
        return timedelta(days=n)

    with get_db_session() as db:
        if db.execute(select(func.count()).select_from(users)).scalar():
            return False

        password_hash = hash_password(DEMO_PASSWORD)

        def add_user(name, email, role):
            result = db.execute(insert(users).values(
                name=name, email=email, password_hash=password_hash,
                role=role, status="active", created_at=now - days(30),
            ))
            return result.inserted_primary_key[0]

        alice = add_user("Alice HR", "alice@example.com", "HR")
        bob = add_user("Bob Smith", "bob@example.com", "Job Seeker")
        charlie = add_user("Charlie Brown", "charlie@example.com", "Job Seeker")

        def add_job(**values):
            created = now - values.pop("age")
            values.setdefault("company_name", "SmartHire Demo Inc")
            result = db.execute(insert(jobs).values(
                hr_id=alice,
                created_at=created,
                updated_at=created,
                company_logo=generate_company_logo(values["company_name"]),
                **values,
            ))
            return result.inserted_primary_key[0]

        frontend = add_job(
            title="Frontend Developer",
            description="Join our team to build amazing user interfaces.",
            requirements="React, TypeScript, CSS",
            location="San Francisco, CA",
            salary="$100,000 - $140,000",
            status="Open",
            age=days(3),
            application_deadline=now + days(10),
            work_model="Hybrid",
            min_ats_score=75,
            number_of_positions=2,
            processing_status="Pending",
            is_video_intro_required=True,
        )
        backend = add_job(
            title="Backend Engineer",
            description="Work on our core infrastructure and services.",
            requirements="Node.js, Python, AWS",
            location="New York, NY",
            salary="$120,000 - $160,000",
            status="Open",
            age=days(10),
            application_deadline=now - days(2),
            work_model="Remote",
            min_ats_score=80,
            number_of_positions=1,
            processing_status="Pending",
            is_video_intro_required=True,
        )
        add_job(
            title="UX Designer",
            description="Design intuitive and beautiful user experiences.",
            requirements="Figma, Sketch, User Research",
            location="Remote",
            salary="$90,000 - $130,000",
            status="Closed",
            age=days(30),
            application_deadline=now - days(15),
            work_model="Remote",
            min_ats_score=70,
            number_of_positions=1,
            processing_status="Pending",
            is_video_intro_required=False,
        )

        cand_frontend = db.execute(insert(candidates).values(
            job_id=frontend, user_id=bob, name="Bob Smith", email="bob@example.com",
            score=85,
            summary="Strong frontend developer with extensive React experience.",
            strengths=["React", "TypeScript", "Redux"],
            weaknesses=["Limited backend knowledge"],
            resume_text="Here is the resume text for Bob Smith...",
            applied_at=now - days(2),
            skills=["React", "TypeScript", "JavaScript", "HTML5", "CSS3", "Redux", "Webpack"],
            projects=[
                "Developed a real-time chat application using Socket.IO and React.",
                "Built a responsive e-commerce dashboard with data visualization.",
            ],
            publications=[],
            certifications=["Certified React Developer"],
        )).inserted_primary_key[0]
        cand_backend = db.execute(insert(candidates).values(
            job_id=backend, user_id=bob, name="Bob Smith", email="bob@example.com",
            score=78,
            summary="Some backend experience, primarily with Express.js.",
            strengths=["Node.js", "Express"],
            weaknesses=["No Python or AWS experience"],
            resume_text="Here is the resume text for Bob Smith...",
            applied_at=now - days(5),
            skills=["Node.js", "Express", "MongoDB", "REST APIs"],
            projects=["Created a RESTful API for a mobile banking application."],
            publications=[],
            certifications=[],
        )).inserted_primary_key[0]

        db.execute(insert(applications).values(
            job_id=frontend, user_id=bob, candidate_id=cand_frontend, status="Under Review",
            created_at=now - days(2), updated_at=now - days(2),
        ))
        db.execute(insert(applications).values(
            job_id=backend, user_id=bob, candidate_id=cand_backend, status="Interviewing",
            interview_score=84,
            ai_evaluation_summary=(
                "The candidate shows good foundational knowledge and communicates effectively. "
                "Their communication style is professional and well-suited for a collaborative "
                "engineering role."
            ),
            recommendation="Qualified for Next Round",
            skill_breakdown=[
                {"skill": "Node.js", "score": 85,
                 "rationale": "Demonstrated solid understanding of asynchronous programming."},
                {"skill": "System Design", "score": 70,
                 "rationale": "Provided a reasonable but basic approach to system architecture."},
            ],
            communication_analysis={
                "clarity": {"score": 88, "rationale": "Candidate uses clear and direct language to explain complex topics."},
                "confidence": {"score": 78, "rationale": "Speaks decisively, though occasionally uses filler words when thinking."},
                "articulation": {"score": 85, "rationale": "Well-structured responses that logically answer the questions."},
                "overall_fit": {"score": 83, "rationale": "Communication style is professional and suitable for a collaborative engineering role."},
            },
            created_at=now - days(5), updated_at=now - days(5),
        ))

        db.execute(insert(user_profiles).values(
            user_id=bob,
            summary="A skilled job seeker looking for new opportunities in tech.",
            skills=["JavaScript", "React", "HTML", "CSS"],
            resume_text="This is the master resume text for Bob Smith.",
            updated_at=now,
        ))

        db.execute(insert(questions).values(
            job_id=frontend, user_id=charlie, user_name="Charlie Brown",
            question_text="What is the team size for this role?",
            created_at=now - days(1),
            answer_hr_id=alice, answer_hr_name="Alice HR",
            answer_text="You would be joining a team of 5 frontend developers.",
            answered_at=now,
        ))
        db.execute(insert(questions).values(
            job_id=frontend, user_id=charlie, user_name="Charlie Brown",
            question_text="Is there an on-call rotation?",
            created_at=now - days(2),
        ))

    logger.info("Demo data seeded (alice/bob/charlie @example.com, password '%s')", DEMO_PASSWORD)
    return True
