"""
SmartHire
A recruiting platform for HR recruiters and job seekers with AI-assisted screening.

Architecture:
- SQL database: Structured data (users, jobs, candidates, applications, ...)
- MongoDB: Unstructured documents (resumes, JDs, raw AI outputs)
- Generative AI: Scoring, parsing and drafting (not a database!)
"""

__version__ = "1.0.0"
