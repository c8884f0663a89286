"""
RecruitMatch - resume-to-job match scoring for the recruiting platform.

Scores candidate resumes against job postings, persists one match per
(job, resume) pair and exposes the operations over HTTP and the CLI.
"""

__app_name__ = "RecruitMatch"
__version__ = "0.1.0"
