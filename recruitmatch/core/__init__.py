"""
Core business logic modules for RecruitMatch.

Submodules:
- exceptions: Error taxonomy shared by the service, API and CLI layers
- matching: Resume-job scoring, match persistence flows and auto-matching
"""
