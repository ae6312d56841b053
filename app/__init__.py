"""
CV Validator
Checks a submitted form against the uploaded PDF resume using a
generative-AI model.

Architecture:
- PostgreSQL: Submissions, extracted CV text and validation results
- OpenAI-compatible LLM: Form-vs-CV comparison only (advisory, never a gate)
"""

__version__ = "1.0.0"
