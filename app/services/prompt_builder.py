"""
Prompt Builder - declared form fields + CV text -> one comparison prompt.

Pure functions, no I/O. The reply schema in the prompt must stay in sync
with ModelReply in app/schemas/schemas.py.
"""

from app.schemas.schemas import DeclaredFields

SYSTEM_PROMPT = (
    "You are a CV validation assistant. Compare form data with CV content "
    "and return structured JSON responses."
)

REPLY_SCHEMA = """{
  "isValid": boolean,
  "matches": {
    "fullName": boolean,
    "email": boolean,
    "phone": boolean,
    "skills": boolean,
    "experience": boolean
  },
  "details": {
    "fullName": "explanation",
    "email": "explanation",
    "phone": "explanation",
    "skills": "explanation",
    "experience": "explanation"
  },
  "overallSummary": "summary of the validation"
}"""


def build_validation_prompt(fields: DeclaredFields, cv_text: str) -> str:
    """
    Build the user prompt.

    The CV text is embedded as-is; long documents are not truncated here.
    """
    return (
        "Please compare the following form data with the CV content and "
        "validate if they match.\n"
        "\n"
        "Form Data:\n"
        f"- Full Name: {fields.full_name}\n"
        f"- Email: {fields.email}\n"
        f"- Phone: {fields.phone}\n"
        f"- Skills: {', '.join(fields.skills)}\n"
        f"- Experience: {fields.experience}\n"
        "\n"
        "CV Content:\n"
        f"{cv_text}\n"
        "\n"
        "Please analyze and return a JSON response with the following structure:\n"
        f"{REPLY_SCHEMA}\n"
        "\n"
        "Return ONLY the JSON object, no explanation and no markdown."
    )
