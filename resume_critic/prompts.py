"""Instruction template for resume critique requests."""

ANALYSIS_SCHEMA = """{
  "score": number (0-100),
  "overview": string,
  "strengths": string[],
  "skills": { "languages": string[], "frameworks": string[], "databases": string[], "other": string[] },
  "missing": [{ "name": string, "importance": string }],
  "improvements": [{ "recommendation": string, "reason": string, "action": string }],
  "roleAlignment": { "matchLevel": string, "gaps": string[], "suggestions": string[] },
  "actionPlan": string[]
}"""

OCR_INSTRUCTION = "Perform OCR to extract all visible text before analyzing."


def build_analysis_prompt(role: str, is_image: bool) -> str:
    """Render the critique instructions for one submission."""
    document_kind = "an image" if is_image else "a PDF document"
    ocr_line = OCR_INSTRUCTION if is_image else ""

    return f"""Act as a strict, senior-level technical recruiter and academic resume evaluator.
Analyze this resume (provided as {document_kind}) specifically for the role of "{role}".
{ocr_line}
Produce a structured critique following these exact sections:

1. OVERVIEW: 3-4 sentences summarizing the candidate's profile, years of experience, and primary domain.
2. STRENGTHS: Specific bullet points referencing skills, experience, or achievements.
3. SKILLS: Categorized into Languages, Frameworks, Databases, and Other.
4. MISSING: Explicitly list missing or weak sections (e.g., Projects, Metrics) and explain why they matter.
5. IMPROVEMENTS: Actionable advice. For each point, specify WHAT to improve, WHY it matters, and HOW to do it.
6. ALIGNMENT: Analyze fit for "{role}". State match level (Low/Medium/High), gaps, and suggestions.
7. PLAN: A prioritized list of 3-5 next steps.

Return JSON matching this schema:
{ANALYSIS_SCHEMA}
"""
