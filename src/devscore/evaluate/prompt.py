"""Prompt text for LLM-backed evaluators."""

from __future__ import annotations

import json

from devscore.analyze.metrics import StaticMetrics

INTERVIEW_INSTRUCTIONS = """INTERVIEW MODE ENABLED:
- Provide tougher, more critical evaluation
- Include 3-5 challenging follow-up questions
- Ask about optimization opportunities
- Challenge edge cases
- Include behavioral questions about coding approach"""

PRACTICE_INSTRUCTIONS = """- Provide balanced, constructive feedback
- Focus on learning and improvement
- Include 2-3 relevant follow-up questions"""

SCORING_GUIDELINES = """SCORING GUIDELINES:
- Code Quality (0-100): Overall structure, design patterns, best practices
- Time Complexity (0-100): Algorithm efficiency, unnecessary operations
- Space Complexity (0-100): Memory usage, data structure choices
- Security (0-100): Vulnerabilities, input validation, secure practices
- Readability (0-100): Naming, comments, code organization"""


def _response_shape(interview_mode: bool) -> str:
    questions = "3-5" if interview_mode else "2-3"
    return f"""{{
  "scores": {{
    "codeQuality": <number 0-100>,
    "timeComplexity": <number 0-100>,
    "spaceComplexity": <number 0-100>,
    "security": <number 0-100>,
    "readability": <number 0-100>
  }},
  "feedback": {{
    "strengths": [<array of 2-4 strength points>],
    "weaknesses": [<array of 2-4 weakness points>],
    "suggestions": [<array of 3-5 actionable improvements>],
    "interviewQuestions": [<array of {questions} follow-up questions>],
    "detailedAnalysis": "<2-3 paragraphs: algorithm choice, structure, bugs, performance, security>"
  }}
}}"""


def build_evaluation_prompt(
    code: str,
    language: str,
    interview_mode: bool,
    metrics: StaticMetrics,
) -> str:
    mode = INTERVIEW_INSTRUCTIONS if interview_mode else PRACTICE_INSTRUCTIONS
    static_json = json.dumps(metrics.to_dict(), indent=2)
    sections = [
        f"You are an expert code reviewer and technical interviewer. Evaluate the following {language} code.",
        mode,
        f"CODE TO EVALUATE:\n```{language}\n{code}\n```",
        f"STATIC ANALYSIS RESULTS:\n{static_json}",
        "Provide a comprehensive evaluation in VALID JSON format with this exact structure:",
        _response_shape(interview_mode),
        SCORING_GUIDELINES,
        "Return ONLY valid JSON, no markdown code blocks or additional text.",
    ]
    return "\n\n".join(sections)
