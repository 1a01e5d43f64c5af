"""Prompt pair for roadmap generation."""

from skillpath.schemas.roadmap import GenerationRequest

SYSTEM_PROMPT = """You are an expert career and learning advisor. Generate a structured, \
day-by-day skill learning roadmap based on the learner's profile.

The roadmap MUST be returned as a single JSON object with exactly this structure:
{
  "phases": [
    {
      "name": "Foundation",
      "duration_days": 14,
      "description": "What this phase achieves",
      "skills": [
        {
          "name": "Skill Name",
          "description": "1-2 sentences on why this skill matters for the goal",
          "days": "Day 1-3",
          "resources": [
            "https://developer.mozilla.org/...",
            "YouTube: <video title to search for>"
          ],
          "quiz": [
            {
              "question": "Question text",
              "options": ["A", "B", "C", "D"],
              "correctAnswer": 0
            }
          ]
        }
      ]
    }
  ]
}

Rules:
- 3 to 5 phases ordered from foundational to advanced, each with 3-5 skills
- Skills are listed in the order they must be learned
- Phase names are unique, skill names are unique within their phase
- "days" is a contiguous "Day X-Y" range; ranges never overlap and add up to the total duration
- Every skill has 2-4 resources: official documentation URLs or "YouTube: <title>" labels
- Every skill has exactly 3 quiz questions with exactly 4 options each
- "correctAnswer" is the 0-based index of the correct option
- Time estimates must be realistic for the learner's available hours
- Skip what the learner already knows
- Return JSON only, no markdown and no commentary"""


def build_user_prompt(request: GenerationRequest) -> str:
    """Summarize the learner's profile for the user turn."""
    existing = ", ".join(request.existing_skills) if request.existing_skills else "None specified"

    lines = [
        "Create a personalized learning roadmap for:",
        "",
        f"Target Role/Skill: {request.target_skill}",
        f"Current Education: {request.education_level or 'Not specified'}",
        f"Existing Skills: {existing}",
        f"Weekly Learning Time: {request.weekly_hours:g} hours",
    ]

    context = request.context
    if context:
        if context.level:
            lines.append(f"Self-assessed Level: {context.level}")
        if context.background:
            lines.append(f"Background: {context.background}")
        if context.goal:
            lines.append(f"Goal: {context.goal}")
        if context.daily_time:
            lines.append(f"Daily Learning Time: {context.daily_time} hours")
        if context.target_duration:
            lines.append(f"Target Duration: {context.target_duration} days")

    lines.append("")
    if context and context.target_duration:
        lines.append(
            f"The day ranges across all phases must cover exactly {context.target_duration} days."
        )
    lines.append(
        "Order skills from foundational to advanced and keep time estimates realistic for "
        f"{request.weekly_hours:g} hours per week of study."
    )
    return "\n".join(lines)


def build_messages(request: GenerationRequest) -> tuple[str, str]:
    return SYSTEM_PROMPT, build_user_prompt(request)
