"""Domain errors.

Every error carries the HTTP status it maps to and a message that is safe
to show to the learner. The API layer renders them as ``{"error": message}``.
"""


class SkillPathError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    message: str = "Something went wrong"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


# ============================================================================
# Roadmap generation
# ============================================================================


class GenerationError(SkillPathError):
    """Roadmap generation did not produce a stored roadmap."""

    message = "Failed to generate roadmap"


class GenerationParseError(GenerationError):
    message = "Invalid roadmap format. Please try again."


class GenerationSchemaError(GenerationError):
    message = "Invalid roadmap structure. Please try again."


class GenerationFailed(GenerationError):
    message = "Failed to generate roadmap"


class RateLimited(GenerationError):
    status_code = 429
    message = "Rate limit exceeded. Please try again later."


class QuotaExhausted(GenerationError):
    status_code = 402
    message = "AI credits exhausted. Please add more credits."


class GenerationInProgress(GenerationError):
    status_code = 409
    message = "A roadmap is already being generated"


# ============================================================================
# Progress and quizzes
# ============================================================================


class RoadmapNotFound(SkillPathError):
    status_code = 404
    message = "Roadmap not found"


class SkillNotFound(SkillPathError):
    status_code = 404
    message = "Skill not found"


class SkillLocked(SkillPathError):
    status_code = 409
    message = "This skill is locked"


class QuizRequired(SkillPathError):
    status_code = 409
    message = "Pass the quiz to complete this skill"


class QuizUnavailable(SkillPathError):
    status_code = 409
    message = "This skill has no quiz"


class IncompleteSubmission(SkillPathError):
    status_code = 422
    message = "Please answer all questions"


class PersistenceFailure(SkillPathError):
    message = "Failed to save progress"
