from __future__ import annotations


class QuestionGenerationError(Exception):
    """Base class for everything the question generator can raise."""


class InvalidDifficulty(QuestionGenerationError, ValueError):
    """Difficulty is not one of easy / normal / hard / genius. Do not retry."""


class GenerationFailed(QuestionGenerationError, RuntimeError):
    """
    Options could not be synthesized within the attempt budget, or the
    assembled question failed its self-check. Depends on the random draws,
    so a fresh attempt may succeed.
    """


class InvalidQuizRequest(ValueError):
    """Option count or quiz length outside the supported sets."""
