"""Exceptions raised by the quiz runner."""


class QuizRunnerError(Exception):
    """Base class for quiz runner errors."""


class EmptyQuestionSetError(QuizRunnerError):
    """Raised when a session is started without questions."""

    def __init__(self, message: str = "No questions available") -> None:
        super().__init__(message)


class SessionNotRunningError(QuizRunnerError):
    """Raised when a user action arrives outside the running state."""


class ConfirmationRequired(QuizRunnerError):
    """Raised when a manual submission is not confirmed."""


class UnknownQuestionError(QuizRunnerError, KeyError):
    """Raised when a question id is not part of the loaded set."""

    def __str__(self) -> str:
        return f"Unknown question: {self.args[0]}" if self.args else "Unknown question"


class InvalidOptionError(QuizRunnerError, ValueError):
    """Raised when an option index is outside a question's options."""


class AuthenticationRequired(QuizRunnerError):
    """Raised when a submission has no authenticated identity."""


class SubmissionError(QuizRunnerError):
    """Raised when the attempt store rejects a submission."""
