class QuizError(Exception):
    pass


class FetchError(QuizError):
    """Backend query failed; the message is safe to show to the user."""

    def __init__(self, message: str = "Failed to load quiz data") -> None:
        super().__init__(message)
        self.message = message


class DataIntegrityError(QuizError):
    def __init__(self, message: str, *, question_id: object | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.question_id = question_id


class EmptyCategoryError(QuizError):
    pass


class CategoryNotFoundError(QuizError):
    pass


class InvalidOptionError(QuizError):
    pass


class QuizSessionNotFoundError(QuizError):
    pass


class InvalidScreenError(QuizError):
    pass


class QuizSessionLimitError(QuizError):
    pass


class QuizNotReadyError(QuizError):
    pass
