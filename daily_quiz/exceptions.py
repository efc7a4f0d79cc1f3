"""
Typed errors raised by the quiz engine

Each error carries the HTTP status the API layer maps it to.
"""


class QuizEngineError(Exception):
    """Base class for all engine failures"""
    
    status_code = 500
    error_code = "quiz_engine_error"
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(QuizEngineError):
    """Referenced session or quiz does not exist"""
    
    status_code = 404
    error_code = "not_found"


class QuizValidationError(QuizEngineError):
    """Malformed input: bad date, unknown timezone, foreign question id"""
    
    status_code = 400
    error_code = "validation_error"


class InsufficientQuestionsError(QuizEngineError):
    """A difficulty tier has fewer approved questions than the quiz needs"""
    
    status_code = 422
    error_code = "insufficient_questions"
    
    def __init__(self, difficulty: str, required: int, available: int):
        super().__init__(
            f"Insufficient approved {difficulty} questions for balanced quiz: "
            f"need {required}, have {available}"
        )
        self.difficulty = difficulty
        self.required = required
        self.available = available


class InvalidSessionStateError(QuizEngineError):
    """Mutation attempted on a session that is no longer in progress"""
    
    status_code = 409
    error_code = "invalid_session_state"


class SessionExpiredError(QuizEngineError):
    """Session is past its timeout and can no longer accept answers"""
    
    status_code = 410
    error_code = "session_expired"


class PersistenceError(QuizEngineError):
    """The store rejected a read or write"""
    
    status_code = 500
    error_code = "persistence_error"
