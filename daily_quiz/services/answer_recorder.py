"""
Answer recording service
"""
import logging
from datetime import datetime
from typing import Callable, Optional

from daily_quiz.exceptions import InvalidSessionStateError, NotFoundError, QuizValidationError
from daily_quiz.repositories import DailyQuizRepository, SessionRepository
from daily_quiz.schemas.session import QuizSessionRecord
from daily_quiz.utils.dates import utc_now

logger = logging.getLogger(__name__)


class AnswerRecorder:
    """
    Records answers into in-progress sessions
    
    Answers are overwritable until completion. Two tabs answering the same
    session race last-write-wins on the whole answer map.
    """
    
    def __init__(
        self,
        sessions: SessionRepository,
        quizzes: DailyQuizRepository,
        clock: Callable[[], datetime] = utc_now
    ):
        self.sessions = sessions
        self.quizzes = quizzes
        self.clock = clock
    
    def save_quiz_answer(
        self,
        session_id: str,
        question_id: str,
        answer: str,
        is_correct_hint: Optional[bool] = None
    ) -> QuizSessionRecord:
        """
        Save one answer and advance the session position
        
        Args:
            session_id: Target session
            question_id: Question being answered, must belong to the quiz
            answer: Submitted answer
            is_correct_hint: Client's own grading, logged but never trusted
            
        Returns:
            Updated session
            
        Raises:
            NotFoundError: unknown session
            InvalidSessionStateError: session already completed
            QuizValidationError: empty answer or foreign question
        """
        if not isinstance(answer, str) or not answer.strip():
            raise QuizValidationError("Answer cannot be empty")
        
        session = self.sessions.get(session_id)
        if session is None:
            raise NotFoundError("Quiz session not found")
        
        if session.status != "in_progress":
            raise InvalidSessionStateError("Quiz session is not active")
        
        quiz = self.quizzes.get(session.daily_quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        
        if question_id not in quiz.question_ids:
            raise QuizValidationError(f"Question {question_id} is not part of this quiz")
        
        if is_correct_hint is not None:
            logger.debug(f"Client graded {question_id} in session {session_id} as correct={is_correct_hint}")
        
        answers = dict(session.answers)
        answers[question_id] = answer
        
        # Position follows the number of answered questions and never moves back
        current_index = min(
            max(session.current_index, len(answers)),
            len(quiz.question_ids)
        )
        
        updated = self.sessions.update_progress(
            session_id,
            answers,
            current_index,
            self.clock()
        )
        if updated is None:
            # Completed between our read and write
            raise InvalidSessionStateError("Quiz session is not active")
        
        logger.info(
            f"Answer saved: session {session_id}, question {question_id}, "
            f"index {updated.current_index}/{len(quiz.question_ids)}"
        )
        return updated
