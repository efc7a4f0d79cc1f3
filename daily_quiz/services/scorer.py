"""
Quiz scoring service
Grades a session, stores attempts and drives the streak
"""
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from daily_quiz.exceptions import NotFoundError
from daily_quiz.repositories import (
    AttemptRepository,
    DailyQuizRepository,
    QuestionPool,
    SessionRepository,
)
from daily_quiz.schemas.quiz import DailyQuizRecord, QuestionRecord
from daily_quiz.schemas.session import AnswerResult, AttemptRecord, QuizResult, QuizSessionRecord
from daily_quiz.services.streak_tracker import StreakTracker
from daily_quiz.utils.dates import utc_now
from daily_quiz.utils.scoring import percentage

logger = logging.getLogger(__name__)


def calculate_score(correct_answers: int, total_questions: int) -> int:
    """Percentage score, rounded half away from zero; 0 for an empty quiz"""
    return percentage(correct_answers, total_questions)


class Scorer:
    """
    Service for completing quiz sessions
    
    Grading is an exact string match against the stored correct answer;
    unanswered questions count as incorrect. Completion happens once: a
    repeated call, or the loser of a concurrent completion, gets the stored
    result back without re-grading or touching the streak. The streak change
    commits together with the completion, so a failed write leaves the
    session in progress for a retry.
    """
    
    def __init__(
        self,
        sessions: SessionRepository,
        quizzes: DailyQuizRepository,
        questions: QuestionPool,
        attempts: AttemptRepository,
        streak_tracker: StreakTracker,
        clock: Callable[[], datetime] = utc_now
    ):
        self.sessions = sessions
        self.quizzes = quizzes
        self.questions = questions
        self.attempts = attempts
        self.streak_tracker = streak_tracker
        self.clock = clock
    
    def complete_quiz_session(self, session_id: str) -> QuizResult:
        """
        Grade and complete a session
        
        Args:
            session_id: Session to complete
            
        Returns:
            QuizResult with score, per-question breakdown and streak flag
            
        Raises:
            NotFoundError: unknown session or quiz
        """
        session = self.sessions.get(session_id)
        if session is None:
            raise NotFoundError("Quiz session not found")
        
        quiz = self._load_quiz(session)
        
        if session.is_completed:
            logger.info(f"Quiz session {session_id} already completed, returning stored result")
            return self._stored_result(session, quiz)
        
        questions = self._questions_by_id(quiz)
        completed_at = self.clock()
        
        breakdown, attempts = self._grade(session, quiz, questions, completed_at)
        
        total_questions = len(quiz.question_ids)
        correct_answers = sum(1 for item in breakdown if item.is_correct)
        score = calculate_score(correct_answers, total_questions)
        # Only a score that rounds to 100 counts as perfect
        perfect = score == 100
        if perfect:
            streak_mutation = self.streak_tracker.perfect_mutation(quiz.date)
        else:
            streak_mutation = self.streak_tracker.imperfect_mutation(quiz.date)
        
        completed = self.sessions.complete(
            session_id,
            session.user_id,
            attempts,
            completed_at,
            total_questions=total_questions,
            correct_answers=correct_answers,
            score=score,
            streak_updated=perfect,
            streak_mutation=streak_mutation
        )
        if not completed:
            logger.warning(f"Quiz session {session_id} was completed concurrently, returning stored result")
            return self._stored_result(self.sessions.get(session_id), quiz)
        
        logger.info(
            f"Quiz session {session_id} completed: {correct_answers}/{total_questions} "
            f"({score}%), streak_updated={perfect}"
        )
        
        return QuizResult(
            session_id=session_id,
            total_questions=total_questions,
            correct_answers=correct_answers,
            score=score,
            answers=breakdown,
            streak_updated=perfect,
            time_spent=(completed_at - session.started_at).total_seconds()
        )
    
    def _load_quiz(self, session: QuizSessionRecord) -> DailyQuizRecord:
        quiz = self.quizzes.get(session.daily_quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")
        return quiz
    
    def _questions_by_id(self, quiz: DailyQuizRecord) -> Dict[str, QuestionRecord]:
        return {q.id: q for q in self.questions.get_many(quiz.question_ids)}
    
    def _grade(
        self,
        session: QuizSessionRecord,
        quiz: DailyQuizRecord,
        questions: Dict[str, QuestionRecord],
        recorded_at: datetime
    ) -> Tuple[List[AnswerResult], List[AttemptRecord]]:
        """Grade every quiz question in quiz order"""
        breakdown = []
        attempts = []
        
        for question_id in quiz.question_ids:
            submitted = session.answers.get(question_id)
            question = questions.get(question_id)
            correct_answer = question.correct_answer if question else None
            
            is_correct = (
                submitted is not None
                and correct_answer is not None
                and submitted == correct_answer
            )
            
            breakdown.append(AnswerResult(
                question_id=question_id,
                submitted_answer=submitted,
                correct_answer=correct_answer,
                is_correct=is_correct
            ))
            attempts.append(AttemptRecord(
                session_id=session.id,
                user_id=session.user_id,
                question_id=question_id,
                submitted_answer=submitted,
                is_correct=is_correct,
                recorded_at=recorded_at
            ))
        
        return breakdown, attempts
    
    def _stored_result(self, session: Optional[QuizSessionRecord], quiz: DailyQuizRecord) -> QuizResult:
        """Rebuild the result of an already completed session from its attempts"""
        if session is None:
            raise NotFoundError("Quiz session not found")
        
        questions = self._questions_by_id(quiz)
        attempts = {a.question_id: a for a in self.attempts.list_for_session(session.id)}
        
        breakdown = []
        for question_id in quiz.question_ids:
            attempt = attempts.get(question_id)
            question = questions.get(question_id)
            breakdown.append(AnswerResult(
                question_id=question_id,
                submitted_answer=attempt.submitted_answer if attempt else session.answers.get(question_id),
                correct_answer=question.correct_answer if question else None,
                is_correct=attempt.is_correct if attempt else False
            ))
        
        total_questions = session.total_questions
        if total_questions is None:
            total_questions = len(quiz.question_ids)
        correct_answers = session.correct_answers
        if correct_answers is None:
            correct_answers = sum(1 for item in breakdown if item.is_correct)
        score = session.score
        if score is None:
            score = calculate_score(correct_answers, total_questions)
        
        completed_at = session.completed_at or session.last_activity_at
        
        return QuizResult(
            session_id=session.id,
            total_questions=total_questions,
            correct_answers=correct_answers,
            score=score,
            answers=breakdown,
            streak_updated=bool(session.streak_updated),
            time_spent=(completed_at - session.started_at).total_seconds()
        )
