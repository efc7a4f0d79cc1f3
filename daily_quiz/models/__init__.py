"""
Database models package
"""
from daily_quiz.models.question import Question
from daily_quiz.models.daily_quiz import DailyQuiz
from daily_quiz.models.quiz_session import QuizSession
from daily_quiz.models.quiz_attempt import QuizAttempt
from daily_quiz.models.streak import Streak

__all__ = ["Question", "DailyQuiz", "QuizSession", "QuizAttempt", "Streak"]
