"""
Daily quiz composition service
Builds or retrieves the single question set for a calendar day
"""
import logging
import random
from collections import Counter
from datetime import date, datetime
from typing import Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from daily_quiz.config import settings
from daily_quiz.exceptions import InsufficientQuestionsError
from daily_quiz.repositories import DailyQuizRepository, QuestionPool
from daily_quiz.schemas.quiz import DailyQuizRecord, DailyQuizResponse, QuestionRecord
from daily_quiz.utils.cache import CacheService
from daily_quiz.utils.dates import local_date, parse_quiz_date, utc_now

logger = logging.getLogger(__name__)


class QuizComposer:
    """
    Service for composing daily quizzes
    
    Strategy:
    - One quiz per date, shared by every user
    - Balanced tiers: 2 easy, 2 medium, 1 hard by default
    - Candidates are the newest approved questions of each tier
      (count x candidate multiplier), spread across scripture chapters
      when the window allows it
    - Creation is insert-if-absent, so concurrent callers converge
    """
    
    DIFFICULTY_ORDER = ("easy", "medium", "hard")
    
    def __init__(
        self,
        quizzes: DailyQuizRepository,
        questions: QuestionPool,
        cache: Optional[CacheService] = None,
        distribution: Optional[Dict[str, int]] = None,
        candidate_multiplier: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.quizzes = quizzes
        self.questions = questions
        self.cache = cache
        self.distribution = distribution or {
            "easy": settings.QUIZ_EASY_COUNT,
            "medium": settings.QUIZ_MEDIUM_COUNT,
            "hard": settings.QUIZ_HARD_COUNT,
        }
        self.candidate_multiplier = candidate_multiplier or settings.QUIZ_CANDIDATE_MULTIPLIER
        self.rng = rng or random.Random()
        self.clock = clock
    
    def generate_daily_quiz(self, quiz_date: Union[str, date]) -> DailyQuizRecord:
        """
        Get the daily quiz for a date, composing it on first request
        
        Args:
            quiz_date: Calendar day (date or YYYY-MM-DD)
            
        Returns:
            The one DailyQuiz stored for that date
            
        Raises:
            QuizValidationError: malformed date
            InsufficientQuestionsError: a tier cannot be filled
        """
        quiz_date = parse_quiz_date(quiz_date)
        
        existing = self.find_daily_quiz(quiz_date)
        if existing:
            return existing
        
        logger.info(f"Composing daily quiz for {quiz_date}")
        questions = self.select_balanced_questions()
        
        quiz, created = self.quizzes.insert_if_absent(
            quiz_date,
            [q.id for q in questions],
            self.clock()
        )
        
        if created:
            logger.info(f"Daily quiz created: {quiz.id} for {quiz_date} ({len(quiz.question_ids)} questions)")
        
        self._cache_quiz(quiz)
        return quiz
    
    def find_daily_quiz(self, quiz_date: Union[str, date]) -> Optional[DailyQuizRecord]:
        """Look up an existing quiz without composing one"""
        quiz_date = parse_quiz_date(quiz_date)
        
        cached = self._cached_quiz(quiz_date)
        if cached:
            return cached
        
        existing = self.quizzes.get_by_date(quiz_date)
        if existing:
            self._cache_quiz(existing)
        return existing
    
    def get_current_daily_quiz(self, timezone: str = None) -> DailyQuizRecord:
        """Daily quiz for today in the caller's timezone"""
        timezone = timezone or settings.DEFAULT_TIMEZONE
        return self.generate_daily_quiz(local_date(timezone, self.clock()))
    
    def select_balanced_questions(self) -> List[QuestionRecord]:
        """
        Pick the configured number of questions per difficulty tier
        
        Returns:
            Shuffled list of selected questions
        """
        selected: List[QuestionRecord] = []
        used_chapters = set()
        
        for difficulty in self.DIFFICULTY_ORDER:
            count = self.distribution.get(difficulty, 0)
            if count <= 0:
                continue
            
            candidates = self.questions.list_approved(
                difficulty,
                limit=count * self.candidate_multiplier
            )
            if len(candidates) < count:
                logger.error(
                    f"Cannot fill {difficulty} tier: need {count}, "
                    f"have {len(candidates)} approved"
                )
                raise InsufficientQuestionsError(difficulty, count, len(candidates))
            
            # Prefer chapters not used by earlier picks
            fresh = [q for q in candidates if q.chapter not in used_chapters]
            pool = fresh if len(fresh) >= count else candidates
            
            picks = self.rng.sample(pool, count)
            used_chapters.update(q.chapter for q in picks)
            selected.extend(picks)
        
        self.rng.shuffle(selected)
        return selected
    
    def get_questions(self, quiz: DailyQuizRecord) -> List[QuestionRecord]:
        """Hydrate question ids into full questions, in quiz order"""
        by_id = {q.id: q for q in self.questions.get_many(quiz.question_ids)}
        
        missing = [qid for qid in quiz.question_ids if qid not in by_id]
        if missing:
            logger.warning(f"Daily quiz {quiz.id} references missing questions: {missing}")
        
        return [by_id[qid] for qid in quiz.question_ids if qid in by_id]
    
    def build_response(self, quiz: DailyQuizRecord) -> DailyQuizResponse:
        """Quiz with public questions (correct answers stripped)"""
        questions = self.get_questions(quiz)
        return DailyQuizResponse(
            id=quiz.id,
            date=quiz.date,
            question_ids=quiz.question_ids,
            questions=[q.public() for q in questions],
            total_questions=len(quiz.question_ids),
            difficulties=dict(Counter(q.difficulty for q in questions)),
        )
    
    def _cached_quiz(self, quiz_date: date) -> Optional[DailyQuizRecord]:
        if not self.cache:
            return None
        
        payload = self.cache.get(self.cache.daily_quiz_key(quiz_date))
        if not payload:
            return None
        
        try:
            return DailyQuizRecord.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed cached quiz for {quiz_date}: {str(e)}")
            return None
    
    def _cache_quiz(self, quiz: DailyQuizRecord) -> None:
        if self.cache:
            self.cache.set(self.cache.daily_quiz_key(quiz.date), quiz.model_dump(mode="json"))
