"""
Tests for date helpers, score rounding and the cache service
"""
import json
from datetime import date, datetime, timedelta, timezone

import pytest

from daily_quiz.exceptions import QuizValidationError
from daily_quiz.utils.cache import CacheService
from daily_quiz.utils.dates import ensure_utc, local_date, parse_quiz_date, previous_day, resolve_timezone
from daily_quiz.utils.scoring import percentage

from tests.fakes import BrokenRedis, DictRedis


class TestDates:
    
    def test_local_date_crosses_midnight(self):
        now = datetime(2024, 3, 9, 22, 0, tzinfo=timezone.utc)
        
        assert local_date("UTC", now) == date(2024, 3, 9)
        assert local_date("Asia/Kolkata", now) == date(2024, 3, 10)
        assert local_date("America/Los_Angeles", now) == date(2024, 3, 9)
    
    def test_local_date_treats_naive_as_utc(self):
        assert local_date("Asia/Tokyo", datetime(2024, 1, 15, 20, 0)) == date(2024, 1, 16)
    
    @pytest.mark.parametrize("name", ["Not/AZone", "", "../etc/passwd"])
    def test_unknown_timezone(self, name):
        with pytest.raises(QuizValidationError):
            resolve_timezone(name)
    
    def test_parse_quiz_date(self):
        assert parse_quiz_date("2024-02-29") == date(2024, 2, 29)
        assert parse_quiz_date(date(2024, 2, 29)) == date(2024, 2, 29)
    
    @pytest.mark.parametrize("value", ["2023-02-29", "2024-1-5", "20240105", "2024-01-05T00:00", None, 20240105])
    def test_parse_quiz_date_rejects(self, value):
        with pytest.raises(QuizValidationError):
            parse_quiz_date(value)
    
    def test_previous_day(self):
        assert previous_day(date(2024, 3, 1)) == date(2024, 2, 29)
        assert previous_day(date(2024, 1, 1)) == date(2023, 12, 31)
    
    def test_ensure_utc(self):
        aware = datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=2)))
        
        assert ensure_utc(aware) is aware
        assert ensure_utc(datetime(2024, 1, 1)).tzinfo == timezone.utc


class TestPercentage:
    
    @pytest.mark.parametrize("part,whole,expected", [
        (1, 2, 50),
        (1, 8, 13),
        (3, 8, 38),
        (5, 8, 63),
        (7, 8, 88),
        (0, 0, 0),
    ])
    def test_half_rounds_up(self, part, whole, expected):
        assert percentage(part, whole) == expected


class TestCacheService:
    
    def test_disabled_without_url(self):
        cache = CacheService(redis_url="")
        
        assert cache.enabled is False
        assert cache.get("daily_quiz:2024-01-15") is None
        assert cache.set("daily_quiz:2024-01-15", {"id": "x"}) is False
    
    def test_key_format(self):
        cache = CacheService(redis_client=DictRedis())
        
        assert cache.daily_quiz_key(date(2024, 1, 15)) == "daily_quiz:2024-01-15"
    
    def test_set_and_get(self):
        client = DictRedis()
        cache = CacheService(redis_client=client)
        
        assert cache.set("k", {"id": "x", "question_ids": ["a"]}, ttl=30) is True
        
        assert cache.get("k") == {"id": "x", "question_ids": ["a"]}
        assert json.loads(client.store["k"])["id"] == "x"
        assert client.ttls["k"] == 30
    
    def test_default_ttl(self):
        client = DictRedis()
        cache = CacheService(redis_client=client)
        
        cache.set("k", 1)
        
        assert client.ttls["k"] == 86400
    
    def test_failures_degrade_to_miss(self):
        cache = CacheService(redis_client=BrokenRedis())
        
        assert cache.get("k") is None
        assert cache.set("k", 1) is False
