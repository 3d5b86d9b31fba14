# Issued-question bank: remembers every question handed to a client so a
# submitted answer can be marked against the server's copy.

from __future__ import annotations

import os
import threading
from collections import OrderedDict
from typing import Iterable, Optional

from generator import Question

DEFAULT_BANK_SIZE = 5000


def _bank_size_from_env() -> int:
    raw = os.getenv("QUIZ_BANK_SIZE", "")
    try:
        size = int(raw)
    except ValueError:
        return DEFAULT_BANK_SIZE
    return size if size > 0 else DEFAULT_BANK_SIZE


class QuestionBank:
    _questions: "OrderedDict[str, Question]" = OrderedDict()
    _lock = threading.Lock()
    max_size: int = _bank_size_from_env()

    @classmethod
    def remember(cls, questions: Iterable[Question]) -> int:
        with cls._lock:
            for q in questions:
                cls._questions[q.id] = q
                cls._questions.move_to_end(q.id)
            # evict the oldest issued questions first
            while len(cls._questions) > cls.max_size:
                cls._questions.popitem(last=False)
            return len(cls._questions)

    @classmethod
    def get(cls, qid: str) -> Optional[Question]:
        with cls._lock:
            return cls._questions.get(qid)

    @classmethod
    def clear(cls) -> int:
        with cls._lock:
            n = len(cls._questions)
            cls._questions.clear()
            return n

    @classmethod
    def size(cls) -> int:
        with cls._lock:
            return len(cls._questions)


# Public API
def remember_questions(questions: Iterable[Question]) -> int:
    return QuestionBank.remember(questions)


def get_question(qid: str) -> Optional[Question]:
    return QuestionBank.get(qid)


def clear_bank() -> int:
    return QuestionBank.clear()


def bank_size() -> int:
    return QuestionBank.size()
