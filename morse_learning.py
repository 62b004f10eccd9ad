#!/usr/bin/env python3
"""
Morse Learning Sessions

Data shapes for practice items, session results and achievements, and the
helpers that fill them from the character tables. Nothing here is
persisted; callers store the dictionaries returned by to_dict().
"""

import enum
import time
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from morse_characters import Script, base_characters


CHARACTERS_PER_WORD = 5


@dataclass
class PracticeItem:
    """A single flashcard/quiz item."""
    morse_code: str          # 0/1 pattern, e.g. "01" for A
    character: str
    wpm_target: int
    success_count: int = 0
    last_tested: int = 0     # ms timestamp

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class SessionResults:
    """Data collected from one completed learning session."""
    character_set: List[Script]
    start_time_ms: int
    duration_seconds: int
    total_items: int
    correct_count: int
    average_wpm: float
    code_speed_wpm: int
    farnsworth_spacing: int = 0

    @property
    def accuracy(self) -> float:
        if self.total_items == 0:
            return 0.0
        return self.correct_count / self.total_items

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['character_set'] = [script.value for script in self.character_set]
        return data


class AchievementLevel(enum.Enum):
    BRONZE = 'bronze'
    SILVER = 'silver'
    GOLD = 'gold'


@dataclass
class Achievement:
    """An unlockable milestone."""
    id: str
    name: str
    description: str
    unlocked_level: AchievementLevel
    unlocked_at_ms: int

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['unlocked_level'] = self.unlocked_level.value
        return data


class Learning:
    """
    Builds practice sessions from the character tables.

    Args:
        wpm_target: Target speed assigned to new practice items
        seed: Seed for the random generator (None for a random seed)
    """

    def __init__(self, wpm_target: int = 20, seed: Optional[int] = None):
        self.wpm_target = wpm_target
        self.rng = np.random.default_rng(seed)

    def start_quiz_challenge(self, sets: Sequence[Script], count: int) -> List[PracticeItem]:
        """
        Draw distinct characters for a quiz.

        Args:
            sets: Scripts to draw from
            count: Number of items wanted

        Returns:
            Up to `count` practice items, no character repeated
        """
        tables = base_characters()
        candidates = []
        seen = set()
        for script in sets:
            for character, pattern in tables[script].items():
                if character not in seen:
                    seen.add(character)
                    candidates.append((character, pattern))

        count = min(max(count, 0), len(candidates))
        if count == 0:
            return []

        chosen = self.rng.choice(len(candidates), size=count, replace=False)
        return [
            PracticeItem(
                morse_code=candidates[i][1],
                character=candidates[i][0],
                wpm_target=self.wpm_target
            )
            for i in chosen
        ]

    def complete_session(
        self,
        correct_answers: int,
        total_questions: int,
        duration: int,
        sets: Sequence[Script] = (Script.LATIN,),
        code_speed_wpm: Optional[int] = None,
        farnsworth_spacing: int = 0,
        start_time_ms: Optional[int] = None
    ) -> SessionResults:
        """
        Summarise a finished session.

        Args:
            correct_answers: Number of correct answers
            total_questions: Number of questions asked
            duration: Session length in seconds
            sets: Scripts practised
            code_speed_wpm: Character speed (defaults to the WPM target)
            farnsworth_spacing: Spacing speed in WPM, 0 if not used
            start_time_ms: Session start (defaults to now minus duration)

        Returns:
            Session results; average WPM counts five characters per word
        """
        if start_time_ms is None:
            start_time_ms = int(time.time() * 1000) - duration * 1000

        if duration > 0:
            average_wpm = (total_questions / CHARACTERS_PER_WORD) / (duration / 60.0)
        else:
            average_wpm = 0.0

        return SessionResults(
            character_set=list(sets),
            start_time_ms=start_time_ms,
            duration_seconds=duration,
            total_items=total_questions,
            correct_count=correct_answers,
            average_wpm=average_wpm,
            code_speed_wpm=code_speed_wpm if code_speed_wpm is not None else self.wpm_target,
            farnsworth_spacing=farnsworth_spacing
        )
