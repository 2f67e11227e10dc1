from enum import Enum
from typing import Optional


class GameMode(str, Enum):
    EASY = 'easy'
    NORMAL = 'normal'
    HARD = 'hard'
    HELL = 'hell'
    HADES = 'hades'
    DENISE = 'denise'
    REVERSE = 'reverse'
    NOX = 'nox'
    POLAR = 'polar'
    SHOOK = 'shook'

    @classmethod
    def parse(cls, value) -> Optional['GameMode']:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class Timeframe(str, Enum):
    DAY = 'day'
    WEEK = 'week'
    ALL = 'all'

    @classmethod
    def parse(cls, value) -> 'Timeframe':
        """Unknown or missing timeframes fall back to ALL."""
        try:
            return cls(value)
        except ValueError:
            return cls.ALL

    @property
    def window_ms(self) -> Optional[int]:
        if self is Timeframe.DAY:
            return 86_400_000
        if self is Timeframe.WEEK:
            return 604_800_000
        return None
