from __future__ import annotations
import random
from typing import Callable, List, Optional, Sequence, Union

from domain.dtos import CaptionTemplate

MAX_PICKS = 10
MAX_CATEGORIES = 4
OPEN_SLOTS = 6  # below this any template is accepted
BACKFILL_TO = 8

class CaptionSelector:
    """Shuffled pick that covers several categories before allowing repeats.

    ``templates`` is either a fixed sequence or a loader called on every pick.
    """

    def __init__(self, templates: Union[Sequence[CaptionTemplate], Callable[[], Sequence[CaptionTemplate]]],
                 rng: Optional[random.Random] = None) -> None:
        if callable(templates):
            self._load = templates
        else:
            fixed = list(templates)
            self._load = lambda: fixed
        self.rng = rng or random.Random()

    def pick(self) -> List[CaptionTemplate]:
        shuffled = list(self._load())
        self.rng.shuffle(shuffled)

        result: List[CaptionTemplate] = []
        used_idx = set()
        categories = set()
        for i, t in enumerate(shuffled):
            if len(result) >= MAX_PICKS:
                break
            if len(categories) < MAX_CATEGORIES and t.category not in categories:
                categories.add(t.category)
            elif len(result) >= OPEN_SLOTS:
                continue
            result.append(t)
            used_idx.add(i)

        # catalog entries can be equal by value, so track positions
        for i, t in enumerate(shuffled):
            if len(result) >= BACKFILL_TO:
                break
            if i not in used_idx:
                result.append(t)
                used_idx.add(i)
        return result
