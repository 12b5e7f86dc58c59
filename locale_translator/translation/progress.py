"""
Translation Run State

Contains the dataclasses owned by one translation run:
- ProgressState: progress counters read by callers
- Throttle: fixed-window request throttle
- TranslationRun: everything a single run mutates
"""

import time
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, Optional


@dataclass
class ProgressState:
    """Progress information for an ongoing run."""
    total: int
    completed: int = 0
    current_language: str = ""
    current_language_name: str = ""
    phase: str = "pending"           # "pending", "translating", "completed"
    success_count: int = 0
    failure_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Throttle:
    """Pause for `pause` seconds once every `every` requests."""
    every: int = 5
    pause: float = 1.0
    count: int = 0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def tick(self) -> None:
        """Call before each request."""
        if self.count > 0 and self.count % self.every == 0:
            self.sleep(self.pause)
        self.count += 1


@dataclass
class TranslationRun:
    """State for exactly one run; never shared between runs."""
    source_language: str
    progress: ProgressState
    throttle: Throttle
    translations: Dict[str, Dict[str, str]] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    started_at: float = field(default_factory=time.time)
    finished_at: Optional[float] = None
