import logging
from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Set

from ..exceptions import CapabilityError


class Capability(str, Enum):
    LOGIN = 'login'
    SEARCH = 'search'
    COLLECT_QUESTIONS = 'collectQuestions'
    NAVIGATE_SEED = 'navigateSeed'
    DRAFT_ANSWER = 'draftAnswer'
    DRAFT_COMMENT = 'draftComment'


# Method that implements each capability
OPERATIONS = {
    Capability.LOGIN: 'ensure_logged_in',
    Capability.SEARCH: 'search',
    Capability.COLLECT_QUESTIONS: 'collect_questions',
    Capability.NAVIGATE_SEED: 'navigate_to_seed',
    Capability.DRAFT_ANSWER: 'draft_answer',
    Capability.DRAFT_COMMENT: 'draft_comment',
}


@dataclass
class QuestionRecord:
    """One collected question. ``url`` is unique within a collection run."""
    question: str
    url: str
    matched_keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'question': self.question,
            'url': self.url,
            'matched_keywords': list(self.matched_keywords),
        }


@dataclass
class CollectionState:
    """Per-call accumulator for collect_questions; len(results) never exceeds limit."""
    limit: int
    results: List[QuestionRecord] = field(default_factory=list)
    seen: Set[str] = field(default_factory=set)
    last_count: int = -1

    @property
    def full(self) -> bool:
        return len(self.results) >= self.limit

    def add(self, record: QuestionRecord) -> bool:
        """Record a question unless the limit is reached or its url was seen."""
        if self.full or record.url in self.seen:
            return False
        self.seen.add(record.url)
        self.results.append(record)
        return True


class BaseSiteAdapter(ABC):
    """
    Base class for site adapters.

    A subclass declares the capabilities it supports in ``capabilities`` and
    implements exactly the matching operations (see ``OPERATIONS``). Callers
    must check ``has_capability`` or go through ``operation``; an undeclared
    capability is absent, not merely unimplemented.
    """

    name: str = ''
    capabilities: FrozenSet[Capability] = frozenset()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        missing = [cap for cap in cls.capabilities if not callable(getattr(cls, OPERATIONS[cap], None))]
        if missing:
            raise TypeError(
                f"{cls.__name__} declares capabilities without operations: "
                f"{', '.join(cap.value for cap in missing)}"
            )

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(f"{__name__}.{self.name or self.__class__.__name__}")

    def has_capability(self, capability: Capability) -> bool:
        return Capability(capability) in self.capabilities

    def require_capabilities(self, *capabilities: Capability) -> None:
        missing = [cap for cap in capabilities if not self.has_capability(cap)]
        if missing:
            raise CapabilityError(self.name, missing)

    def operation(self, capability: Capability) -> Callable:
        """Bound method for a declared capability; CapabilityError otherwise."""
        self.require_capabilities(capability)
        return getattr(self, OPERATIONS[Capability(capability)])
