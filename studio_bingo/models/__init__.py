"""ORM models."""

from studio_bingo.models.card_definition import CardDefinition
from studio_bingo.models.rate_limit_counter import RateLimitCounter
from studio_bingo.models.submission import Submission

__all__ = ["CardDefinition", "RateLimitCounter", "Submission"]
