import random
import string
from typing import Callable

from src.shortener.core.exceptions import CodeGenerationExhaustedError

CHARSET = string.ascii_letters + string.digits

# Top-level paths served by other routes, never usable as codes
RESERVED_CODES = frozenset({"api", "auth", "docs", "health", "redoc", "shorten", "urls", "users"})


class ShortCodeGenerator:
    """
    Random short code allocator.

    Candidates are drawn from ``[A-Za-z0-9]`` and checked against storage
    through a caller-supplied predicate, so the generator itself has no
    side effects.
    """

    def __init__(self, length: int = 6, max_attempts: int = 10):
        if length < 1:
            raise ValueError("length must be positive")
        if max_attempts < 1:
            raise ValueError("max_attempts must be positive")
        self.length = length
        self.max_attempts = max_attempts

    def generate(self) -> str:
        """Generate a random code of exactly ``length`` characters."""
        return "".join(random.choice(CHARSET) for _ in range(self.length))

    def allocate(self, exists: Callable[[str], bool]) -> str:
        """
        Generate codes until one is not taken.

        Args:
            exists: Returns True if the candidate is used by an active record

        Returns:
            A code that is not reserved and for which ``exists`` returned False

        Raises:
            CodeGenerationExhaustedError: If every attempt collided
        """
        for _ in range(self.max_attempts):
            candidate = self.generate()
            if candidate not in RESERVED_CODES and not exists(candidate):
                return candidate
        raise CodeGenerationExhaustedError(self.max_attempts)
