"""Abstract base class for voting systems."""

from abc import ABC, abstractmethod
from typing import Sequence

from rankedpoll.models import Ballot, Option, TabulationResult


class VotingSystem(ABC):
    """Abstract base class for voting systems.

    Each voting system computes a result from a poll's ballots and its
    option set. Implementations must not mutate their inputs.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this voting system."""
        pass

    @property
    def description(self) -> str:
        """Optional description of how this voting system works."""
        return ""

    @abstractmethod
    def tabulate(
        self, ballots: Sequence[Ballot], options: Sequence[Option]
    ) -> TabulationResult:
        """Tabulate the ballots.

        Args:
            ballots: Accepted ballots for the poll
            options: The poll's full option set

        Returns:
            TabulationResult with the outcome and the round-by-round trace
        """
        pass
