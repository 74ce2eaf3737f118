"""Core data models for poll options, ballots and tabulation results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Self


@dataclass(frozen=True)
class Option:
    """A poll option (candidate).

    Attributes:
        id: Unique, orderable identifier (lower ids lose elimination ties)
        label: Display text shown to voters
    """
    id: int
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.label}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        label = data.get("text", data.get("label"))
        if label is None:
            raise ValueError(f"Option {data.get('id')!r} has no text")
        return cls(id=int(data["id"]), label=str(label))


@dataclass(frozen=True)
class RankingEntry:
    """One preference on a ballot: an option and its rank (1 = most preferred)."""
    option_id: int
    rank: int

    def to_dict(self) -> dict[str, Any]:
        return {"optionId": self.option_id, "rank": self.rank}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        option_id = data.get("optionId", data.get("option_id"))
        if option_id is None or "rank" not in data:
            raise ValueError(f"Ranking entry needs optionId and rank: {data!r}")
        return cls(option_id=int(option_id), rank=int(data["rank"]))


@dataclass(frozen=True)
class Ballot:
    """One voter's (possibly partial) ranking.

    The order of ``rankings`` is whatever the caller supplied; only the
    ``rank`` values carry meaning.

    Example:
        >>> Ballot.from_pairs([(1, 1), (2, 2)])
        Ballot(rankings=(RankingEntry(option_id=1, rank=1), RankingEntry(option_id=2, rank=2)))
    """
    rankings: tuple[RankingEntry, ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[int, int]]) -> Self:
        """Build a ballot from ``(option_id, rank)`` pairs."""
        return cls(tuple(RankingEntry(option_id, rank) for option_id, rank in pairs))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        rankings = data.get("rankings")
        if not isinstance(rankings, list) or not all(isinstance(r, dict) for r in rankings):
            raise ValueError("Ballot rankings must be a list of objects")
        return cls(tuple(RankingEntry.from_dict(r) for r in rankings))

    def to_dict(self) -> dict[str, Any]:
        return {"rankings": [r.to_dict() for r in self.rankings]}


@dataclass
class Round:
    """One counting round of an IRV tabulation.

    Attributes:
        round_number: 1-indexed, sequential
        vote_counts: Option id -> votes, for every option still active
        eliminated: Option id eliminated at the end of this round, if any
        winner: Option id declared winner in this round, if any
        exhausted: Ballots with no active preference left in this round
        majority_needed: Threshold used for the majority check (None on the
            final confirmation round, which has no check)
    """
    round_number: int
    vote_counts: dict[int, int]
    eliminated: int | None = None
    winner: int | None = None
    exhausted: int = 0
    majority_needed: int | None = None

    @property
    def total_votes(self) -> int:
        return sum(self.vote_counts.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "roundNumber": self.round_number,
            "voteCounts": dict(self.vote_counts),
            "eliminated": self.eliminated,
            "winner": self.winner,
            "exhausted": self.exhausted,
            "majorityNeeded": self.majority_needed,
        }


class Outcome(Enum):
    """How a tabulation ended."""
    WINNER = "winner"
    TIE = "tie"
    NO_VOTES = "no_votes"
    EXHAUSTED = "exhausted"


@dataclass
class TabulationResult:
    """Result of an IRV tabulation.

    Attributes:
        outcome: Which terminal state was reached
        winner: The winning option, or None for ties and empty elections
        rounds: Rounds in chronological order
        total_votes: Ballot count the result is reported against
        message: Human-readable explanation when there is no winner
    """
    outcome: Outcome
    winner: Option | None = None
    rounds: list[Round] = field(default_factory=list)
    total_votes: int = 0
    message: str | None = None

    @property
    def has_winner(self) -> bool:
        return self.winner is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner.to_dict() if self.winner else None,
            "rounds": [r.to_dict() for r in self.rounds],
            "totalVotes": self.total_votes,
            "message": self.message,
            "outcome": self.outcome.value,
        }
