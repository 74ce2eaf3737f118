"""Shared test helpers."""

from rankedpoll.models import Ballot, Option


def make_options(labels: str) -> list[Option]:
    """Build options numbered 1..n from a string of single-letter labels.

    make_options("ABC") -> [Option(1, "A"), Option(2, "B"), Option(3, "C")]
    """
    return [Option(id=i, label=label) for i, label in enumerate(labels, start=1)]


def make_ballot(*option_ids: int) -> Ballot:
    """Build a ballot ranking the given option ids 1st, 2nd, 3rd, ..."""
    return Ballot.from_pairs((option_id, rank) for rank, option_id in enumerate(option_ids, start=1))


def make_ballots(*specs: tuple[int, tuple[int, ...]]) -> list[Ballot]:
    """Build ballots from (count, preference order) pairs.

    make_ballots((2, (1, 2)), (1, (3,))) -> two ballots 1>2, one ballot 3
    """
    ballots = []
    for count, order in specs:
        ballots.extend(make_ballot(*order) for _ in range(count))
    return ballots
