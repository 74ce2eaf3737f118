"""Single-winner Instant Runoff Voting (IRV)."""

import logging
from typing import Sequence

from rankedpoll.models import Ballot, Option, Outcome, Round, TabulationResult
from rankedpoll.voting.base import VotingSystem

logger = logging.getLogger(__name__)

NO_VOTES_MESSAGE = "No votes cast yet"
TIE_MESSAGE = "Tie - all remaining options have equal votes"
NO_WINNER_MESSAGE = "No winner determined"

# A working ballot is a private list of (option_id, rank) pairs.
WorkingBallot = list[tuple[int, int]]


class InstantRunoffSystem(VotingSystem):
    """Instant Runoff Voting, single winner.

    Each round:
    1. Every ballot counts for its highest-ranked (lowest rank number)
       option that is still active. Ballots with no active option left
       are exhausted and count for nobody.
    2. An option with at least floor(B/2) + 1 votes wins, where B is the
       number of ballots cast (exhausted ballots included).
    3. If every active option has the same count, the election is a tie.
    4. Otherwise the option with the fewest votes is eliminated and its
       rankings are struck from every ballot.

    When a single option remains, a final round confirms it as the winner.

    Tiebreaker: among options tied for the fewest votes, the one with the
    lowest option id is eliminated. The rule is arbitrary but reproducible.
    """

    @property
    def name(self) -> str:
        return "Instant Runoff Voting"

    @property
    def description(self) -> str:
        return (
            "Eliminate the option with the fewest votes until one has a "
            "majority; ties for fewest eliminate the lowest option id"
        )

    def tabulate(
        self, ballots: Sequence[Ballot], options: Sequence[Option]
    ) -> TabulationResult:
        if not ballots:
            return TabulationResult(
                outcome=Outcome.NO_VOTES,
                total_votes=0,
                message=NO_VOTES_MESSAGE,
            )

        total_ballots = len(ballots)
        majority = total_ballots // 2 + 1
        active = list(options)
        working = [
            [(entry.option_id, entry.rank) for entry in ballot.rankings]
            for ballot in ballots
        ]
        rounds: list[Round] = []
        single_option = len(active) == 1

        while len(active) > 1:
            round_number = len(rounds) + 1
            active_ids = {option.id for option in active}
            vote_counts, exhausted = self._count_round(working, active, active_ids)

            round_ = Round(
                round_number=round_number,
                vote_counts=vote_counts,
                exhausted=exhausted,
                majority_needed=majority,
            )
            logger.debug(
                "Round %d: %s (exhausted %d, majority %d)",
                round_number, vote_counts, exhausted, majority,
            )

            for option in active:
                if vote_counts[option.id] >= majority:
                    round_.winner = option.id
                    rounds.append(round_)
                    logger.info(
                        "Option %s wins with %d of %d votes in round %d",
                        option.id, vote_counts[option.id], total_ballots,
                        round_number,
                    )
                    return TabulationResult(
                        outcome=Outcome.WINNER,
                        winner=option,
                        rounds=rounds,
                        total_votes=total_ballots,
                    )

            min_votes = min(vote_counts.values())
            fewest = [option for option in active if vote_counts[option.id] == min_votes]

            if len(fewest) == len(active):
                rounds.append(round_)
                logger.info(
                    "All %d remaining options tied at %d votes in round %d",
                    len(active), min_votes, round_number,
                )
                return TabulationResult(
                    outcome=Outcome.TIE,
                    rounds=rounds,
                    total_votes=total_ballots,
                    message=TIE_MESSAGE,
                )

            eliminated = min(fewest, key=lambda option: option.id)
            round_.eliminated = eliminated.id
            rounds.append(round_)
            logger.debug("Round %d: eliminating option %s", round_number, eliminated.id)

            active = [option for option in active if option.id != eliminated.id]
            working = [
                [entry for entry in ballot if entry[0] != eliminated.id]
                for ballot in working
            ]

        if len(active) == 1:
            return self._final_round(
                working, active[0], rounds,
                total_ballots=None if single_option else total_ballots,
            )

        # Only reachable when no options were supplied at all
        return TabulationResult(
            outcome=Outcome.EXHAUSTED,
            rounds=rounds,
            total_votes=total_ballots,
            message=NO_WINNER_MESSAGE,
        )

    @staticmethod
    def _count_round(
        working: list[WorkingBallot], active: list[Option], active_ids: set[int],
    ) -> tuple[dict[int, int], int]:
        """Count each ballot for its top active preference.

        Returns (vote counts keyed by option id in option order, exhausted count).
        """
        vote_counts = {option.id: 0 for option in active}
        exhausted = 0

        for ballot in working:
            candidates = [entry for entry in ballot if entry[0] in active_ids]
            if not candidates:
                exhausted += 1
                continue
            # min() keeps the first of equal ranks, like a stable sort would
            option_id, _ = min(candidates, key=lambda entry: entry[1])
            vote_counts[option_id] += 1

        return vote_counts, exhausted

    @staticmethod
    def _final_round(
        working: list[WorkingBallot],
        remaining: Option,
        rounds: list[Round],
        total_ballots: int | None,
    ) -> TabulationResult:
        """Confirm the last option standing.

        ``total_ballots`` is None when the election only ever had one
        option; the reported total is then the number of ballots that
        ranked it.
        """
        votes = sum(
            1 for ballot in working
            if any(option_id == remaining.id for option_id, _ in ballot)
        )
        rounds.append(Round(
            round_number=len(rounds) + 1,
            vote_counts={remaining.id: votes},
            winner=remaining.id,
            exhausted=len(working) - votes,
        ))
        logger.info("Option %s is the last remaining option", remaining.id)

        return TabulationResult(
            outcome=Outcome.WINNER,
            winner=remaining,
            rounds=rounds,
            total_votes=votes if total_ballots is None else total_ballots,
        )


def tabulate(ballots: Sequence[Ballot], options: Sequence[Option]) -> TabulationResult:
    """Run an IRV tabulation over ``ballots`` for the given ``options``.

    Never raises and never mutates its arguments: degenerate input (no
    ballots, no options, rankings for unknown options) maps to a result
    with no winner and an explanatory message, or is ignored.
    """
    return InstantRunoffSystem().tabulate(ballots, options)
