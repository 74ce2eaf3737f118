"""Orchestrator: parse poll exports, tabulate and report results."""

import logging
from dataclasses import dataclass
from typing import Any

from rankedpoll.models import Round, TabulationResult
from rankedpoll.parsers import detect_parser, detect_parser_by_content, get_supported_formats
from rankedpoll.polls import Poll
from rankedpoll.voting import tabulate

# Import parsers to register them
from rankedpoll.parsers import json_export  # noqa: F401
from rankedpoll.parsers import csv_ballots  # noqa: F401

logger = logging.getLogger(__name__)


class ResultsError(Exception):
    """Error producing results for a poll."""
    pass


@dataclass
class PollResults:
    """A poll together with its tabulation result."""
    poll: Poll
    result: TabulationResult

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "poll": {
                "id": self.poll.id,
                "title": self.poll.title,
                "description": self.poll.description,
                "options": [option.to_dict() for option in self.poll.options],
            },
            "results": self.result.to_dict(),
        }

    def label(self, option_id: int | None) -> str:
        """Display label for an option id, falling back to the id itself."""
        option = self.poll.get_option(option_id)
        return option.label if option else str(option_id)

    def describe_round(self, round_: Round) -> str:
        counts = ", ".join(
            f"{self.label(option_id)} {votes}"
            for option_id, votes in round_.vote_counts.items()
        )
        line = f"Round {round_.round_number}: {counts}"
        if round_.eliminated is not None:
            line += f"; eliminated {self.label(round_.eliminated)}"
        if round_.winner is not None:
            line += f"; winner {self.label(round_.winner)}"
        return line

    def summary_lines(self) -> list[str]:
        """Human-readable, round-by-round account of the result."""
        lines = [self.describe_round(r) for r in self.result.rounds]
        if self.result.winner is not None:
            lines.append(
                f"Winner: {self.result.winner.label} "
                f"({self.result.total_votes} ballots)"
            )
        elif self.result.message:
            lines.append(self.result.message)
        return lines


def compute_results(poll: Poll) -> PollResults:
    """Tabulate a closed poll.

    Raises:
        ResultsError: If the poll is still open for voting
    """
    if not poll.is_closed:
        raise ResultsError("Poll results are only available after the poll is closed")

    result = tabulate(poll.ballots, poll.options)
    logger.info(
        "Tabulated poll %r: %s after %d rounds",
        poll.title, result.outcome.value, len(result.rounds),
    )
    return PollResults(poll=poll, result=result)


def analyze_export(source: str, content: bytes) -> PollResults:
    """Parse an exported poll and compute its results.

    Args:
        source: URL or filename (used to detect the appropriate parser)
        content: Raw bytes of the export

    Returns:
        PollResults for the parsed poll

    Raises:
        ResultsError: If the format is unknown, parsing fails or the poll
            is still open
    """
    # Find appropriate parser: try source matching first, then content detection
    parser = detect_parser(source)
    if parser is None:
        parser = detect_parser_by_content(content, source)
    if parser is None:
        raise ResultsError(
            f"We couldn't determine the export format.\n\n{get_supported_formats()}"
        )

    try:
        poll = parser.parse(source, content)
    except (ValueError, TypeError, KeyError) as e:
        raise ResultsError(f"Failed to parse poll export: {e}") from e

    return compute_results(poll)
