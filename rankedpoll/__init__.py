"""Ranked-choice polls tabulated by Instant Runoff Voting."""

from rankedpoll.voting.irv import tabulate

__all__ = ["tabulate"]
