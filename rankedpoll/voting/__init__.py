"""Voting systems for tabulating poll ballots."""

from .base import VotingSystem
from .irv import InstantRunoffSystem, tabulate

__all__ = ["VotingSystem", "InstantRunoffSystem", "tabulate"]
