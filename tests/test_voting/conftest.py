"""Shared fixtures for voting system tests."""

import pytest
from tests.conftest import make_ballots, make_options


@pytest.fixture
def abc():
    """Options A(1), B(2), C(3)."""
    return make_options("ABC")


@pytest.fixture
def clear_majority():
    """Majority on first choices, 4 ballots, majority needed 3.

        x3  A > B
        x1  B > A

    A wins in round 1 with 3 votes.
    """
    return make_ballots((3, (1, 2)), (1, (2, 1)))


@pytest.fixture
def two_two_one():
    """2/2/1 split, 5 ballots, majority needed 3.

        x2  A > B
        x2  B > A
        x1  C > A > B

    C eliminated in round 1; A wins round 2 with 3 votes.
    """
    return make_ballots((2, (1, 2)), (2, (2, 1)), (1, (3, 1, 2)))


@pytest.fixture
def three_way_tie():
    """Every option has one first choice, 3 ballots.

        x1  A > B > C
        x1  B > C > A
        x1  C > A > B

    All tied in round 1: no winner.
    """
    return make_ballots((1, (1, 2, 3)), (1, (2, 3, 1)), (1, (3, 1, 2)))


@pytest.fixture
def exhausting_tie():
    """2/2/1 split where the C voter ranked nobody else, 5 ballots.

        x2  A
        x2  B
        x1  C

    C eliminated in round 1, its ballot exhausts, round 2 is a 2-2 tie.
    """
    return make_ballots((2, (1,)), (2, (2,)), (1, (3,)))


@pytest.fixture
def end_to_end():
    """4 ballots, majority needed 3.

        x2  A > B
        x1  B > A
        x1  C > A > B

    Round 1: A=2, B=1, C=1. B and C tied; B (lower id) eliminated.
    Round 2: A=3, C=1. A wins.
    """
    return make_ballots((2, (1, 2)), (1, (2, 1)), (1, (3, 1, 2)))
