"""Shared fixtures for parser tests."""

import json

import pytest


@pytest.fixture
def poll_export():
    """A closed poll in the flat export layout.

        x2  Pizza > Sushi
        x1  Sushi > Pizza
        x1  Tacos > Pizza > Sushi
    """
    return {
        "id": 7,
        "title": "Team lunch",
        "description": "Where should we go on Friday?",
        "isPublished": True,
        "isClosed": True,
        "options": [
            {"id": 11, "text": "Sushi", "order": 1},
            {"id": 10, "text": "Pizza", "order": 0},
            {"id": 12, "text": "Tacos", "order": 2},
        ],
        "ballots": [
            {"rankings": [{"optionId": 10, "rank": 1}, {"optionId": 11, "rank": 2}]},
            {"rankings": [{"optionId": 10, "rank": 1}, {"optionId": 11, "rank": 2}]},
            {"rankings": [{"optionId": 11, "rank": 1}, {"optionId": 10, "rank": 2}]},
            {"rankings": [
                {"optionId": 12, "rank": 1},
                {"optionId": 10, "rank": 2},
                {"optionId": 11, "rank": 3},
            ]},
        ],
    }


@pytest.fixture
def poll_export_json(poll_export):
    return json.dumps(poll_export).encode("utf-8")


@pytest.fixture
def ballots_csv():
    """Same preferences as poll_export, as a CSV ballot sheet."""
    return (
        "voter,Pizza,Sushi,Tacos\n"
        "v1,1,2,\n"
        "v2,1,2,\n"
        "v3,2,1,\n"
        "v4,2,3,1\n"
    ).encode("utf-8")
