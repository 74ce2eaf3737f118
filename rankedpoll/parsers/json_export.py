"""Parser for JSON poll exports."""

import json
from typing import Any
from urllib.parse import urlparse

from rankedpoll.models import Ballot, Option
from rankedpoll.parsers import register_parser
from rankedpoll.parsers.base import PollParser
from rankedpoll.polls import Poll


@register_parser
class JsonExportParser(PollParser):
    """Parser for polls exported as JSON.

    Two layouts are accepted. The poll object on its own, with ballots
    alongside its options:

        {"id": 7, "title": "Lunch", "isClosed": true,
         "options": [{"id": 1, "text": "Pizza", "order": 0}, ...],
         "ballots": [{"rankings": [{"optionId": 1, "rank": 1}, ...]}, ...]}

    or the poll wrapped in a "poll" key with "ballots" next to it:

        {"poll": {"id": 7, "title": "Lunch", "options": [...]},
         "ballots": [...]}

    A wrapped export may carry its ballot list under "results" instead of
    "ballots".

    Options are sorted by "order" when present. A missing "isClosed" is
    read as closed, since exports are normally taken after voting ends.
    """

    FORMAT_DESCRIPTION = "JSON poll exports (.json) with options and ballots"

    def can_parse(self, source: str) -> bool:
        return urlparse(source).path.lower().endswith(".json")

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        text = content.decode("utf-8-sig", errors="replace").lstrip()
        return text.startswith("{") and '"options"' in text

    def parse(self, source: str, content: bytes) -> Poll:
        try:
            data = json.loads(content.decode("utf-8-sig"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValueError(f"Invalid JSON: {e}") from e
        return self.parse_data(data)

    def parse_data(self, data: Any) -> Poll:
        """Build a Poll from an already-decoded JSON object."""
        if not isinstance(data, dict):
            raise ValueError("Expected a JSON object at the top level")

        poll_data = data.get("poll", data)
        if not isinstance(poll_data, dict):
            raise ValueError("'poll' must be an object")

        raw_options = poll_data.get("options")
        if not isinstance(raw_options, list):
            raise ValueError("No options found in poll export")
        if not all(isinstance(o, dict) for o in raw_options):
            raise ValueError("Each option must be an object")
        raw_options = sorted(raw_options, key=lambda o: o.get("order", 0))
        options = [Option.from_dict(o) for o in raw_options]

        raw_ballots = data.get("ballots", poll_data.get("ballots", data.get("results")))
        if not isinstance(raw_ballots, list):
            raise ValueError("No ballots found in poll export")
        if not all(isinstance(b, dict) for b in raw_ballots):
            raise ValueError("Each ballot must be an object")
        ballots = [Ballot.from_dict(b) for b in raw_ballots]

        return Poll(
            id=poll_data.get("id"),
            title=poll_data.get("title") or "Untitled poll",
            description=poll_data.get("description"),
            options=options,
            ballots=ballots,
            is_published=bool(poll_data.get("isPublished", True)),
            is_closed=bool(poll_data.get("isClosed", True)),
            share_link=poll_data.get("shareLink"),
        )
