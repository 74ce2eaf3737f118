"""Parser for ballots exported as CSV, one row per voter."""

import csv
import io
import re
from pathlib import PurePosixPath
from urllib.parse import urlparse

from rankedpoll.models import Ballot, Option, RankingEntry
from rankedpoll.parsers import register_parser
from rankedpoll.parsers.base import PollParser
from rankedpoll.polls import Poll

VOTER_COLUMN_NAMES = {"voter", "ballot", "ballot id", "ballotid", "id"}
RANK_CELL = re.compile(r"^\s*([1-9]\d*)?\s*$")


@register_parser
class CsvBallotsParser(PollParser):
    """Parser for CSV ballot sheets, as exported by survey and form tools.

    The header row holds the option labels. Each following row is one
    ballot; a cell holds the rank the voter gave that option, or is blank
    if they left it unranked:

        voter,Pizza,Sushi,Tacos
        v1,1,2,
        v2,,1,2
        v3,2,,1

    A leading voter/ballot id column is optional and ignored. Options are
    numbered 1..n left to right. Rows that rank nothing are skipped. The
    poll is named after the file and treated as closed.
    """

    FORMAT_DESCRIPTION = "CSV ballot sheets (.csv) with one column per option"

    def can_parse(self, source: str) -> bool:
        return urlparse(source).path.lower().endswith(".csv")

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        """Sniff for a header row of labels followed by rows of rank numbers."""
        text = content.decode("utf-8-sig", errors="replace")
        lines = [line for line in text.splitlines() if line.strip()]
        if len(lines) < 2 or lines[0].lstrip().startswith(("{", "<")):
            return False

        header = next(csv.reader([lines[0]]))
        if len(header) < 2:
            return False
        skip = 1 if header[0].strip().lower() in VOTER_COLUMN_NAMES else 0
        row = next(csv.reader([lines[1]]))
        return all(RANK_CELL.match(cell) for cell in row[skip:])

    def parse(self, source: str, content: bytes) -> Poll:
        text = content.decode("utf-8-sig", errors="replace")
        rows = [row for row in csv.reader(io.StringIO(text)) if any(c.strip() for c in row)]
        if not rows:
            raise ValueError("CSV file is empty")

        header = [cell.strip() for cell in rows[0]]
        skip = 1 if header and header[0].lower() in VOTER_COLUMN_NAMES else 0
        labels = header[skip:]
        if not labels or not all(labels):
            raise ValueError("CSV header must name every option column")

        options = [Option(id=i, label=label) for i, label in enumerate(labels, start=1)]

        ballots = []
        for line_number, row in enumerate(rows[1:], start=2):
            cells = row[skip:]
            if len(cells) > len(options):
                raise ValueError(
                    f"Row {line_number} has {len(cells)} rank cells "
                    f"but there are {len(options)} options"
                )
            rankings = []
            for option, cell in zip(options, cells):
                cell = cell.strip()
                if not cell:
                    continue
                try:
                    rank = int(cell)
                except ValueError:
                    raise ValueError(
                        f"Invalid rank {cell!r} for {option.label!r} in row {line_number}"
                    )
                if rank < 1:
                    raise ValueError(
                        f"Rank must be a positive integer, got {rank} for "
                        f"{option.label!r} in row {line_number}"
                    )
                rankings.append(RankingEntry(option_id=option.id, rank=rank))
            if rankings:
                ballots.append(Ballot(tuple(rankings)))

        title = PurePosixPath(urlparse(source).path).stem or "Untitled poll"
        return Poll(
            title=title,
            options=options,
            ballots=ballots,
            is_published=True,
            is_closed=True,
        )
