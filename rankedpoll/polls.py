"""In-memory poll lifecycle: creation, publishing, voting and closing."""

import logging
import secrets
from dataclasses import dataclass, field
from typing import Any, Iterable, Self

from rankedpoll.models import Ballot, Option, RankingEntry

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_LABEL_LENGTH = 200
MIN_OPTIONS = 2
SHARE_LINK_BYTES = 16


class PollError(ValueError):
    """Base class for poll lifecycle and ballot errors."""
    pass


class BallotValidationError(PollError):
    """Raised when a submitted ranking is structurally invalid."""
    pass


class PollStateError(PollError):
    """Raised when an action is not allowed in the poll's current state."""
    pass


def generate_share_link() -> str:
    """Return a random 32-character hex token for sharing a poll."""
    return secrets.token_hex(SHARE_LINK_BYTES)


def validate_rankings(rankings: list[RankingEntry], option_ids: Iterable[int]) -> None:
    """Check a ranking before it is accepted as a ballot.

    A valid ranking is non-empty, only names options of this poll, names
    each option once, and uses ranks 1..n with no gaps.

    Raises:
        BallotValidationError: describing the first problem found
    """
    if not rankings:
        raise BallotValidationError("Rankings array is required")

    allowed = set(option_ids)
    ranked_ids = [entry.option_id for entry in rankings]

    if not all(option_id in allowed for option_id in ranked_ids):
        raise BallotValidationError("All ranked options must belong to this poll")

    if len(set(ranked_ids)) != len(ranked_ids):
        raise BallotValidationError("Each option can only be ranked once")

    for expected, rank in enumerate(sorted(entry.rank for entry in rankings), start=1):
        if rank != expected:
            raise BallotValidationError("Ranks must be sequential starting from 1")


@dataclass
class Poll:
    """A ranked-choice poll.

    Attributes:
        title: Poll question/title
        options: Options in display order
        description: Optional longer text
        id: Identifier assigned by whoever stores the poll
        ballots: Accepted ballots
        is_published: Whether voting has been opened (share link issued)
        is_closed: Whether voting has ended; results require a closed poll
        share_link: Token for the public voting page
    """
    title: str
    options: list[Option]
    description: str | None = None
    id: int | None = None
    ballots: list[Ballot] = field(default_factory=list)
    is_published: bool = False
    is_closed: bool = False
    share_link: str | None = None

    @classmethod
    def create(
        cls,
        title: str,
        option_labels: list[str],
        description: str | None = None,
        poll_id: int | None = None,
    ) -> Self:
        """Create an unpublished poll, numbering options 1..n in order."""
        if not title or not option_labels or len(option_labels) < MIN_OPTIONS:
            raise PollError("Title and at least 2 options are required")
        if len(title) > MAX_TITLE_LENGTH:
            raise PollError(f"Title must be at most {MAX_TITLE_LENGTH} characters")
        for label in option_labels:
            if not label or len(label) > MAX_LABEL_LENGTH:
                raise PollError(
                    f"Option text must be between 1 and {MAX_LABEL_LENGTH} characters"
                )

        options = [
            Option(id=i, label=label) for i, label in enumerate(option_labels, start=1)
        ]
        return cls(title=title, options=options, description=description or None, id=poll_id)

    @property
    def option_ids(self) -> list[int]:
        return [option.id for option in self.options]

    def get_option(self, option_id: int) -> Option | None:
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def publish(self) -> str:
        """Open the poll for voting and return its share link."""
        if self.is_closed:
            raise PollStateError("Cannot publish a closed poll")
        if not self.share_link:
            self.share_link = generate_share_link()
        self.is_published = True
        logger.info("Published poll %r", self.title)
        return self.share_link

    def close(self) -> None:
        self.is_closed = True

    def submit_ballot(self, rankings: list[RankingEntry]) -> Ballot:
        """Validate and record a ballot.

        Raises:
            PollStateError: If the poll is not published or already closed
            BallotValidationError: If the ranking is invalid
        """
        if not self.is_published:
            raise PollStateError("Poll is not published")
        if self.is_closed:
            raise PollStateError("Poll is closed")

        validate_rankings(rankings, self.option_ids)
        ballot = Ballot(tuple(rankings))
        self.ballots.append(ballot)
        return ballot

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "options": [option.to_dict() for option in self.options],
            "isPublished": self.is_published,
            "isClosed": self.is_closed,
            "shareLink": self.share_link,
        }
