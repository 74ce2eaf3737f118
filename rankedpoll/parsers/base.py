"""Abstract base class for poll export parsers."""

from abc import ABC, abstractmethod

from rankedpoll.polls import Poll


class PollParser(ABC):
    """Abstract base class for parsing exported polls.

    Each parser handles one export format. Parsers are registered via the
    @register_parser decorator in rankedpoll/parsers/__init__.py.
    """

    @abstractmethod
    def can_parse(self, source: str) -> bool:
        """Check if this parser can handle the given source.

        Args:
            source: URL or filename to check

        Returns:
            True if this parser can handle the source, False otherwise
        """
        pass

    def can_parse_content(self, content: bytes, filename: str) -> bool:
        """Check if this parser can handle the given file content.

        Used for uploads and URLs whose name gives nothing away.
        Subclasses should override this to sniff their format.
        """
        return False

    @abstractmethod
    def parse(self, source: str, content: bytes) -> Poll:
        """Parse the content into a Poll with its ballots.

        Args:
            source: Original URL or filename (for context)
            content: Raw bytes of the export

        Returns:
            Parsed Poll object

        Raises:
            ValueError: If the content cannot be parsed
        """
        pass
