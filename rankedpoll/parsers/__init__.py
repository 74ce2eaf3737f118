"""Parsers for exported polls and ballots."""

from .base import PollParser

# Parser registry - import parsers here to register them
_parsers: list[type[PollParser]] = []


def register_parser(parser_class: type[PollParser]) -> type[PollParser]:
    """Decorator to register a parser class."""
    _parsers.append(parser_class)
    return parser_class


def get_all_parsers() -> list[type[PollParser]]:
    """Return all registered parser classes."""
    return _parsers.copy()


def detect_parser(source: str) -> PollParser | None:
    """Auto-detect and return an appropriate parser instance for the given source."""
    for parser_class in _parsers:
        parser = parser_class()
        if parser.can_parse(source):
            return parser
    return None


def detect_parser_by_content(content: bytes, filename: str) -> PollParser | None:
    """Return a parser that recognises the content itself, if any."""
    for parser_class in _parsers:
        parser = parser_class()
        if parser.can_parse_content(content, filename):
            return parser
    return None


def get_supported_formats() -> str:
    """Return a user-friendly description of supported export formats."""
    lines = ["We currently support:"]
    for parser_class in _parsers:
        description = getattr(parser_class, "FORMAT_DESCRIPTION", None)
        if description:
            lines.append(f"  - {description}")
    return "\n".join(lines)
