"""Store-boundary validation package."""

from pinee.validation.parser import RecordParseError, RecordParser

__all__ = ["RecordParseError", "RecordParser"]
