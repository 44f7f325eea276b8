"""Exception types raised outside the codec.

The codec itself never raises; these cover configuration, the journal
store and the command line.
"""


class ChartNotesError(Exception):
    """Base class for package errors"""


class ConfigError(ChartNotesError):
    """Invalid configuration value or file"""


class RecordNotFoundError(ChartNotesError):
    """No journal record with the requested id"""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"No {kind} record with id {record_id!r}")


class JournalFormatError(ChartNotesError):
    """Journal file exists but cannot be parsed"""
