"""
Alert message catalog.

The controlling UI translates keys it knows (``export.exported``) and shows
anything else verbatim, so error strings travel through the same channel.
"""
from enum import Enum


class AlertKey(str, Enum):
    """Translation keys sent on the alert channel."""

    EXPORTED = "export.exported"
    EXPORTING = "export.exporting"


class AlertMessages:
    """Raw (untranslated) alert texts."""

    _exported_count = "Exported {} shows!"

    @classmethod
    def exported_count(cls, count: int) -> str:
        return cls._exported_count.format(count)

    @classmethod
    def from_error(cls, error: BaseException) -> str:
        """Raw error text for the alert channel."""
        return str(error) or type(error).__name__
