"""
Notification domain model.
User-visible toast messages raised by the upload pipeline.
"""
from dataclasses import dataclass

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    """A toast shown to the user."""
    title: str
    description: str
    variant: str = DEFAULT

    @property
    def is_destructive(self) -> bool:
        return self.variant == DESTRUCTIVE
