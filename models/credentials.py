"""Credential types used to authenticate account holders."""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

PIN_PATTERN = re.compile(r"[0-9]{4}")


def is_valid_pin(pin: str) -> bool:
    """Check that a PIN is exactly four digits."""
    return bool(PIN_PATTERN.fullmatch(str(pin)))


class Credential(ABC):
    """Abstract base class for account credentials.

    Callers only ever ask a credential to verify an input, so a hashed
    implementation can replace the plaintext one without touching them.
    """

    scheme: str

    @abstractmethod
    def verify(self, candidate: str) -> bool:
        """Return True if the candidate matches this credential."""
        pass


@dataclass
class PlainTextPin(Credential):
    """A PIN stored and compared as plain text."""

    pin: str
    scheme: str = "plain"

    def verify(self, candidate: str) -> bool:
        return str(candidate) == self.pin

    def __repr__(self) -> str:
        return "PlainTextPin(pin='****')"
