"""Mail transport interface."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from email.message import EmailMessage


class Transport(abc.ABC):
    """Delivers email messages to a mail endpoint."""

    @abc.abstractmethod
    def send(self, message: EmailMessage) -> None:
        """Deliver a message.

        Args:
            message: A fully built message; sender and recipients are read
                from its headers.
        """

    def close(self) -> None:
        """Release any connection held by the transport. The default does nothing."""
