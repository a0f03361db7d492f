"""Port interfaces for correction requests.

This follows the Hexagonal Architecture pattern.
"""

from abc import ABC, abstractmethod
from typing import Any

from .entities import CorrectionScope


class ICorrectionReader(ABC):
    """Port for reading raw correction request records."""

    @abstractmethod
    async def get_correction(
        self,
        request_id: int,
        scope: CorrectionScope,
    ) -> dict[str, Any]:
        """Fetch the raw record for a correction request.

        Args:
            request_id: Correction request id
            scope: Read scope

        Returns:
            Raw record as sent by the platform

        Raises:
            NotFoundError: If the request is not visible in this scope
        """
        ...
