"""Load Correction use case.

Reads one correction request and returns its canonical form.

An approver opening a request through the "approvable" scope may be looking
at their own request, which that scope does not return. A 404 there is
retried ONCE with "requested_by_me". A 403 or any other error propagates.
"""

import logging

from ...api.exceptions import NotFoundError
from ..adapters.field_mapper import CorrectionFieldMapper
from ..domain.entities import CorrectionRecord, CorrectionScope
from ..domain.ports import ICorrectionReader

logger = logging.getLogger(__name__)


class LoadCorrectionUseCase:
    """Read and normalize a correction request."""

    def __init__(
        self,
        reader: ICorrectionReader,
        mapper: CorrectionFieldMapper | None = None,
    ):
        self.reader = reader
        self.mapper = mapper or CorrectionFieldMapper()

    async def execute(
        self,
        request_id: int,
        scope: CorrectionScope = CorrectionScope.REQUESTED_BY_ME,
    ) -> CorrectionRecord:
        """Load ``request_id`` through ``scope``.

        Raises:
            AdminConsoleError: If the read fails (after the 404 fallback)
        """
        try:
            raw = await self.reader.get_correction(request_id, scope)
        except NotFoundError:
            if scope != CorrectionScope.APPROVABLE:
                raise
            logger.info(
                f"Correction {request_id} not found as approvable, "
                f"retrying as {CorrectionScope.REQUESTED_BY_ME.value}"
            )
            raw = await self.reader.get_correction(request_id, CorrectionScope.REQUESTED_BY_ME)

        return self.mapper.map_to_entity(raw)
