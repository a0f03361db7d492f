"""Platform AdminApi adapter for reading correction requests."""

from typing import Any

from ...api.admin_api import AdminApi
from ..domain.entities import CorrectionScope
from ..domain.ports import ICorrectionReader


class AdminApiCorrectionReader(ICorrectionReader):
    """Reads raw correction records through AdminApi."""

    def __init__(self, admin_api: AdminApi):
        self.api = admin_api

    async def get_correction(
        self,
        request_id: int,
        scope: CorrectionScope,
    ) -> dict[str, Any]:
        return await self.api.get_correction_request(request_id, scope=scope.value)
