"""Tests for LoadCorrectionUseCase and the AdminApi correction reader."""

from unittest.mock import AsyncMock, MagicMock, call

import pytest

from src.attendance_admin.api.admin_api import AdminApi
from src.attendance_admin.api.exceptions import APIError, NotFoundError, ServerError
from src.attendance_admin.corrections.adapters.admin_api_reader import AdminApiCorrectionReader
from src.attendance_admin.corrections.domain.entities import CorrectionScope, CorrectionType
from src.attendance_admin.corrections.use_cases import LoadCorrectionUseCase


@pytest.fixture
def raw_record():
    return {
        "requestId": 42,
        "type": "CHECK_OUT",
        "proposedCheckInAt": "2024-03-01T17:00:00Z",
    }


@pytest.fixture
def mock_reader(raw_record):
    reader = AsyncMock()
    reader.get_correction.return_value = raw_record
    return reader


@pytest.fixture
def use_case(mock_reader):
    return LoadCorrectionUseCase(mock_reader)


class TestLoadCorrection:
    """Tests for LoadCorrectionUseCase."""

    @pytest.mark.asyncio
    async def test_returns_normalized_record(self, use_case, mock_reader):
        record = await use_case.execute(42)

        mock_reader.get_correction.assert_awaited_once_with(42, CorrectionScope.REQUESTED_BY_ME)
        assert record.type == CorrectionType.CHECK_OUT
        assert record.proposed_check_out == "2024-03-01T17:00:00Z"
        assert record.proposed_check_in is None

    @pytest.mark.asyncio
    async def test_approvable_404_retries_own_scope(self, use_case, mock_reader, raw_record):
        mock_reader.get_correction.side_effect = [NotFoundError(), raw_record]

        record = await use_case.execute(42, scope=CorrectionScope.APPROVABLE)

        assert mock_reader.get_correction.call_args_list == [
            call(42, CorrectionScope.APPROVABLE),
            call(42, CorrectionScope.REQUESTED_BY_ME),
        ]
        assert record.request_id == 42

    @pytest.mark.asyncio
    async def test_fallback_happens_once(self, use_case, mock_reader):
        mock_reader.get_correction.side_effect = NotFoundError()

        with pytest.raises(NotFoundError):
            await use_case.execute(42, scope=CorrectionScope.APPROVABLE)

        assert mock_reader.get_correction.await_count == 2

    @pytest.mark.asyncio
    async def test_own_scope_404_propagates(self, use_case, mock_reader):
        mock_reader.get_correction.side_effect = NotFoundError()

        with pytest.raises(NotFoundError):
            await use_case.execute(42)

        assert mock_reader.get_correction.await_count == 1

    @pytest.mark.asyncio
    async def test_forbidden_not_retried(self, use_case, mock_reader):
        mock_reader.get_correction.side_effect = APIError(
            "Forbidden", status_code=403, code="FORBIDDEN"
        )

        with pytest.raises(APIError):
            await use_case.execute(42, scope=CorrectionScope.APPROVABLE)

        assert mock_reader.get_correction.await_count == 1

    @pytest.mark.asyncio
    async def test_server_error_not_retried_with_other_scope(self, use_case, mock_reader):
        mock_reader.get_correction.side_effect = ServerError()

        with pytest.raises(ServerError):
            await use_case.execute(42, scope=CorrectionScope.APPROVABLE)

        assert mock_reader.get_correction.await_count == 1


class TestAdminApiCorrectionReader:
    @pytest.mark.asyncio
    async def test_passes_scope_value(self, raw_record):
        api = MagicMock(spec=AdminApi)
        api.get_correction_request = AsyncMock(return_value=raw_record)
        reader = AdminApiCorrectionReader(api)

        result = await reader.get_correction(42, CorrectionScope.APPROVABLE)

        assert result == raw_record
        api.get_correction_request.assert_awaited_once_with(42, scope="approvable")
