"""Tests for the status poller."""
from unittest.mock import AsyncMock, Mock

import pytest

from esdoc_uploader.orchestrator.polling import StatusPoller, parse_body
from esdoc_uploader.services.api_client import APIResponse


def test_parse_body():
    assert parse_body('{"success": true}') == {"success": True}
    assert parse_body("[1, 2]") is None
    assert parse_body("<html></html>") is None
    assert parse_body(None) is None


@pytest.mark.asyncio
async def test_garbled_json_is_a_failure():
    api = Mock()
    api.get_raw = AsyncMock(return_value=APIResponse(body="{oops", status_code=200))
    poller = StatusPoller(api, "/p/.finish.json", interval=0)

    outcome = await poller.wait()

    assert outcome.success is False
    assert outcome.exhausted is False
    assert poller.attempts == 1


@pytest.mark.asyncio
async def test_counts_attempts_until_ready():
    api = Mock()
    api.get_raw = AsyncMock(
        side_effect=[
            APIResponse(body="<html>wait</html>"),
            APIResponse(error=RuntimeError("reset")),
            APIResponse(body='{"success": true}'),
        ]
    )
    poller = StatusPoller(api, "/p/.finish.json", interval=0)

    outcome = await poller.wait()

    assert outcome.success is True
    assert poller.attempts == 3
    api.get_raw.assert_awaited_with("/p/.finish.json")
