"""Status polling for an in-progress documentation build."""
import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Optional

from ..protocols import IAPIClient

log = logging.getLogger(__name__)

PLACEHOLDER_MARKER = "<html>"


@dataclass(frozen=True)
class PollOutcome:
    """Decisive answer from the status endpoint, or an exhausted poll budget."""
    success: bool
    message: Optional[str] = None
    exhausted: bool = False


def parse_body(body: Optional[str]) -> Optional[dict]:
    """Parse an API body, returning None for anything that is not a JSON object."""
    try:
        parsed = json.loads(body or "")
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


class StatusPoller:
    """
    Checks `status_path` every `interval` seconds until the API answers.

    Transport errors and placeholder HTML pages mean "not ready yet" and are
    polled again at the same interval. `max_polls=None` never gives up.
    """

    def __init__(
        self,
        api_client: IAPIClient,
        status_path: str,
        interval: float,
        max_polls: Optional[int] = None,
    ):
        self._api = api_client
        self._status_path = status_path
        self._interval = interval
        self._max_polls = max_polls
        self.attempts = 0

    async def wait(self) -> PollOutcome:
        while self._max_polls is None or self.attempts < self._max_polls:
            await asyncio.sleep(self._interval)
            self.attempts += 1
            response = await self._api.get_raw(self._status_path)

            if response.error is not None or PLACEHOLDER_MARKER in (response.body or ""):
                log.debug(
                    "Status check %d for %s not ready (%s)",
                    self.attempts,
                    self._status_path,
                    response.error or "placeholder page",
                )
                continue

            data = parse_body(response.body)
            if data is None:
                return PollOutcome(success=False)
            if data.get("success"):
                return PollOutcome(success=True)
            return PollOutcome(success=False, message=data.get("message"))

        return PollOutcome(success=False, exhausted=True)
