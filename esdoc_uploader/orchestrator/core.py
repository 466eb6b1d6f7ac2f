"""Core orchestrator - create a documentation build and wait for it."""
import asyncio
import contextlib
import inspect
import logging
from typing import Any, Callable, Optional

from ..cli_progress import ConsoleReporter, ProgressIndicator
from ..models import ApiEndpoints, Message, UploadConfig, UploadResult
from ..protocols import IAPIClient, IProgressIndicator, IReporter
from ..services.api_client import HTTPAPIClient
from ..services.resolver import RepositoryResolver
from .polling import StatusPoller, parse_body

log = logging.getLogger(__name__)

UploadCallback = Callable[..., Any]


def _describe_exception(exc: BaseException) -> str:
    message = str(exc).strip()
    if message:
        return message
    return f"{type(exc).__name__}: {repr(exc)}"


class ESDocUploader:
    """
    Connects with the ESDoc hosting API to generate a project's documentation.

    Only one upload runs at a time; extra calls made while one is in flight
    are rejected and do not affect it.

    Usage:
        uploader = ESDocUploader()          # repository from ./package.json
        if uploader.can_upload():
            result = await uploader.upload()

        # With an explicit repository and a completion callback
        uploader = ESDocUploader("git@github.com:author/repo.git")
        await uploader.upload(lambda success, url=None: print(success, url))
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        config: Optional[UploadConfig] = None,
        reporter: Optional[IReporter] = None,
        api_client: Optional[IAPIClient] = None,
        indicator: Optional[IProgressIndicator] = None,
    ):
        """
        Initialize the uploader and resolve the repository locator.

        Args:
            url: Repository as `git@github.com:[author]/[repository].git`.
                 When omitted it is read from the package.json
            config: Upload configuration
            reporter: Diagnostic channel (defaults to a console reporter)
            api_client: Pre-built API client; one is opened per upload otherwise
            indicator: Progress animation (defaults to a terminal indicator)
        """
        self._config = config or UploadConfig()
        self._reporter = reporter or ConsoleReporter()
        self._api_client = api_client
        self._indicator = indicator or ProgressIndicator(
            text=self._config.indicator_text,
            interval=self._config.indicator_interval,
        )
        resolver = RepositoryResolver(self._reporter, self._config.manifest_path)
        self._url = resolver.resolve(url)
        self._endpoints = ApiEndpoints(
            host=self._config.host,
            create_path=self._config.create_path,
            finish_file=self._config.finish_file,
        )
        self._uploading = False
        self._callback: Optional[UploadCallback] = None

    @property
    def url(self) -> Optional[str]:
        """The repository locator sent to the API, None if it didn't resolve."""
        return self._url

    @property
    def uploading(self) -> bool:
        return self._uploading

    @property
    def endpoints(self) -> ApiEndpoints:
        return self._endpoints

    def can_upload(self) -> bool:
        return self._url is not None

    async def upload(self, callback: Optional[UploadCallback] = None) -> UploadResult:
        """
        Upload the documentation and wait until the API reports it ready.

        `callback` is invoked exactly once, as `callback(False)` on failure or
        `callback(True, url)` on success. It may be a coroutine function.
        """
        if self._url is None:
            return await self._reject(Message.INVALID_URL, callback)
        if self._uploading:
            return await self._reject(Message.UPLOADING, callback)

        self._callback = callback
        self._uploading = True
        self._indicator.start()

        try:
            async with self._open_client() as client:
                result = await self._create_and_wait(client)
        except Exception as exc:
            log.debug("Upload of %s failed", self._url, exc_info=True)
            result = UploadResult.fail(_describe_exception(exc))
        except asyncio.CancelledError:
            self._callback = None
            self._uploading = False
            self._indicator.stop()
            raise

        await self._settle(result)
        return result

    async def _create_and_wait(self, client: IAPIClient) -> UploadResult:
        log.info("Requesting documentation for %s", self._url)
        response = await client.post_json(self._endpoints.create_path, {"gitUrl": self._url})
        if response.error is not None:
            return UploadResult.fail(_describe_exception(response.error))

        data = parse_body(response.body)
        if data is None or not data.get("success") or not data.get("path"):
            return UploadResult.fail(self._failure_message(data))

        self._endpoints.set_endpoint(data["path"])
        log.info("Documentation build registered at %s", self._endpoints.path)

        poller = StatusPoller(
            client,
            self._endpoints.status_path,
            interval=self._config.poll_interval,
            max_polls=self._config.max_polls,
        )
        outcome = await poller.wait()
        if outcome.exhausted:
            return UploadResult.fail(Message.POLL_LIMIT.value)
        if not outcome.success:
            return UploadResult.fail(outcome.message or Message.UNEXPECTED.value)
        return UploadResult.ok(self._endpoints.url_for(self._endpoints.path))

    @staticmethod
    def _failure_message(data: Optional[dict]) -> str:
        if data and data.get("message"):
            return str(data["message"])
        return Message.UNEXPECTED.value

    def _open_client(self):
        if self._api_client is not None:
            return contextlib.nullcontext(self._api_client)
        return HTTPAPIClient(self._config.host, timeout=self._config.timeout)

    async def _settle(self, result: UploadResult) -> None:
        callback = self._callback
        self._callback = None
        self._uploading = False
        self._indicator.stop()

        if result.success:
            self._reporter.success(f"{Message.SUCCESS.value} {result.url}")
            await _notify(callback, True, result.url)
        else:
            self._reporter.error(result.error or Message.UNEXPECTED.value)
            await _notify(callback, False)

    async def _reject(self, message: Message, callback: Optional[UploadCallback]) -> UploadResult:
        self._reporter.error(message.value)
        await _notify(callback, False)
        return UploadResult.fail(message.value)


async def _notify(callback: Optional[UploadCallback], *args) -> None:
    if callback is None:
        return
    outcome = callback(*args)
    if inspect.isawaitable(outcome):
        await outcome
