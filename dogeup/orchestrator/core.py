"""Core orchestrator - coordinates one upload run."""
import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

from ..errors import ConfigurationError, UploaderError
from ..models import InputParameters, RunState, TemporaryCredential, UploadConfig, UploadOutcome
from ..protocols import ICredentialBroker, IFileCollector, IStorageClientFactory
from ..services.credentials import CredentialBroker
from ..services.storage import StorageClientFactory
from ..services.uploader import ObjectUploader
from ..utils.events import EventEmitter

from .file_collector import FileCollector
from .keys import derive_key
from .models import RunResult

logger = logging.getLogger(__name__)


class UploadOrchestrator:
    """
    Orchestrates a single upload run using injected services.

    The run moves through VALIDATING_INPUT -> FETCHING_CREDENTIAL ->
    BUILDING_CLIENT -> ENUMERATING -> UPLOADING and ends in DONE or FAILED.
    Files are uploaded strictly one after another; the first fatal error
    stops the batch.

    Usage:
        params = InputParameters(access_key, secret_key, "my-bucket", "dist", "assets")
        orchestrator = UploadOrchestrator(params)
        orchestrator.on_file_complete(lambda outcome: print(outcome.object_key))
        result = await orchestrator.run()
        if not result.success:
            print(result.message)
    """

    def __init__(
        self,
        params: InputParameters,
        config: Optional[UploadConfig] = None,
        broker: Optional[ICredentialBroker] = None,
        storage_factory: Optional[IStorageClientFactory] = None,
        collector: Optional[IFileCollector] = None,
        workspace: Optional[Path] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize orchestrator with dependencies.

        Args:
            params: Inputs of this run
            config: Upload configuration
            broker: Credential broker (default: CredentialBroker)
            storage_factory: Storage client factory (default: StorageClientFactory)
            collector: Local file collector (default: FileCollector)
            workspace: Root for relative local paths
            sleep: Awaitable used for retry backoff
        """
        self._params = params
        self._config = config or UploadConfig()
        self._broker = broker or CredentialBroker(self._config)
        self._storage_factory = storage_factory or StorageClientFactory(self._config)
        self._collector = collector or FileCollector()
        self._workspace = workspace
        self._sleep = sleep

        self._events = EventEmitter()
        self._state = RunState.VALIDATING_INPUT
        self._current_index = 0
        self._started = False

    # Event subscription methods
    def on_state(self, callback: Callable[[RunState], None]):
        """Called on every state transition. Receives the new RunState."""
        self._events.on("state", callback)

    def on_file_start(self, callback: Callable[[str, int, int], None]):
        """Called before each put. Receives object key, index and total."""
        self._events.on("file_start", callback)

    def on_file_complete(self, callback: Callable[[UploadOutcome], None]):
        """Called after each successful put. Receives UploadOutcome."""
        self._events.on("file_complete", callback)

    def on_file_retry(self, callback: Callable[[str, int, str], None]):
        """Called before each retry. Receives object key, attempt and reason."""
        self._events.on("file_retry", callback)

    def on_finish(self, callback: Callable[[RunResult], None]):
        """Called once the run is DONE or FAILED. Receives RunResult."""
        self._events.on("finish", callback)

    def on_error(self, callback: Callable[[Exception], None]):
        """Called when the run fails. Receives the error."""
        self._events.on("error", callback)

    # State properties
    @property
    def state(self) -> RunState:
        return self._state

    @property
    def current_index(self) -> int:
        """Index of the file being (or last) uploaded."""
        return self._current_index

    async def run(self) -> RunResult:
        """Execute the run. May be called once per orchestrator."""
        if self._started:
            raise RuntimeError(f"Cannot start run in state: {self._state}")
        self._started = True

        result = RunResult(state=self._state)
        try:
            await self._run(result)
        except UploaderError as e:
            result.error = e
            await self._set_state(RunState.FAILED)
            logger.error("Upload failed: %s", e)
            await self._events.emit("error", e)

        result.state = self._state
        await self._events.emit("finish", result)
        return result

    async def _set_state(self, state: RunState):
        self._state = state
        logger.debug("Run state -> %s", state.value)
        await self._events.emit("state", state)

    async def _run(self, result: RunResult):
        params = self._params

        await self._set_state(RunState.VALIDATING_INPUT)
        upload_path = self._collector.resolve_path(params.local_path, self._workspace)

        await self._set_state(RunState.FETCHING_CREDENTIAL)
        credential = await self._broker.fetch(params.access_key, params.secret_key, params.bucket_name)

        await self._set_state(RunState.BUILDING_CLIENT)
        self._check_destination(credential)
        client_context = self._storage_factory.create(credential.target_endpoint, credential)

        async with client_context as client:
            await self._set_state(RunState.ENUMERATING)
            _, entries = self._collector.collect(upload_path)
            result.total_files = len(entries)
            if not entries:
                logger.info("Directory is empty, nothing to upload")
                await self._set_state(RunState.DONE)
                return

            logger.info("Credential obtained, starting upload of %d file(s)", len(entries))
            uploader = ObjectUploader(client, self._config, self._events, self._sleep)

            await self._set_state(RunState.UPLOADING)
            for index, entry in enumerate(entries):
                self._current_index = index
                key = derive_key(entry.relative_path, params.remote_path_prefix)
                task = uploader.build_task(credential.target_bucket, key, entry.absolute_path)

                await self._events.emit("file_start", key, index, len(entries))
                outcome = await uploader.upload(task)
                result.uploaded.append(outcome)
                logger.info("Uploaded: %s", key)
                await self._events.emit("file_complete", outcome)

        logger.info("All files uploaded successfully")
        await self._set_state(RunState.DONE)

    @staticmethod
    def _check_destination(credential: TemporaryCredential):
        if not credential.has_destination:
            raise ConfigurationError(
                "token endpoint returned no s3Endpoint or s3Bucket, cannot upload"
            )
