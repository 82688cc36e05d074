"""
Upload orchestrator: one résumé upload from file selection to commit.

States: idle -> parsing -> success | error. success -> idle via commit or discard,
error -> idle via retry. Only one parse is in flight per session.
"""

import asyncio
from contextlib import suppress
from enum import Enum
from typing import Optional, Sequence

from config import PipelineConfig
from cv_pipeline.cv_parser import ResumeParsingPipeline, check_upload
from cv_pipeline.errors import ResumeParseError
from cv_pipeline.retry import CancellationToken
from schemas.candidate_record import CandidateRecord
from schemas.document import UploadedDocument
from schemas.outcome import ErrorKind, ParseFailure, ParseSuccess
from services.candidate_store import CandidateStore, CandidateStoreError
from services.error_messages import UserMessage, user_message_for
from utils.logger import get_logger

logger = get_logger(__name__)


class UploadState(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    SUCCESS = "success"
    ERROR = "error"


class SessionStateError(RuntimeError):
    """Action not allowed in the current state."""


class CosmeticProgress:
    """
    Presentation-only progress percentage. Moves forward in fixed steps, stays below
    `cap` until the pipeline resolves, then snaps to 100. Unrelated to real progress.
    """

    def __init__(self, step: int = 10, cap: int = 90) -> None:
        self.step = step
        self.cap = cap
        self.value = 0

    def tick(self) -> int:
        self.value = min(self.value + self.step, self.cap)
        return self.value

    def complete(self) -> None:
        self.value = 100

    def reset(self) -> None:
        self.value = 0


class UploadSession:
    """Drives a single upload; the UI reads `state`, `progress`, `result` and `error`."""

    def __init__(
        self,
        pipeline: ResumeParsingPipeline,
        store: CandidateStore,
        config: Optional[PipelineConfig] = None,
        progress_interval: float = 0.1,
    ) -> None:
        self.pipeline = pipeline
        self.store = store
        self.config = config or pipeline.config
        self.progress = CosmeticProgress()
        self.progress_interval = progress_interval
        self.state = UploadState.IDLE
        self.document: Optional[UploadedDocument] = None
        self.result: Optional[ParseSuccess] = None
        self.error: Optional[UserMessage] = None
        self.error_kind: Optional[ErrorKind] = None
        self.saved_candidate: Optional[dict] = None
        self._cancel_token: Optional[CancellationToken] = None
        self._committing = False

    @property
    def filename(self) -> str:
        return self.document.filename if self.document else ""

    def _reset(self) -> None:
        self.state = UploadState.IDLE
        self.document = None
        self.result = None
        self.error = None
        self.error_kind = None
        self._cancel_token = None
        self._committing = False
        self.progress.reset()

    def _fail(self, kind: ErrorKind) -> None:
        self.state = UploadState.ERROR
        self.error_kind = kind
        self.error = user_message_for(kind)
        self.result = None

    def select_files(self, files: Sequence[UploadedDocument]) -> bool:
        """
        Accept a drop/selection. Only the first file is taken, the rest are rejected;
        size and type are checked before any extraction. Returns True when parsing may start.
        """
        if self.state != UploadState.IDLE:
            logger.info("Ignoring file selection while %s", self.state.value)
            return False
        if not files:
            return False
        if len(files) > 1:
            logger.info("Rejected %s extra files; only one résumé per upload", len(files) - 1)
        document = files[0]
        try:
            check_upload(document, self.config)
        except ResumeParseError as e:
            self.document = document
            self._fail(e.kind)
            return False
        self.document = document
        self.state = UploadState.PARSING
        self._cancel_token = CancellationToken()
        self.progress.reset()
        return True

    async def _tick_progress(self) -> None:
        while True:
            await asyncio.sleep(self.progress_interval)
            self.progress.tick()

    async def run(self) -> Optional[ParseSuccess]:
        """Parse the selected document; ends in success or error."""
        if self.state != UploadState.PARSING or self.document is None:
            raise SessionStateError(f"Cannot parse in state {self.state.value}")
        ticker = asyncio.ensure_future(self._tick_progress())
        try:
            outcome = await self.pipeline.parse(self.document, cancel_token=self._cancel_token)
        finally:
            ticker.cancel()
            with suppress(asyncio.CancelledError):
                await ticker
            self.progress.complete()

        if isinstance(outcome, ParseFailure):
            self._fail(outcome.reason)
            return None
        self.state = UploadState.SUCCESS
        self.result = outcome
        return outcome

    def parse_sync(self) -> Optional[ParseSuccess]:
        """Run `run()` from a synchronous context (e.g. Streamlit)."""
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(self.run())
        finally:
            loop.close()

    def cancel(self) -> None:
        """Abort the in-flight parse; the pending run() resolves with a cancelled error."""
        if self.state == UploadState.PARSING and self._cancel_token is not None:
            self._cancel_token.cancel()

    async def commit(self) -> dict:
        """Hand the parsed candidate to the candidate store; resets to idle when stored."""
        if self.state != UploadState.SUCCESS or self.result is None:
            raise SessionStateError(f"Nothing to save in state {self.state.value}")
        if self._committing:
            raise SessionStateError("Save already in progress")
        self._committing = True
        record = CandidateRecord.from_candidate(self.result.candidate)
        try:
            stored = await self.store.create_candidate(record)
        except CandidateStoreError:
            logger.warning("Saving candidate failed; keeping parsed result for another try")
            raise
        finally:
            self._committing = False
        self.saved_candidate = stored
        self._reset()
        return stored

    def commit_sync(self) -> dict:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(self.commit())
        finally:
            loop.close()

    def discard(self) -> None:
        if self.state != UploadState.SUCCESS:
            raise SessionStateError(f"Nothing to discard in state {self.state.value}")
        self._reset()

    def retry(self) -> None:
        """Full reset after an error; the next selection starts from scratch."""
        if self.state != UploadState.ERROR:
            raise SessionStateError(f"Cannot retry in state {self.state.value}")
        self._reset()
