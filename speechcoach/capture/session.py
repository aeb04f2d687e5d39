"""Capture session combining a recognition stream and an optional recorder."""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Set, Tuple

from ..errors import AcquisitionError, CaptureError, CaptureErrorKind
from ..models.capture import CaptureResult, RecognitionFragment, SessionState, TranscriptUpdate
from .base import AudioRecorder, RecognitionErrorCode, RecognitionSink, RecognitionStream
from .retry import BoundedRestarter, RestartPolicy
from .transcript import TranscriptAccumulator

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[TranscriptUpdate], None]
ErrorCallback = Callable[[CaptureError], None]

SILENT_ERRORS = {RecognitionErrorCode.NO_SPEECH, RecognitionErrorCode.ABORTED}
FATAL_ERRORS = {
    RecognitionErrorCode.AUDIO_CAPTURE: CaptureErrorKind.NO_DEVICE,
    RecognitionErrorCode.NOT_ALLOWED: CaptureErrorKind.PERMISSION_DENIED,
    RecognitionErrorCode.NETWORK: CaptureErrorKind.NETWORK,
}


class _SessionSink(RecognitionSink):
    """Routes stream events for one session run onto the session's event loop."""

    def __init__(self, session: "CaptureSession", generation: int):
        self.session = session
        self.generation = generation

    def on_result(self, fragments: List[RecognitionFragment]) -> None:
        self.session._dispatch(self.session._handle_result, self.generation, list(fragments))

    def on_end(self) -> None:
        self.session._dispatch(self.session._handle_end, self.generation)

    def on_error(self, code: RecognitionErrorCode, detail: str = "") -> None:
        self.session._dispatch(self.session._handle_error, self.generation, code, detail)

    def on_audio(self, data: bytes) -> None:
        self.session._dispatch(self.session._handle_audio, self.generation, data)


class CaptureSession:
    """Start/stop speech capture that survives the recognizer ending on its own.

    All public methods and callbacks run on one asyncio loop. Platform
    threads hand their events over through the loop, so results are handled
    one at a time in the order the platform emitted them.
    """

    def __init__(
        self,
        recognizer: RecognitionStream,
        recorder: Optional[AudioRecorder] = None,
        on_update: Optional[UpdateCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        restart_policy: Optional[RestartPolicy] = None,
        stop_grace_period: float = 0.5,
        timeslice: float = 1.0,
        skip_recorder: bool = False,
        acquire_timeout: float = 10.0,
    ):
        """Initialize capture session.

        Args:
            recognizer: Speech recognition capability (required)
            recorder: Audio recorder; recording is best-effort
            on_update: Observer for live and final transcript updates
            on_error: Receives a CaptureError when the session is aborted
            restart_policy: Budget and delay for automatic recognizer restarts
            stop_grace_period: Seconds stop() waits for in-flight results and audio
            timeslice: Seconds between recorded audio fragments
            skip_recorder: Do not record audio (platforms where recording
                        and recognition conflict over the microphone)
            acquire_timeout: Upper bound in seconds for acquiring each capability
        """
        if stop_grace_period < 0:
            raise ValueError("stop_grace_period must be >= 0")

        self.recognizer = recognizer
        self.recorder = recorder
        self.on_update = on_update
        self.on_error = on_error
        self.stop_grace_period = stop_grace_period
        self.timeslice = timeslice
        self.skip_recorder = skip_recorder
        self.acquire_timeout = acquire_timeout

        self._restarter = BoundedRestarter(restart_policy or RestartPolicy())
        self._accumulator = TranscriptAccumulator()
        self._audio_fragments: List[bytes] = []
        self._state = SessionState.IDLE
        self._generation = 0
        self._sink: Optional[_SessionSink] = None
        self._recording = False
        self._error_reported = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._restart_tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is SessionState.ACTIVE

    @property
    def restart_attempts(self) -> int:
        return self._restarter.attempts

    @property
    def transcript(self) -> str:
        """Live transcript: finalized text plus the current interim text."""
        return self._accumulator.live_text()

    async def start(self) -> None:
        """Start capturing. Does nothing if a capture is already running."""
        if self._state is not SessionState.IDLE:
            logger.debug(f"start() ignored, session is {self._state.value}")
            return

        self._loop = asyncio.get_running_loop()
        self._generation += 1
        generation = self._generation
        self._accumulator.reset()
        self._audio_fragments = []
        self._restarter.reset()
        self._error_reported = False
        self._recording = False
        self._sink = _SessionSink(self, generation)
        self._transition(SessionState.ACTIVE)
        logger.info(f"Starting capture session #{generation}")

        if self.recorder is not None and not self.skip_recorder:
            await self._start_recorder(generation)
        elif self.recorder is not None:
            logger.info("Skipping audio recorder so recognition keeps the microphone")

        if not self._is_current(generation):
            return

        try:
            await self._acquire(self.recognizer.start, (self._sink,), self._safe_stop_recognizer, generation)
        except AcquisitionError as e:
            logger.error(f"Failed to start recognition: {e}")
            error = CaptureError(e.kind)
        except asyncio.TimeoutError:
            logger.error(f"Recognition did not start within {self.acquire_timeout}s")
            error = CaptureError(CaptureErrorKind.UNKNOWN)
        except Exception as e:
            logger.error(f"Failed to start recognition: {e}", exc_info=True)
            error = CaptureError(CaptureErrorKind.UNKNOWN)
        else:
            if not self._is_current(generation) and not self._newer_run_active(generation):
                # stop() ran while the recognizer was starting
                self._safe_stop_recognizer()
            return

        if self._is_current(generation):
            self._fail(error)

    async def stop(self) -> Optional[CaptureResult]:
        """Stop capturing and return the transcript and recorded audio.

        Returns:
            CaptureResult, or None if no capture was running
        """
        if self._state is not SessionState.ACTIVE:
            return None

        self._transition(SessionState.STOPPING)
        self._restarter.cancel()
        self._release_resources()

        # Let the final result and last audio fragment arrive
        await asyncio.sleep(self.stop_grace_period)

        audio = None
        mime_type = None
        if self._audio_fragments:
            audio = b"".join(self._audio_fragments)
            mime_type = self.recorder.mime_type if self.recorder else None
        text = self._accumulator.final_text()

        self._notify(TranscriptUpdate(transcript=text, is_final=True))
        self._transition(SessionState.IDLE)
        self._sink = None
        logger.info(f"Capture session #{self._generation} stopped: {len(text)} chars, "
                    f"{len(audio) if audio else 0} audio bytes, {self._restarter.attempts} restarts")
        return CaptureResult(text=text, audio=audio, mime_type=mime_type)

    async def _start_recorder(self, generation: int) -> None:
        """Start the recorder if possible. A missing recorder is not an error."""
        sink = self._sink
        try:
            await self._acquire(self.recorder.start, (sink.on_audio, self.timeslice),
                                self._safe_stop_recorder, generation)
        except (AcquisitionError, OSError, asyncio.TimeoutError) as e:
            logger.warning(f"Audio recording unavailable, continuing with transcript only: {e!r}")
            return
        except Exception as e:
            logger.error(f"Audio recorder failed to start: {e}", exc_info=True)
            return

        if self._is_current(generation):
            self._recording = True
        elif not self._newer_run_active(generation):
            self._safe_stop_recorder()

    async def _acquire(self, start: Callable[..., None], args: Tuple[Any, ...],
                       release: Callable[[], None], generation: int) -> None:
        """Run a blocking capability start in the executor, bounded by acquire_timeout.

        A start that outlives the timeout keeps running in its thread. When it
        eventually succeeds, release is called so the capability is not left
        acquired with no owner.

        Raises:
            asyncio.TimeoutError: If start did not finish in time
            Exception: Whatever start raised
        """
        future = self._loop.run_in_executor(None, start, *args)
        try:
            await asyncio.wait_for(asyncio.shield(future), timeout=self.acquire_timeout)
        except asyncio.TimeoutError:
            future.add_done_callback(lambda f: self._release_late_start(f, release, generation))
            raise

    def _release_late_start(self, future: asyncio.Future, release: Callable[[], None], generation: int) -> None:
        if future.cancelled() or future.exception() is not None:
            return
        if self._newer_run_active(generation):
            return
        logger.warning("Capability started after its acquisition timeout, releasing it")
        release()

    def _newer_run_active(self, generation: int) -> bool:
        """Whether a later start() owns the capabilities now."""
        return generation != self._generation and self._state is not SessionState.IDLE

    def _dispatch(self, handler: Callable, *args) -> None:
        """Run handler on the session loop, directly when already on it."""
        loop = self._loop
        if loop is None:
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            handler(*args)
        elif not loop.is_closed():
            loop.call_soon_threadsafe(handler, *args)

    def _accepts(self, generation: int) -> bool:
        """Whether events from this run may still change the transcript."""
        return generation == self._generation and self._state is not SessionState.IDLE

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and self._state is SessionState.ACTIVE

    def _handle_result(self, generation: int, fragments: List[RecognitionFragment]) -> None:
        if not self._accepts(generation):
            return

        interim_parts = []
        for fragment in fragments:
            if fragment.is_final:
                self._accumulator.add_final(fragment.text)
            else:
                interim_parts.append(fragment.text)
        self._accumulator.set_interim("".join(interim_parts))

        self._notify(TranscriptUpdate(transcript=self._accumulator.live_text(), is_final=False))

    def _handle_end(self, generation: int) -> None:
        if not self._is_current(generation):
            return

        scheduled = self._restarter.schedule(lambda: self._restart(generation))
        if scheduled:
            logger.debug(f"Recognition ended, auto-restarting (attempt {self._restarter.attempts})")
        else:
            logger.info(f"Restart budget of {self._restarter.policy.max_attempts} exhausted; "
                        "no further transcript until stop()")

    def _restart(self, generation: int) -> None:
        if not self._is_current(generation):
            return
        task = asyncio.ensure_future(self._restart_recognizer(generation))
        self._restart_tasks.add(task)
        task.add_done_callback(self._restart_tasks.discard)

    async def _restart_recognizer(self, generation: int) -> None:
        """Start the recognizer again off the loop. Failures are logged only."""
        if not self._is_current(generation):
            return
        try:
            await self._acquire(self.recognizer.start, (self._sink,), self._safe_stop_recognizer, generation)
        except asyncio.TimeoutError:
            logger.warning(f"Recognition restart did not complete within {self.acquire_timeout}s")
            return
        except Exception as e:
            logger.warning(f"Failed to restart recognition: {e}")
            return

        if not self._is_current(generation) and not self._newer_run_active(generation):
            # stop() or a fatal error ran while the recognizer was restarting
            self._safe_stop_recognizer()

    def _handle_error(self, generation: int, code: RecognitionErrorCode, detail: str = "") -> None:
        if not self._is_current(generation):
            return

        if code in SILENT_ERRORS:
            logger.debug(f"Recognition reported {code.value}, continuing")
            return

        kind = FATAL_ERRORS.get(code)
        if kind is None:
            logger.warning(f"Continuing after recognition error: {code.value} {detail}")
            return

        logger.error(f"Fatal recognition error: {code.value} {detail}")
        self._fail(CaptureError(kind))

    def _handle_audio(self, generation: int, data: bytes) -> None:
        if self._accepts(generation) and data:
            self._audio_fragments.append(data)

    def _fail(self, error: CaptureError) -> None:
        """Abort the session and report error once."""
        self._restarter.cancel()
        self._release_resources()
        self._transition(SessionState.IDLE)
        self._sink = None
        if self._error_reported:
            return
        self._error_reported = True
        if self.on_error:
            try:
                self.on_error(error)
            except Exception as e:
                logger.error(f"Error in capture error callback: {e}")

    def _notify(self, update: TranscriptUpdate) -> None:
        if not self.on_update:
            return
        try:
            self.on_update(update)
        except Exception as e:
            logger.error(f"Error in transcript update callback: {e}")

    def _release_resources(self) -> None:
        self._safe_stop_recognizer()
        if self._recording:
            self._safe_stop_recorder()
            self._recording = False

    def _safe_stop_recognizer(self) -> None:
        try:
            self.recognizer.stop()
        except Exception as e:
            logger.debug(f"Recognition already stopped: {e}")

    def _safe_stop_recorder(self) -> None:
        try:
            self.recorder.stop()
        except Exception as e:
            logger.warning(f"Error stopping audio recorder: {e}")

    def _transition(self, to_state: SessionState) -> None:
        if self._state is not to_state:
            logger.debug(f"Capture session {self._state.value} -> {to_state.value}")
            self._state = to_state
