"""Google Speech-to-Text streaming recognition stream."""

import logging
from pathlib import Path
from threading import Thread, Event
from typing import Iterator, List, Optional

import pyaudio
from google.cloud import speech
from google.api_core import exceptions as gax_exceptions
from google.oauth2 import service_account

from ..errors import AcquisitionError, CaptureErrorKind
from ..models.capture import RecognitionFragment
from .base import RecognitionErrorCode, RecognitionSink, RecognitionStream

logger = logging.getLogger(__name__)


class GoogleStreamingRecognizer(RecognitionStream):
    """Streams microphone audio to Google and reports interim and final results.

    A streaming call ends on its own when the API's stream duration limit is
    reached, or after the first utterance in single-utterance mode. Either way
    the sink gets on_end() and the owner decides whether to start again.
    """

    def __init__(self,
                 credentials_path: Optional[str] = None,
                 language: str = "en-GB",
                 sample_rate: int = 16000,
                 chunk_size: int = 1600,
                 single_utterance: bool = False,
                 enable_automatic_punctuation: bool = True):
        """Initialize streaming recognizer.

        Args:
            credentials_path: Path to Google Cloud service account JSON file
            language: Language code (e.g., 'en-GB', 'en-US')
            sample_rate: Microphone sample rate in Hz
            chunk_size: Samples per streamed request (1600 = 100ms at 16kHz)
            single_utterance: End the stream after the first utterance
            enable_automatic_punctuation: Enable automatic punctuation
        """
        self.credentials_path = credentials_path
        self.language = language
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.single_utterance = single_utterance
        self.client: Optional[speech.SpeechClient] = None
        self.streaming_config = speech.StreamingRecognitionConfig(
            config=speech.RecognitionConfig(
                encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
                sample_rate_hertz=sample_rate,
                language_code=language,
                enable_automatic_punctuation=enable_automatic_punctuation,
                max_alternatives=1,
            ),
            interim_results=not single_utterance,
            single_utterance=single_utterance,
        )

        self.stop_event = Event()
        self.recognition_thread: Optional[Thread] = None
        self.is_running = False
        self.pyaudio_instance = None
        self.mic_stream = None
        self._mic_failed = False

    def _ensure_client(self) -> None:
        """Create the Speech client on first use."""
        if self.client is not None:
            return
        if not self.credentials_path or not Path(self.credentials_path).exists():
            raise AcquisitionError(
                CaptureErrorKind.PERMISSION_DENIED,
                f"Google credentials file not found: {self.credentials_path}",
            )
        logger.info(f"Loading Google credentials from: {self.credentials_path}")
        credentials = service_account.Credentials.from_service_account_file(self.credentials_path)
        self.client = speech.SpeechClient(credentials=credentials)
        logger.info(f"Using Google Cloud project: {credentials.project_id}")

    def _open_microphone(self) -> None:
        try:
            self.pyaudio_instance = pyaudio.PyAudio()
        except OSError as e:
            raise AcquisitionError(CaptureErrorKind.UNSUPPORTED, f"PyAudio could not be initialized: {e}") from e

        try:
            self.mic_stream = self.pyaudio_instance.open(
                format=pyaudio.paInt16,
                channels=1,
                rate=self.sample_rate,
                input=True,
                frames_per_buffer=self.chunk_size,
            )
        except OSError as e:
            self._close_microphone()
            raise AcquisitionError(CaptureErrorKind.NO_DEVICE, f"Could not open microphone: {e}") from e

    def _close_microphone(self) -> None:
        if self.mic_stream is not None:
            try:
                self.mic_stream.stop_stream()
                self.mic_stream.close()
            except OSError as e:
                logger.debug(f"Error closing microphone stream: {e}")
            self.mic_stream = None
        if self.pyaudio_instance is not None:
            self.pyaudio_instance.terminate()
            self.pyaudio_instance = None

    def start(self, sink: RecognitionSink) -> None:
        """Open the microphone and begin a streaming recognition call."""
        if self.is_running:
            logger.debug("Recognition already started")
            return

        self._ensure_client()
        self._open_microphone()

        self.stop_event.clear()
        self._mic_failed = False
        self.is_running = True
        self.recognition_thread = Thread(target=self._recognize, args=(sink,), daemon=True)
        self.recognition_thread.name = "GoogleStreamingThread"
        self.recognition_thread.start()
        logger.debug(f"Streaming recognition started (language={self.language}, "
                     f"single_utterance={self.single_utterance})")

    def stop(self) -> None:
        """Stop sending audio; the API then returns its last final result."""
        self.stop_event.set()

    def _requests(self) -> Iterator[speech.StreamingRecognizeRequest]:
        while not self.stop_event.is_set():
            try:
                chunk = self.mic_stream.read(self.chunk_size, exception_on_overflow=False)
            except OSError as e:
                logger.error(f"Microphone read failed: {e}")
                self._mic_failed = True
                return
            yield speech.StreamingRecognizeRequest(audio_content=chunk)

    def _recognize(self, sink: RecognitionSink) -> None:
        """Worker thread: run one streaming call and forward its events."""
        got_results = False
        error: Optional[RecognitionErrorCode] = None
        detail = ""
        try:
            responses = self.client.streaming_recognize(
                config=self.streaming_config, requests=self._requests()
            )
            for response in responses:
                if (response.speech_event_type
                        == speech.StreamingRecognizeResponse.SpeechEventType.END_OF_SINGLE_UTTERANCE):
                    self.stop_event.set()
                fragments = self._extract_fragments(response)
                if fragments:
                    got_results = True
                    sink.on_result(fragments)
        except (gax_exceptions.PermissionDenied, gax_exceptions.Unauthenticated) as e:
            error, detail = RecognitionErrorCode.NOT_ALLOWED, str(e)
        except gax_exceptions.ServiceUnavailable as e:
            error, detail = RecognitionErrorCode.NETWORK, str(e)
        except (gax_exceptions.DeadlineExceeded, gax_exceptions.OutOfRange) as e:
            logger.info(f"Streaming recognition reached its time limit: {e}")
        except gax_exceptions.Cancelled as e:
            error, detail = RecognitionErrorCode.ABORTED, str(e)
        except gax_exceptions.GoogleAPICallError as e:
            logger.error(f"Google STT streaming error: {e}")
            error, detail = RecognitionErrorCode.OTHER, str(e)
        finally:
            self._close_microphone()
            self.is_running = False

        if self._mic_failed:
            error, detail = RecognitionErrorCode.AUDIO_CAPTURE, "microphone read failed"
        elif error is None and not got_results and not self.stop_event.is_set():
            error = RecognitionErrorCode.NO_SPEECH

        if error is not None:
            sink.on_error(error, detail)
        sink.on_end()

    @staticmethod
    def _extract_fragments(response: speech.StreamingRecognizeResponse) -> List[RecognitionFragment]:
        fragments = []
        for result in response.results:
            if not result.alternatives:
                continue
            alternative = result.alternatives[0]
            fragments.append(RecognitionFragment(
                text=alternative.transcript,
                is_final=result.is_final,
                confidence=alternative.confidence if result.is_final else None,
            ))
        return fragments
