"""Main application entry point for SpeechCoach."""

import sys
import asyncio
import argparse
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from .analysis import GeminiClient, SpeechAnalyzer
from .capture import CaptureSession, RestartPolicy, TranscriptPublisher
from .config import SpeechCoachConfig
from .errors import SpeechCoachError
from .models.capture import CaptureResult
from .scoring import MAX_TEXT_LENGTH, score
from .sentences import SentenceGenerator
from .ui import PracticeView

logger = logging.getLogger(__name__)

DEFAULT_SENTENCE = ("We need to migrate the legacy database to PostgreSQL before the Q2 deadline "
                    "to ensure better performance.")


class PracticeRunner:
    """Wires configuration, capture, scoring and analysis for one practice attempt."""

    def __init__(self, config: SpeechCoachConfig, console: Optional[Console] = None):
        self.config = config
        self.console = console or Console()

    def create_session(self, on_error) -> CaptureSession:
        """Build a capture session from configuration."""
        from .capture.google_stream import GoogleStreamingRecognizer
        from .capture.recorder import PyAudioRecorder

        sample_rate = self.config.get('capture.sample_rate', 16000)
        single_utterance = self.config.get('capture.single_utterance', False)

        recognizer = GoogleStreamingRecognizer(
            credentials_path=self.config.get_google_credentials_path(),
            language=self.config.get('capture.language', 'en-GB'),
            sample_rate=sample_rate,
            single_utterance=single_utterance,
            enable_automatic_punctuation=self.config.get('google_cloud.enable_automatic_punctuation', True),
        )
        recorder = PyAudioRecorder(sample_rate=sample_rate)

        platform_policy = RestartPolicy.for_platform(
            single_utterance,
            max_attempts=self.config.get('capture.restart.max_attempts', 50),
        )
        policy = RestartPolicy(
            max_attempts=platform_policy.max_attempts,
            delay=self.config.get('capture.restart.delay_seconds', platform_policy.delay),
        )
        logger.info(f"Capture settings: {sample_rate}Hz, single_utterance={single_utterance}, "
                    f"restart budget={policy.max_attempts}, delay={policy.delay}s")

        return CaptureSession(
            recognizer=recognizer,
            recorder=recorder,
            on_update=TranscriptPublisher().get_callback(),
            on_error=on_error,
            restart_policy=policy,
            stop_grace_period=self.config.get('capture.stop_grace_period_seconds', 0.5),
            timeslice=self.config.get('capture.timeslice_seconds', 1.0),
            skip_recorder=self.config.get('capture.skip_recorder', False),
        )

    async def practice(self, sentence: str, duration: float, analyze: bool,
                       content_type: str = "business", category: Optional[str] = None) -> int:
        """Record one attempt at sentence and report its score.

        Returns:
            Process exit code
        """
        errors = []
        failed = asyncio.Event()

        def on_error(error) -> None:
            errors.append(error)
            failed.set()

        view = PracticeView(sentence, console=self.console)
        session = self.create_session(on_error=on_error)

        with view:
            await session.start()
            if session.is_active:
                try:
                    # A fatal capture error ends the attempt early
                    await asyncio.wait_for(failed.wait(), timeout=duration)
                except asyncio.TimeoutError:
                    pass
                finally:
                    result: Optional[CaptureResult] = await session.stop()
            else:
                result = None

        if errors:
            view.show_error(errors[0])
            return 1
        if result is None:
            return 1

        view.show_score(score(sentence, result.text), result.text)

        if analyze:
            analyzer = SpeechAnalyzer(
                GeminiClient(self.config.get_gemini_api_key(),
                             model=self.config.get('gemini.model', 'gemini-2.5-flash')),
                sample_rate=self.config.get('capture.sample_rate', 16000),
            )
            analysis = await analyzer.analyze(
                result.text, sentence, result.audio, result.mime_type,
                content_type=content_type, category=category,
            )
            view.show_analysis(analysis)
        return 0

    async def sentences(self, count: int) -> int:
        """Generate and print today's practice sentences."""
        client = GeminiClient(self.config.get_gemini_api_key(),
                              model=self.config.get('gemini.model', 'gemini-2.5-flash'))
        entries = await SentenceGenerator(client).generate(count)

        table = Table(title=f"Practice sentences ({len(entries)})")
        table.add_column("#", justify="right")
        table.add_column("Category")
        table.add_column("Sentence")
        table.add_column("Tips")
        for i, entry in enumerate(entries, 1):
            table.add_row(str(i), entry.category, entry.sentence, entry.tips)
        self.console.print(table)
        return 0

    def speak(self, sentence: str) -> None:
        """Read the sentence aloud and wait for playback to finish."""
        from .playback import GTTS_VOICES, GTTSSynthesizer, SpeechPlayer, select_best_voice

        slow = self.config.get('playback.slow', False)
        tld = self.config.get('playback.tld')
        if tld:
            synthesizer = GTTSSynthesizer(lang=self.config.get('playback.lang', 'en'), tld=tld, slow=slow)
        else:
            voice = select_best_voice(GTTS_VOICES)
            logger.info(f"Reading aloud with voice: {voice.name} ({voice.lang})")
            synthesizer = GTTSSynthesizer.for_voice(voice, slow=slow)

        player = SpeechPlayer(synthesizer)
        handle = player.speak(sentence)
        try:
            handle.wait(timeout=60.0)
        finally:
            player.stop()


def setup_logging(config: SpeechCoachConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get('logging.file_path', 'data/logs/speechcoach.log')
    console_output = config.get('logging.console_output', True)

    # Create logs directory if it doesn't exist
    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - only if enabled in config
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)  # Only show warnings and above on console
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("SpeechCoach starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SpeechCoach - practice reading sentences aloud and get scored",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: speechcoach.yaml if present)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: logging.level from config, else INFO)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="SpeechCoach v0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    score_parser = subparsers.add_parser("score", help="Score a transcript against a reference sentence")
    score_parser.add_argument("reference", help="Sentence that was meant to be read")
    score_parser.add_argument("spoken", help="What was actually said")

    practice_parser = subparsers.add_parser("practice", help="Record yourself reading a sentence")
    practice_parser.add_argument("--sentence", type=str, default=DEFAULT_SENTENCE,
                                 help="Sentence to practice")
    practice_parser.add_argument("--duration", type=float, default=10.0,
                                 help="Recording duration in seconds (default: 10)")
    practice_parser.add_argument("--analyze", action="store_true",
                                 help="Also ask Gemini for a delivery score and feedback")
    practice_parser.add_argument("--speak", action="store_true",
                                 help="Read the sentence aloud before recording")
    practice_parser.add_argument("--content-type", choices=["business", "custom"], default="business")
    practice_parser.add_argument("--category", type=str,
                                 help="Custom content category (presentation, meeting, speech, ...)")

    sentences_parser = subparsers.add_parser("sentences", help="Generate today's practice sentences")
    sentences_parser.add_argument("--count", type=int, default=10,
                                  help="Number of sentences (default: 10)")
    return parser


def main(argv=None) -> None:
    """Main entry point for SpeechCoach."""
    args = build_parser().parse_args(argv)
    console = Console()

    try:
        config = SpeechCoachConfig(args.config)
        setup_logging(config, args.log_level or config.get('logging.level', 'INFO'))

        if args.command == "score":
            result = score(args.reference[:MAX_TEXT_LENGTH], args.spoken[:MAX_TEXT_LENGTH])
            console.print(f"Accuracy: {result.score}% (edit distance {result.distance})")
            sys.exit(0)

        runner = PracticeRunner(config, console)
        if args.command == "practice":
            sentence = args.sentence[:MAX_TEXT_LENGTH]
            if args.speak:
                runner.speak(sentence)
            code = asyncio.run(runner.practice(
                sentence, args.duration, args.analyze, args.content_type, args.category,
            ))
        else:
            code = asyncio.run(runner.sentences(args.count))
        sys.exit(code)
    except KeyboardInterrupt:
        console.print("\n👋 Goodbye!")
    except (SpeechCoachError, ValueError, FileNotFoundError) as e:
        console.print(f"❌ Error: {e}", style="bold red")
        logger.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
