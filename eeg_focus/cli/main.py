"""
Main CLI entry point for EEG Focus

This module provides the command-line interface and the real-time processing
loop: synthetic stream -> sample buffer -> rate stabilizer -> live analysis
and per-stage summaries.
"""

import argparse
import json
import logging
import signal
import sys
import threading
import time
from collections import deque
from typing import List, Optional

import numpy as np

from ..core.config import SAMPLING_RATE, STATUS_INTERVAL_SEC, STAGE_DURATION_SEC, AnalysisConfig, load_config
from ..core.exceptions import EEGFocusError
from ..acquisition.sample_buffer import SampleBuffer
from ..acquisition.stabilizer import RateStabilizer
from ..acquisition.sources import FakeEEGSource
from ..detection.persistence import PersistenceMonitor
from ..session.stages import StageRecorder
from ..session.records import StageSummary, analyze_samples, summarize_stage, build_session_payload
from ..utils.logging_setup import setup_logging


def create_monitor(config: AnalysisConfig) -> PersistenceMonitor:
    return PersistenceMonitor(
        window_sec=config.persistence_window_sec,
        min_readings=config.persistence_min_readings,
        low_beta_threshold=config.low_beta_threshold,
        alert_fraction=config.low_beta_alert_fraction,
    )


def run_realtime_processing(user_id: str, config: AnalysisConfig, duration: Optional[float] = None,
                            stage_sec: float = STAGE_DURATION_SEC,
                            seed: Optional[int] = None) -> List[StageSummary]:
    """
    Main real-time processing loop

    Streams synthetic samples through the buffer and stabilizer, prints live
    metrics for the trailing analysis window, and walks through the recording
    stages. Returns the summaries of the stages recorded.
    """
    logging.info("Starting real-time processing...")

    # Initialize components
    buffer = SampleBuffer(config.buffer_capacity, config.low_watermark, config.high_watermark)
    stabilizer = RateStabilizer(buffer, config.sampling_rate, config.history_size)
    recorder = StageRecorder()
    monitor = create_monitor(config)

    live_window = deque(maxlen=int(config.analysis_window_sec * config.sampling_rate))
    stabilizer.add_listener(live_window.append)
    stabilizer.add_listener(recorder.add)

    source = FakeEEGSource(config.sampling_rate, seed=seed)

    # Graceful shutdown handler
    shutdown_event = threading.Event()
    def signal_handler(signum, frame):
        logging.info("Shutdown signal received")
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    source_thread = threading.Thread(target=source.stream_into, args=(buffer, shutdown_event),
                                     name="fake-source", daemon=True)
    start_time = time.time()
    summaries = []

    try:
        source_thread.start()
        stabilizer.start()
        recorder.begin(recorder.next_stage())
        stage_started = start_time

        logging.info("Real-time processing started. Press Ctrl+C to stop.")

        while not shutdown_event.wait(STATUS_INTERVAL_SEC):
            current_time = time.time()

            try:
                analysis = analyze_samples(list(live_window), config, monitor, user_id, current_time)
            except EEGFocusError as e:
                logging.error(f"Analysis failed: {e}")
                continue

            stage_name = recorder.current_stage.value if recorder.current_stage else "-"
            if analysis.ok:
                bands = analysis.band_powers
                print(f"Stage: {stage_name:>20} | Theta: {bands.theta:.4f} | Alpha: {bands.alpha:.4f} | "
                      f"Beta: {bands.beta:.4f} | Gamma: {bands.gamma:.4f} | Focus: {analysis.focus_level:5.1f} | "
                      f"Low beta: {analysis.low_beta_warning} | Buffer: {stabilizer.buffer_health()}")
            else:
                print(f"Stage: {stage_name:>20} | {analysis.error} | Buffer: {stabilizer.buffer_health()}")

            # Advance through the protocol stages
            if current_time - stage_started >= stage_sec:
                next_stage = recorder.next_stage()
                if next_stage is None:
                    logging.info("All stages recorded")
                    break
                recorder.begin(next_stage)
                stage_started = current_time

            if duration is not None and current_time - start_time >= duration:
                break

    finally:
        shutdown_event.set()
        if recorder.is_recording:
            recorder.finish()
        stabilizer.stop()
        source_thread.join(timeout=2.0)

        for window in recorder.history:
            summaries.append(summarize_stage(window, monitor, user_id, config))
        logging.info("Real-time processing stopped")

    return summaries


def analyze_file(path: str, user_id: str, config: AnalysisConfig) -> dict:
    """
    Analyze a CSV of sample values (first column)

    Returns:
        dict: window analysis record
    """
    values = np.loadtxt(path, delimiter=",", usecols=0, ndmin=1)
    logging.info(f"Loaded {len(values)} samples from {path}")
    analysis = analyze_samples(values, config, create_monitor(config), user_id)
    record = analysis.to_dict()
    record["user_id"] = user_id
    return record


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        description="EEG Focus - Stream stabilization and focus analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the live pipeline on synthetic data for one minute
  python -m eeg_focus --run --user alice --duration 60

  # Analyze a recorded window
  python -m eeg_focus --analyze data/window.csv --user alice
        """
    )

    # Mode selection (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument("--run", action="store_true",
                           help="Run real-time processing on a synthetic stream")
    mode_group.add_argument("--analyze", metavar="CSV",
                           help="Analyze the sample values in a CSV file")

    # User and file options
    parser.add_argument("--user", required=True,
                       help="Subject ID for persistence tracking")
    parser.add_argument("--config",
                       help="JSON file overriding analysis parameters")
    parser.add_argument("--output",
                       help="Write the session payload (JSON) to this file")

    # Processing parameters
    parser.add_argument("--fs", type=float, default=None,
                       help=f"Sampling frequency (default: {SAMPLING_RATE})")
    parser.add_argument("--duration", type=float, default=None,
                       help="Stop the run after this many seconds (default: all stages)")
    parser.add_argument("--stage-sec", type=float, default=STAGE_DURATION_SEC,
                       help=f"Duration of each recording stage (default: {STAGE_DURATION_SEC})")
    parser.add_argument("--seed", type=int, default=None,
                       help="Random seed for the synthetic stream")

    # Logging
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Enable verbose logging")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        config = load_config(args.config) if args.config else AnalysisConfig()
        if args.fs is not None:
            config.sampling_rate = args.fs
        config.validate()

        if args.analyze:
            record = analyze_file(args.analyze, args.user, config)
            print(json.dumps(record, indent=2))
            return 0 if record["error"] is None else 1

        print("=" * 60)
        print("EEG Focus - Real-time Stream Analysis")
        print("=" * 60)

        summaries = run_realtime_processing(args.user, config, args.duration,
                                            args.stage_sec, args.seed)
        for summary in summaries:
            print(json.dumps(summary.to_dict(include_samples=False), indent=2))

        if args.output:
            started_at = int(time.time() * 1000)
            if summaries and summaries[0].samples:
                started_at = summaries[0].samples[0].timestamp
            payload = build_session_payload(args.user, started_at, summaries)
            with open(args.output, "w", encoding="utf-8") as f:
                json.dump(payload, f)
            logging.info(f"Session payload written: {args.output}")
        return 0

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 0
    except (EEGFocusError, OSError, ValueError) as e:
        logging.error(f"{e}")
        return 1
    except Exception as e:
        logging.error(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
