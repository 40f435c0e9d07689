"""
Analysis records for the storage collaborator

This module runs the full analysis chain (spectrum, band powers, focus
score, persistence alarm) over a sample window and formats the results as
plain dictionaries. Every record either carries valid numbers or an explicit
error, so consumers can branch on a single success flag.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..core.config import AnalysisConfig
from ..core.data_types import BandPowers, StabilizedSample
from ..detection.focus import FocusNormalizer
from ..detection.persistence import PersistenceMonitor
from ..processing.features import BandPowerExtractor
from ..processing.spectral import SampleLike, SpectralEngine, sample_values
from .stages import StageWindow, instructions_for


@dataclass
class WindowAnalysis:
    """Derived metrics of one sample window"""
    n_samples: int
    band_powers: BandPowers = field(default_factory=BandPowers)
    focus_level: float = 0.0
    low_beta_warning: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def beta_power(self) -> float:
        return self.band_powers.beta

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_samples": self.n_samples,
            "band_powers": self.band_powers.to_dict(),
            "beta_power": float(self.beta_power),
            "focus_level": float(self.focus_level),
            "low_beta_warning": bool(self.low_beta_warning),
            "error": self.error,
        }


def analyze_samples(samples: Sequence[SampleLike], config: Optional[AnalysisConfig] = None,
                    monitor: Optional[PersistenceMonitor] = None,
                    subject_id: Optional[str] = None, now: Optional[float] = None,
                    exclude_interpolated: bool = False) -> WindowAnalysis:
    """
    Run the analysis chain over a window

    Args:
        samples: Window values or sample objects
        config: Analysis parameters (defaults to AnalysisConfig())
        monitor: Persistence monitor to feed with the window's beta power
        subject_id: Subject the window belongs to (required with monitor)
        now: Reading time for the monitor in seconds
        exclude_interpolated: Drop held samples before the transform

    Returns:
        WindowAnalysis: metrics, or zero metrics with error set when the
        window is too short. The monitor is not fed in that case.
    """
    config = config or AnalysisConfig()
    values = sample_values(samples, exclude_interpolated)

    engine = SpectralEngine(config.sampling_rate, config.min_samples)
    spectrum = engine.analyze(values)
    if not spectrum.ok:
        return WindowAnalysis(n_samples=len(values), error=spectrum.error)

    powers = BandPowerExtractor(config.passband, config.freq_bands).extract(spectrum)
    focus = FocusNormalizer(config.min_beta, config.max_beta).score(powers.beta)

    warning = False
    if monitor is not None:
        if subject_id is None:
            raise ValueError("subject_id is required when a persistence monitor is given")
        warning = monitor.check(subject_id, powers.beta, now)

    return WindowAnalysis(
        n_samples=len(values),
        band_powers=powers,
        focus_level=focus,
        low_beta_warning=warning,
    )


@dataclass
class StageSummary:
    """Finalized stage with its derived metrics"""
    stage_name: str
    stage_order: int
    duration_seconds: int
    instructions: str
    analysis: WindowAnalysis
    samples: List[StabilizedSample] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.analysis.ok

    def to_dict(self, include_samples: bool = True) -> Dict[str, Any]:
        record = {
            "stageName": self.stage_name,
            "stageOrder": self.stage_order,
            "durationSeconds": self.duration_seconds,
            "instructions": self.instructions,
            "result": self.analysis.to_dict(),
        }
        if include_samples:
            record["eegData"] = [
                {"value": s.value, "timestamp": s.timestamp, "stage": self.stage_name,
                 "interpolated": s.interpolated}
                for s in self.samples
            ]
        return record


def summarize_stage(window: StageWindow, monitor: Optional[PersistenceMonitor] = None,
                    subject_id: Optional[str] = None,
                    config: Optional[AnalysisConfig] = None,
                    exclude_interpolated: bool = False) -> StageSummary:
    """
    Analyze a finished stage

    Args:
        window: Finished stage from a StageRecorder
        monitor: Persistence monitor for the low-beta warning
        subject_id: Subject the stage belongs to
        config: Analysis parameters

    Returns:
        StageSummary: record ready for storage
    """
    analysis = analyze_samples(window.samples, config, monitor, subject_id,
                               exclude_interpolated=exclude_interpolated)
    if not analysis.ok:
        logging.warning(f"Stage {window.stage.value}: {analysis.error}")

    return StageSummary(
        stage_name=window.stage.value,
        stage_order=window.stage_order,
        duration_seconds=window.duration_seconds,
        instructions=instructions_for(window.stage.value),
        analysis=analysis,
        samples=list(window.samples),
    )


def process_eeg_data(user_id: str, samples: Sequence[SampleLike],
                     config: Optional[AnalysisConfig] = None,
                     stage: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the raw spectrum payload of a window

    Args:
        user_id: Subject identifier
        samples: Window values or sample objects
        config: Analysis parameters
        stage: Stage name the window belongs to

    Returns:
        dict: {"user_id", "eeg_data": {...}} or {"error": message}
    """
    config = config or AnalysisConfig()
    values = sample_values(samples)

    spectrum = SpectralEngine(config.sampling_rate, config.min_samples).analyze(values)
    if not spectrum.ok:
        return {"error": spectrum.error}

    return {
        "user_id": user_id,
        "eeg_data": {
            "raw_samples": values.tolist(),
            "frequencies": spectrum.frequencies.tolist(),
            "psd": spectrum.power.tolist(),
            "processing_timestamp": time.time(),
            "stage": stage,
        },
    }


def build_session_payload(participant_name: str, started_at_ms: int,
                          summaries: Sequence[StageSummary], notes: str = "") -> Dict[str, Any]:
    """
    Assemble the session record handed to storage

    Args:
        participant_name: Participant display name
        started_at_ms: Session start time (ms)
        summaries: Stage summaries in stage order

    Returns:
        dict: Session payload
    """
    if not participant_name:
        raise ValueError("participant_name is required")

    return {
        "participantName": participant_name,
        "startedAt": int(started_at_ms),
        "notes": notes or "",
        "stages": [s.to_dict() for s in sorted(summaries, key=lambda s: s.stage_order)],
    }
