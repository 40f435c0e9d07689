"""
Session stages and analysis records

This module handles stage accumulation during a recording session and the
structured records handed to storage.
"""

from .stages import Stage, STAGE_ORDER, STAGE_INSTRUCTIONS, StageWindow, StageRecorder
from .records import (WindowAnalysis, StageSummary, analyze_samples, summarize_stage,
                      process_eeg_data, build_session_payload)

__all__ = [
    'Stage', 'STAGE_ORDER', 'STAGE_INSTRUCTIONS', 'StageWindow', 'StageRecorder',
    'WindowAnalysis', 'StageSummary', 'analyze_samples', 'summarize_stage',
    'process_eeg_data', 'build_session_payload',
]
