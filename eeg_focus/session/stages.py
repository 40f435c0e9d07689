"""
Recording stages

A session walks a participant through a fixed sequence of stages. The
StageRecorder listens to the rate stabilizer and accumulates the stabilized
samples of the active stage into a StageWindow when the stage finishes.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..core.data_types import StabilizedSample


class Stage(Enum):
    BASELINE_RELAXED = "1_Baseline_Relaxed"
    COGNITIVE_WARMUP = "2_Cognitive_Warmup"
    FOCUSED_TASK = "3_Focused_Task"
    POST_TASK_REST = "4_Post_Task_Rest"


STAGE_ORDER = [
    Stage.BASELINE_RELAXED,
    Stage.COGNITIVE_WARMUP,
    Stage.FOCUSED_TASK,
    Stage.POST_TASK_REST,
]

STAGE_INSTRUCTIONS = {
    Stage.BASELINE_RELAXED: "Close your eyes, relax, and listen to calming music or nature sounds.",
    Stage.COGNITIVE_WARMUP: "Do simple tasks like basic arithmetic or identify colors. Nothing too hard.",
    Stage.FOCUSED_TASK: "Perform a focused task (e.g., mental math, reading, or debugging). Stay concentrated.",
    Stage.POST_TASK_REST: "Return to a relaxed state. Breathe deeply, eyes closed, no task.",
}


def instructions_for(stage_name: str) -> str:
    """Participant instructions for a stage name, with a generic fallback"""
    try:
        return STAGE_INSTRUCTIONS[Stage(stage_name)]
    except ValueError:
        return f"Instructions for {stage_name}"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class StageWindow:
    """Finalized samples of one stage"""
    stage: Stage
    stage_order: int
    start_time: int           # ms
    end_time: int             # ms
    samples: List[StabilizedSample] = field(default_factory=list)

    @property
    def duration_seconds(self) -> int:
        return int(round((self.end_time - self.start_time) / 1000))

    @property
    def values(self) -> List[float]:
        return [s.value for s in self.samples]


class StageRecorder:
    """
    Accumulate stabilized samples per stage

    Register add() as a RateStabilizer listener. Samples emitted while no
    stage is active are ignored.
    """

    def __init__(self):
        self.history: List[StageWindow] = []
        self.current_stage: Optional[Stage] = None
        self._stage_start: Optional[int] = None
        self._samples: List[StabilizedSample] = []
        self._stage_order = 0
        self._lock = threading.Lock()

    @property
    def is_recording(self) -> bool:
        return self.current_stage is not None

    def begin(self, stage: Stage, now_ms: Optional[int] = None) -> Optional[StageWindow]:
        """
        Start recording a stage, finishing the active one first

        Returns:
            StageWindow: the window of the stage that was active, if any
        """
        finished = self.finish(now_ms) if self.is_recording else None
        with self._lock:
            self.current_stage = stage
            self._stage_start = now_ms if now_ms is not None else _now_ms()
            self._samples = []
            self._stage_order += 1
        logging.info(f"Stage {self._stage_order} started: {stage.value}")
        return finished

    def add(self, sample: StabilizedSample):
        with self._lock:
            if self.current_stage is not None:
                self._samples.append(sample)

    def finish(self, now_ms: Optional[int] = None) -> Optional[StageWindow]:
        """Close the active stage and append its window to history"""
        with self._lock:
            if self.current_stage is None:
                logging.warning("No active stage to finish")
                return None

            window = StageWindow(
                stage=self.current_stage,
                stage_order=self._stage_order,
                start_time=self._stage_start,
                end_time=now_ms if now_ms is not None else _now_ms(),
                samples=self._samples,
            )
            self.history.append(window)
            self.current_stage = None
            self._stage_start = None
            self._samples = []

        logging.info(f"Stage {window.stage.value} finished with {len(window.samples)} samples")
        return window

    def next_stage(self) -> Optional[Stage]:
        """The protocol stage following the last one begun, or None at the end"""
        if self._stage_order >= len(STAGE_ORDER):
            return None
        return STAGE_ORDER[self._stage_order]

    def reset(self):
        with self._lock:
            self.history = []
            self.current_stage = None
            self._stage_start = None
            self._samples = []
            self._stage_order = 0
