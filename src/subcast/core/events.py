"""Progress events emitted by run_pipeline.

A run reports through a plain callback so that a CLI display or an HTTP
layer can follow it without touching pipeline logic.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Callable, Literal

Stage = Literal["acquire", "transcribe", "translate", "save"]
STAGES: tuple[str, ...] = ("acquire", "transcribe", "translate", "save")


@dataclass(frozen=True)
class PipelineEvent:
    """One progress report from a pipeline run.

    Attributes:
        stage: One of STAGES.
        progress: Fraction of the stage completed, 0.0 to 1.0.
        message: Human-readable status line.
        data: Optional payload such as the remote URL or written paths. A
            failed run carries its message under ``"error"``.
    """

    stage: Stage
    progress: float
    message: str
    data: dict | None = field(default=None)

    def __post_init__(self) -> None:
        if self.stage not in STAGES:
            raise ValueError(f"Unknown pipeline stage: {self.stage!r}")
        if not 0.0 <= self.progress <= 1.0:
            raise ValueError(f"Progress must be within [0, 1], got {self.progress}")

    @property
    def failed(self) -> bool:
        return bool(self.data and "error" in self.data)

    @property
    def finished(self) -> bool:
        """True for the final event of a run, successful or not."""
        return self.stage == "save" and self.progress >= 1.0

    def to_dict(self) -> dict:
        """JSON-ready form for server-sent events or a polling endpoint."""
        return asdict(self)


EventCallback = Callable[[PipelineEvent], None]


class EventEmitter:
    """Builds events and forwards them to an optional callback."""

    def __init__(self, callback: EventCallback | None = None):
        self.callback = callback

    def __call__(
        self, stage: Stage, progress: float, message: str, data: dict | None = None
    ) -> None:
        if self.callback is None:
            return
        self.callback(PipelineEvent(stage=stage, progress=progress, message=message, data=data))
