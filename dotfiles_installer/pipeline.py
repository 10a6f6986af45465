from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from .context import InstallContext

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def applies(self, ctx: InstallContext) -> bool:
        ...

    def run(self, ctx: InstallContext) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    skipped_steps: List[str]


def run_pipeline(
    *,
    ctx: InstallContext,
    steps: Sequence[Step],
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> PipelineResult:
    """Run steps in order. Any exception aborts the run; completed steps are not undone."""

    ids = [s.step_id for s in steps]
    for name, value in (("start_at", start_at), ("stop_after", stop_after)):
        if value is not None and value not in ids:
            raise ValueError(f"{name}: unknown step {value!r} (known: {', '.join(ids)})")

    ran: List[str] = []
    skipped: List[str] = []

    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        if not step.applies(ctx):
            logger.debug("Skipping step %s (not applicable to %s profile)", step.step_id, ctx.profile)
            skipped.append(step.step_id)
        else:
            logger.debug("Running step %s", step.step_id)
            step.run(ctx)
            ran.append(step.step_id)

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    return PipelineResult(ran_steps=ran, skipped_steps=skipped)
