from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .errors import exit_code_for
from .lib.host import Host
from .state_store import is_step_completed, mark_step_completed, reset_actions, step_actions

logger = logging.getLogger(__name__)

SUCCESS = "success"
SKIP = "skip"
FAIL = "fail"


class Step(Protocol):
    """A single idempotent step."""

    step_id: str

    def run(self, state: Dict[str, Any], host: Host) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class StepOutcome:
    step_id: str
    status: str
    detail: str = ""


@dataclass
class PipelineResult:
    state: Dict[str, Any]
    outcomes: List[StepOutcome] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ran_steps(self) -> List[str]:
        return [o.step_id for o in self.outcomes if o.status == SUCCESS]

    @property
    def skipped_steps(self) -> List[str]:
        return [o.step_id for o in self.outcomes if o.status == SKIP]

    @property
    def failed_step(self) -> Optional[str]:
        for o in self.outcomes:
            if o.status == FAIL:
                return o.step_id
        return None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.error is None else exit_code_for(self.error)

    def summary(self) -> Dict[str, Any]:
        return {
            "ran_steps": self.ran_steps,
            "skipped_steps": self.skipped_steps,
            "failed_step": self.failed_step,
            "outcomes": [{"step": o.step_id, "status": o.status, "detail": o.detail} for o in self.outcomes],
        }


def run_pipeline(
    *,
    state: Dict[str, Any],
    steps: Sequence[Step],
    host: Host,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
) -> PipelineResult:
    """Run steps in order with resume/idempotency semantics.

    The first failing step ends the run; its error is kept on the result
    instead of propagating.
    """

    result = PipelineResult(state=state)
    started = start_at is None

    for step in steps:
        if not started:
            if step.step_id == start_at:
                started = True
            else:
                continue

        state.setdefault("execution", {})["current_step"] = step.step_id

        if (not force) and is_step_completed(state, step.step_id):
            logger.info("Skipping step %s (already completed)", step.step_id)
            result.outcomes.append(StepOutcome(step.step_id, SKIP, "completed in a previous run"))
        else:
            logger.info("Running step %s", step.step_id)
            reset_actions(state, step.step_id)
            try:
                state = step.run(state, host)
            except Exception as e:
                logger.error("Step %s failed: %s", step.step_id, e)
                state.setdefault("execution", {}).setdefault("errors", []).append(
                    {"step": step.step_id, "error": str(e), "type": type(e).__name__}
                )
                result.outcomes.append(StepOutcome(step.step_id, FAIL, str(e)))
                result.state = state
                result.error = e
                return result

            mark_step_completed(state, step.step_id)
            actions = step_actions(state, step.step_id)
            if actions:
                result.outcomes.append(StepOutcome(step.step_id, SUCCESS, ", ".join(actions)))
            else:
                result.outcomes.append(StepOutcome(step.step_id, SKIP, "already satisfied"))

        if stop_after is not None and step.step_id == stop_after:
            logger.info("Stopping after %s", stop_after)
            break

    state.setdefault("execution", {})["current_step"] = None
    result.state = state
    return result


def log_report(result: PipelineResult) -> None:
    for o in result.outcomes:
        if o.detail:
            logger.info("  %-8s %s (%s)", o.status.upper(), o.step_id, o.detail)
        else:
            logger.info("  %-8s %s", o.status.upper(), o.step_id)
    if result.ok:
        logger.info("Setup finished: %d changed, %d skipped", len(result.ran_steps), len(result.skipped_steps))
    else:
        logger.error("Setup stopped at %s (exit %d)", result.failed_step, result.exit_code)
