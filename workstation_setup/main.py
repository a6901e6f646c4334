from __future__ import annotations

import argparse
import logging
from typing import Optional

import yaml

from .config import load_setup_config
from .errors import ConfigError
from .lib.host import Host, LocalHost
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, log_report, run_pipeline
from .state_store import clear_completed_steps, ensure_defaults, load_state, save_state
from .steps import (
    BootstrapHomebrewStep,
    ConfigureGitStep,
    FinalizeStep,
    InstallAppsStep,
    InstallCliToolsStep,
    InstallEditorExtensionsStep,
    ProvisionSigningKeyStep,
    SetupNodeStep,
    UpdateHomebrewStep,
)

logger = logging.getLogger(__name__)


DEFAULT_STATE_PATH = "~/.local/state/workstation-setup/state.json"


def build_steps():
    return [
        BootstrapHomebrewStep(),
        UpdateHomebrewStep(),
        InstallCliToolsStep(),
        InstallAppsStep(),
        InstallEditorExtensionsStep(),
        SetupNodeStep(),
        ConfigureGitStep(),
        ProvisionSigningKeyStep(),
        FinalizeStep(),
    ]


def run(
    *,
    host: Optional[Host] = None,
    config_path: Optional[str] = None,
    state_path: str = DEFAULT_STATE_PATH,
    log_path: str = DEFAULT_LOG_PATH,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
    dry_run: bool = False,
) -> PipelineResult:
    """Run the setup plan, persisting state for resume."""

    actual_log_path = configure_logging(log_path=log_path)
    host = host or LocalHost(dry_run=dry_run)

    state = ensure_defaults(load_state(state_path))
    state["execution"].setdefault("paths", {})["log_path_actual"] = actual_log_path

    try:
        try:
            config = load_setup_config(config_path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            state["execution"]["errors"].append({"step": None, "error": str(e), "type": type(e).__name__})
            raise ConfigError(f"Cannot load setup config: {e}") from e
        config["dry_run"] = bool(dry_run or host.dry_run)
        state["config"] = config

        result = run_pipeline(
            state=state,
            steps=build_steps(),
            host=host,
            start_at=start_at,
            stop_after=stop_after,
            force=force,
        )
        state = result.state
        state["execution"]["summary"] = result.summary()
        if result.ok and stop_after is None:
            # Markers only carry a failed or partial run over to the next one;
            # after a full pass every step checks the machine again.
            clear_completed_steps(state)
        log_report(result)
        return result
    finally:
        save_state(state_path, state)


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="workstation-setup")
    p.add_argument("--config", default=None, help="YAML overlay for the default profile")
    p.add_argument("--state", default=DEFAULT_STATE_PATH, help="Path to setup state (json|yaml)")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to setup log")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 50_configure_git)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Re-run steps even if marked completed")
    p.add_argument("--dry-run", action="store_true", help="Log mutating commands instead of running them")

    args = p.parse_args(argv)

    try:
        result = run(
            config_path=args.config,
            state_path=args.state,
            log_path=args.log,
            start_at=args.start_at,
            stop_after=args.stop_after,
            force=bool(args.force),
            dry_run=bool(args.dry_run),
        )
    except ConfigError as e:
        logger.error("%s", e)
        return e.exit_code
    return result.exit_code
