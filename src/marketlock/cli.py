"""Marketplace restriction - CLI Entry Point."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated

import typer

from marketlock.config import ConfigError, Settings
from marketlock.context import RestrictionContext
from marketlock.evaluator import evaluate, split_remaining
from marketlock.hooks import (
    on_profile_created,
    on_profile_wiped,
    on_session_check,
    on_startup,
)
from marketlock.profiles import ProfileSource

app = typer.Typer(help="Temporary marketplace restriction for new profiles")
logger = logging.getLogger(__name__)

FILE_HANDLER_NAME = "marketlock-file"

ConfigOption = Annotated[
    Path | None, typer.Option("--config", "-c", help="Restriction config JSON file")
]
StoreOption = Annotated[
    Path | None, typer.Option("--store", "-s", help="Restriction table JSON file")
]


def setup_logging(log_dir: Path) -> Path:
    """Configure logging to file only.

    Returns the path to the log file.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_file = log_dir / f"{timestamp}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # One file handler per process, even if commands are invoked repeatedly
    for handler in list(root_logger.handlers):
        if handler.get_name() == FILE_HANDLER_NAME:
            root_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file)
    file_handler.set_name(FILE_HANDLER_NAME)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root_logger.addHandler(file_handler)

    return log_file


def _settings(config: Path | None, store: Path | None) -> Settings:
    settings = Settings()
    overrides = {}
    if config is not None:
        overrides["config_path"] = config
    if store is not None:
        overrides["store_path"] = store
    return settings.model_copy(update=overrides)


def _context(settings: Settings) -> RestrictionContext:
    setup_logging(settings.log_dir)
    try:
        return RestrictionContext.from_settings(settings)
    except ConfigError as e:
        print(f"❌ {e}")
        raise typer.Exit(1)


def _format_remaining(remaining_ms: int) -> str:
    hours, minutes = split_remaining(remaining_ms)
    return f"{hours} hours and {minutes} minutes"


@app.command()
def session(
    profile_id: Annotated[str, typer.Argument(help="Session / profile ID")],
    config: ConfigOption = None,
    store: StoreOption = None,
) -> None:
    """Run the per-request session check for a profile."""
    ctx = _context(_settings(config, store))
    result = on_session_check(ctx, profile_id)

    if result.restricted:
        print(f"🔒 {profile_id}: restricted, unlocks in {_format_remaining(result.remaining_ms)}")
    elif result.expired:
        print(f"🔓 {profile_id}: restriction expired and removed")
    else:
        print(f"✅ {profile_id}: not restricted")
    print(f"Marketplace level cap: {ctx.level_cap.min_user_level}")


@app.command()
def register(
    profile_id: Annotated[str, typer.Argument(help="Newly registered profile ID")],
    config: ConfigOption = None,
    store: StoreOption = None,
) -> None:
    """Restrict a newly registered profile."""
    ctx = _context(_settings(config, store))
    if on_profile_created(ctx, profile_id):
        print(f"🔒 {profile_id}: restricted for {ctx.config.duration_in_days:g} days")
    else:
        print(f"⏭️  {profile_id}: already restricted")


@app.command()
def wipe(
    profile_id: Annotated[str, typer.Argument(help="Wiped profile ID")],
    config: ConfigOption = None,
    store: StoreOption = None,
) -> None:
    """Restrict a wiped profile as if it were new."""
    ctx = _context(_settings(config, store))
    if on_profile_wiped(ctx, profile_id):
        print(f"🔒 {profile_id}: wiped, restricted for {ctx.config.duration_in_days:g} days")
    else:
        print(f"⏭️  {profile_id}: already restricted")


@app.command()
def reconcile(
    config: ConfigOption = None,
    store: StoreOption = None,
    profiles: Annotated[
        Path | None,
        typer.Option("--profiles", "-p", help="Directory of profile JSON files"),
    ] = None,
) -> None:
    """Run the startup pass: add missing restrictions and prune expired ones."""
    settings = _settings(config, store)
    if profiles is not None:
        settings = settings.model_copy(update={"profiles_dir": profiles})
    ctx = _context(settings)

    report = on_startup(ctx, ProfileSource(settings.profiles_dir))
    print(f"Marketplace level cap: {ctx.level_cap.min_user_level}")

    if report is None:
        if ctx.config.enabled:
            print(f"❌ Could not read profiles from {settings.profiles_dir}")
            raise typer.Exit(1)
        print("Restrictions are disabled; nothing to reconcile")
        return

    for profile_id in report.added:
        print(f"  🔒 added {profile_id}")
    for profile_id in report.expired:
        print(f"  🔓 expired {profile_id}")
    for profile_id, remaining_ms in report.active.items():
        print(f"  ⏳ {profile_id}: {_format_remaining(remaining_ms)}")
    print(f"\nDone: {report.summary()}")


@app.command("list")
def list_restrictions(
    config: ConfigOption = None,
    store: StoreOption = None,
) -> None:
    """Show every stored restriction without modifying the table."""
    ctx = _context(_settings(config, store))
    table = ctx.store.load()
    if not table:
        print("No restrictions stored")
        return

    now = ctx.now()
    for profile_id in sorted(table):
        # The trimmed table is discarded: listing never writes
        result = evaluate(table, profile_id, now)
        if result.restricted:
            print(f"{profile_id}: {_format_remaining(result.remaining_ms)}")
        else:
            print(f"{profile_id}: expired (removed on next check)")


if __name__ == "__main__":
    app()
