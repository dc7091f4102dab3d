"""Command-line interface using Click."""

import sys
from pathlib import Path

import click

from . import __version__
from .exceptions import SingCoachError
from .core.components.feedback import build_detailed_feedback
from .core.components.performance import analyze_performance
from .core.report import score_attempt
from .core.serialization import (
    attempt_from_json,
    dump_json,
    feedback_to_json,
    load_json_file,
    performance_input_from_json,
    performance_to_json,
    report_to_json,
)
from .utils.logging import setup_logging
from .utils.validation import validate_attempt, validate_duration


def _emit(data: dict, output) -> None:
    text = dump_json(data, output)
    if not output:
        click.echo(text)


def _fail(ctx, error: Exception) -> None:
    logger = ctx.obj["logger"]
    if isinstance(error, SingCoachError):
        logger.error(f"❌ {error}")
    else:
        logger.error(f"❌ Unexpected error: {error}")
        if ctx.obj.get("verbose"):
            import traceback

            traceback.print_exc()
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Log to file")
@click.pass_context
def cli(ctx, verbose, log_file):
    """SingCoach - score sung attempts against a reference verse."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose,
    )
    ctx.obj["logger"] = logger
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("attempt_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(), help="Write JSON result to this path")
@click.pass_context
def feedback(ctx, attempt_file, output):
    """Word, segment and drill feedback for an attempt JSON file."""
    try:
        attempt = validate_attempt(attempt_from_json(load_json_file(attempt_file)))
        result = build_detailed_feedback(
            attempt.reference_words,
            attempt.user_words,
            verse_start_sec=attempt.verse_start_sec,
            verse_end_sec=attempt.verse_end_sec,
            reference_lines=attempt.reference_lines,
            estimated_offset_ms=attempt.offset.offset_ms if attempt.offset else None,
        )
        _emit(feedback_to_json(result), output)
    except Exception as e:
        _fail(ctx, e)


@cli.command()
@click.argument("signals_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--mode",
    type=click.Choice(["full", "words", "timing", "pitch"]),
    default=None,
    help="Practice mode (overrides the file)",
)
@click.option("-o", "--output", type=click.Path(), help="Write JSON result to this path")
@click.pass_context
def performance(ctx, signals_file, mode, output):
    """Pitch, timing and stability scores for a signals JSON file."""
    try:
        data = load_json_file(signals_file)
        if mode:
            data["practiceMode"] = mode
        signals = performance_input_from_json(data)
        validate_duration(signals.reference_duration_sec, "Reference duration")
        validate_duration(signals.recording_duration_sec, "Recording duration")
        _emit(performance_to_json(analyze_performance(signals)), output)
    except Exception as e:
        _fail(ctx, e)


@cli.command()
@click.argument("attempt_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(), help="Write JSON result to this path")
@click.pass_context
def report(ctx, attempt_file, output):
    """Full attempt report: feedback plus performance scores."""
    try:
        attempt = validate_attempt(attempt_from_json(load_json_file(attempt_file)))
        result = score_attempt(attempt)
        _emit(report_to_json(result), output)
        if output:
            ctx.obj["logger"].info(f"✅ Report written to {output}")
    except Exception as e:
        _fail(ctx, e)


if __name__ == "__main__":
    cli()
