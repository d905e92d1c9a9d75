#!/usr/bin/env python3
"""
Command-line interface for résumé import, export and backup restore.

Subcommands:
- normalize: Import any supported file and write the canonical editor JSON
- export: Write a JSON Resume, extended backup or HR Open document
- restore: Strictly restore an extended backup into canonical editor JSON
- linkedin: Import a LinkedIn data export archive
- inspect: Classify a file and summarize what an import would do
"""

import json
from pathlib import Path

import typer

from lumen.contexts.interchange import (
    classify,
    export_backup,
    export_hr_open,
    export_json_resume,
    generate_export_filename,
    import_linkedin_export,
    import_resume,
    restore_backup,
)
from lumen.contexts.interchange.logger import log_export, setup_interchange_logger
from lumen.contexts.modeling.logger import log_normalization_summary, setup_modeling_logger
from lumen.utils.config import LOGS_PATH, load_settings
from lumen.utils.timestamp import now

EXPORT_FORMATS = ("backup", "json-resume", "hr-open")

app = typer.Typer(
    add_completion=False,
    help="Import, export and restore résumé documents without losing visibility",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _start_logging(phase: str, log: bool) -> None:
    if log:
        setup = setup_modeling_logger if phase == "normalize" else setup_interchange_logger
        log_file = setup(LOGS_PATH / f"{phase}_{now()}", phase=phase)
        typer.echo(f"Log file: {log_file}")


def _write_json(data: dict, output: Path) -> None:
    output.parent.mkdir(exist_ok=True, parents=True)
    output.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def _print_issues(errors, warnings) -> None:
    for error in errors:
        typer.secho(f"  ✗ {error}", fg=typer.colors.RED)
    for warning in warnings:
        typer.secho(f"  ! {warning}", fg=typer.colors.YELLOW)


INPUT_ARGUMENT = typer.Argument(
    ..., help="Input JSON file", exists=True, file_okay=True, dir_okay=False
)
LOG_OPTION = typer.Option(False, "--log", help=f"Write a session log under {LOGS_PATH}")


@app.command("normalize")
def normalize_command(
    input_file: Path = INPUT_ARGUMENT,
    output: Path = typer.Option(
        None, "--output", "-o", help="Output path (default: <input>.normalized.json)"
    ),
    log: bool = LOG_OPTION,
):
    """
    Import a file and write the canonical editor JSON.

    Accepts extended backups, JSON Resume and HR Open documents. Anything that
    does not fit is kept under nonConformingData for manual review.

    Examples:\n

        $ convert_resume.py normalize resume.json

        $ convert_resume.py normalize upload.json -o canonical.json
    """
    _start_logging("normalize", log)
    result = import_resume(input_file.read_text(encoding="utf-8"))

    typer.secho(
        f"\nImported: {input_file.name} ({result.source_format})", fg=typer.colors.BLUE, bold=True
    )
    _print_issues(result.errors, result.warnings)
    log_normalization_summary(result.model)

    if result.source_format == "unparsable":
        raise typer.Exit(code=1)

    output_path = output or input_file.with_suffix(".normalized.json")
    _write_json(result.model.to_dict(), output_path)

    record = result.model.non_conforming
    if record is not None and record.issue_count:
        typer.secho(
            f"{record.issue_count} issue(s) kept for manual review under nonConformingData",
            fg=typer.colors.YELLOW,
        )
    typer.secho(f"✓ Saved canonical model to: {output_path}", fg=typer.colors.GREEN)


@app.command("export")
def export_command(
    input_file: Path = INPUT_ARGUMENT,
    export_format: str = typer.Option(
        "backup", "--format", "-f", help=f"One of: {', '.join(EXPORT_FORMATS)}"
    ),
    output: Path = typer.Option(None, "--output", "-o", help="Output path"),
    output_dir: Path = typer.Option(
        Path("."), "--output-dir", "-d", help="Directory for the generated filename"
    ),
    config: Path = typer.Option(None, "--config", "-c", help="Settings YAML to overlay"),
    log: bool = LOG_OPTION,
):
    """
    Export a résumé file as JSON Resume, extended backup or HR Open.

    The filename is generated from the résumé owner's name and active target
    unless --output is given.

    Examples:\n

        $ convert_resume.py export canonical.json                     # Backup

        $ convert_resume.py export canonical.json -f json-resume

        $ convert_resume.py export canonical.json -f hr-open -o hr.json
    """
    if export_format not in EXPORT_FORMATS:
        typer.secho(
            f"Error: unknown format {export_format!r} (expected {', '.join(EXPORT_FORMATS)})",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    _start_logging("export", log)
    try:
        settings = load_settings(config)
    except FileNotFoundError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    result = import_resume(input_file.read_text(encoding="utf-8"))
    if result.source_format == "unparsable":
        _print_issues(result.errors, result.warnings)
        raise typer.Exit(code=1)

    model = result.model
    if export_format == "backup":
        content = export_backup(model, settings=settings)
        filename = generate_export_filename(model, "json", variant="backup", include_time=True)
    elif export_format == "json-resume":
        content = export_json_resume(model, settings=settings)
        filename = generate_export_filename(model, "json", include_time=True)
    else:
        content = export_hr_open(model, settings=settings)
        filename = generate_export_filename(model, "json", variant="hr-open", include_time=True)

    output_path = output or output_dir / filename
    output_path.parent.mkdir(exist_ok=True, parents=True)
    output_path.write_text(content + "\n", encoding="utf-8")
    log_export(export_format, str(output_path))
    typer.secho(f"✓ Exported {export_format} to: {output_path}", fg=typer.colors.GREEN)


@app.command("restore")
def restore_command(
    backup_file: Path = INPUT_ARGUMENT,
    output: Path = typer.Option(
        None, "--output", "-o", help="Output path (default: <input>.restored.json)"
    ),
    log: bool = LOG_OPTION,
):
    """
    Restore an extended backup into canonical editor JSON.

    Rejects plain JSON Resume files, malformed backups and unsupported schema
    versions (exit code 1) without writing anything.

    Example:\n

        $ convert_resume.py restore jane-doe-resume-backup-2025-01-31-142530.json
    """
    _start_logging("restore", log)
    result = restore_backup(backup_file.read_text(encoding="utf-8"))

    if not result.is_valid:
        typer.secho(f"\n✗ Cannot restore {backup_file.name}", fg=typer.colors.RED, bold=True)
        _print_issues(result.errors, result.warnings)
        raise typer.Exit(code=1)

    _print_issues([], result.warnings)
    output_path = output or backup_file.with_suffix(".restored.json")
    _write_json(result.model.to_dict(), output_path)
    typer.secho(
        f"✓ Restored schema v{result.schema_version} backup to: {output_path}",
        fg=typer.colors.GREEN,
    )


@app.command("linkedin")
def linkedin_command(
    archive_file: Path = typer.Argument(
        ..., help="LinkedIn data export ZIP", exists=True, file_okay=True, dir_okay=False
    ),
    output: Path = typer.Option(
        None, "--output", "-o", help="Output path (default: <input>.normalized.json)"
    ),
    log: bool = LOG_OPTION,
):
    """
    Import a LinkedIn data export archive and write the canonical editor JSON.

    Reads Profile, Positions, Education, Skills, Languages and Certifications
    CSV files. Exits with code 1 when nothing could be read.

    Example:\n

        $ convert_resume.py linkedin Basic_LinkedInDataExport.zip
    """
    _start_logging("linkedin", log)
    result = import_linkedin_export(archive_file)

    typer.secho(f"\nImported: {archive_file.name} (linkedin)", fg=typer.colors.BLUE, bold=True)
    for name in result.processed_files:
        typer.echo(f"  read {name}")
    _print_issues(result.errors, [])

    if not result.processed_files:
        raise typer.Exit(code=1)

    output_path = output or archive_file.with_suffix(".normalized.json")
    _write_json(result.model.to_dict(), output_path)
    typer.secho(f"✓ Saved canonical model to: {output_path}", fg=typer.colors.GREEN)


@app.command("inspect")
def inspect_command(input_file: Path = INPUT_ARGUMENT):
    """
    Classify a file and summarize its contents.

    Example:\n

        $ convert_resume.py inspect backup.json
    """
    raw_text = input_file.read_text(encoding="utf-8")
    try:
        parsed = json.loads(raw_text)
    except ValueError as e:
        typer.secho(f"✗ Not valid JSON: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    report = classify(parsed)
    typer.secho(f"\n{input_file.name}", fg=typer.colors.BLUE, bold=True)
    if report.is_extended_format:
        typer.echo(f"Format: extended backup (schema {report.schema_version})")
        typer.echo(f"Valid: {report.is_valid}  Supported: {report.is_supported}")
    else:
        typer.echo("Format: not an extended backup (will import as JSON Resume or HR Open)")
    _print_issues(report.errors, report.warnings)

    result = import_resume(raw_text)
    typer.echo(f"\nImport path: {result.source_format}")
    for section, entries in result.model.iter_sections():
        if entries:
            hidden = sum(1 for entry in entries if not entry.visible)
            typer.echo(f"  {section}: {len(entries)} item(s), {hidden} hidden")
    hidden_sections = [name for name, shown in result.model.section_visibility.items() if not shown]
    if hidden_sections:
        typer.echo(f"Hidden sections: {', '.join(hidden_sections)}")


if __name__ == "__main__":
    app()
