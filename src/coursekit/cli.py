"""
coursekit Command Line Interface.

Read lessons in the terminal, export their code samples, and verify that
the course is well formed.
"""

import json
import logging
import sys
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from coursekit.config import ConfigurationError, CoursekitConfig, LoggingConfig, load_config
from coursekit.course import Course, export_samples
from coursekit.errors import CoursekitError
from coursekit.models.base import CheckStatus, Severity
from coursekit.models.findings import CourseReport
from coursekit.verification import VerificationPipeline
from coursekit.version import __version__

console = Console()

STATUS_STYLES = {
    CheckStatus.PASS: "[green]pass[/green]",
    CheckStatus.FAIL: "[red]FAIL[/red]",
    CheckStatus.WARNING: "[yellow]warn[/yellow]",
    CheckStatus.SKIPPED: "[dim]-[/dim]",
}

SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "dim",
}


def configure_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """Route coursekit loggers through rich, and to a file if configured."""
    level = getattr(logging, config.level.value)
    if verbose:
        level = min(level, logging.INFO)

    logger = logging.getLogger("coursekit")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    if config.file:
        file_handler = logging.FileHandler(config.file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(config.format))
        logger.addHandler(file_handler)


def _fail(error: Exception, verbose: bool) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    if verbose:
        console.print_exception()
    sys.exit(1)


def _load_course(ctx: click.Context) -> Course:
    cfg: CoursekitConfig = ctx.obj["config"]
    return Course.load(cfg.course.resolve_root(), cfg.course.pattern)


@click.group()
@click.version_option(version=__version__, prog_name="coursekit")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
@click.option(
    "--course",
    "course_root",
    type=click.Path(exists=True, file_okay=False),
    help="Course directory (defaults to the bundled course)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: str | None, course_root: str | None) -> None:
    """coursekit: document database indexing course.

    Read the lessons, export their Python listings, and verify that every
    lesson's links, images, headings and code blocks are well formed.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    try:
        cfg = load_config(config_path)
    except (ConfigurationError, FileNotFoundError) as e:
        _fail(e, verbose)
    if course_root:
        cfg = cfg.model_copy(
            update={"course": cfg.course.model_copy(update={"root": course_root})}
        )
    ctx.obj["config"] = cfg
    configure_logging(cfg.logging, verbose or cfg.debug)


@main.command()
@click.pass_context
def lessons(ctx: click.Context) -> None:
    """List the lessons of the course."""
    try:
        course = _load_course(ctx)
    except (CoursekitError, FileNotFoundError) as e:
        _fail(e, ctx.obj["verbose"])

    table = Table(title=f"Lessons in {course.root}", show_header=True)
    table.add_column("Lesson", style="cyan")
    table.add_column("Title", style="green")
    table.add_column("Code samples", justify="right")
    table.add_column("Links", justify="right")
    for lesson in course:
        table.add_row(
            lesson.lesson_id,
            lesson.title,
            str(len(lesson.code_samples)),
            str(len(lesson.links)),
        )
    console.print(table)
    if not len(course):
        console.print("[yellow]No lessons found.[/yellow]")


@main.command()
@click.argument("lesson_id")
@click.option("--raw", is_flag=True, help="Print the Markdown source instead of rendering it")
@click.pass_context
def show(ctx: click.Context, lesson_id: str, raw: bool) -> None:
    """Print a lesson.

    LESSON_ID is the lesson directory name, e.g. lesson4.
    """
    try:
        course = _load_course(ctx)
        lesson = course.get(lesson_id)
        text = lesson.source_path.read_text(encoding="utf-8-sig")
    except (CoursekitError, OSError) as e:
        _fail(e, ctx.obj["verbose"])

    if raw:
        click.echo(text, nl=not text.endswith("\n"))
    else:
        console.print(Markdown(text))

    previous = course.previous(lesson_id)
    upcoming = course.next(lesson_id)
    nav = []
    if previous:
        nav.append(f"Previous: [cyan]{previous.lesson_id}[/cyan] {escape(previous.title)}")
    if upcoming:
        nav.append(f"Next: [cyan]{upcoming.lesson_id}[/cyan] {escape(upcoming.title)}")
    if nav:
        console.print(Panel("\n".join(nav), title="Navigation"))


@main.command()
@click.argument("root", required=False, type=click.Path(exists=True))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "json", "markdown"]),
    default="table",
    help="Report format",
)
@click.option("--strict", is_flag=True, help="Warn on code blocks that cannot be validated")
@click.option("--fail-on-warnings", is_flag=True, help="Treat warnings as failures")
@click.pass_context
def check(
    ctx: click.Context,
    root: str | None,
    output_format: str,
    strict: bool,
    fail_on_warnings: bool,
) -> None:
    """Verify lessons.

    ROOT is a course directory or a single lesson file; the configured
    course is checked when omitted. Exits with status 1 if any lesson fails.
    """
    cfg: CoursekitConfig = ctx.obj["config"]
    updates = {}
    if strict:
        updates["strict_languages"] = True
    if fail_on_warnings:
        updates["fail_on_warnings"] = True
    pipeline = VerificationPipeline(cfg.verification.model_copy(update=updates))

    try:
        target = Path(root) if root else cfg.course.resolve_root()
        report = pipeline.verify_path(target, cfg.course.pattern)
    except (CoursekitError, FileNotFoundError) as e:
        _fail(e, ctx.obj["verbose"])

    if output_format == "json":
        click.echo(json.dumps(report.to_summary_dict(), indent=2))
    elif output_format == "markdown":
        click.echo(report.to_markdown())
    else:
        _display_report(report, ctx.obj["verbose"])

    if not report.passed:
        sys.exit(1)


def _display_report(report: CourseReport, verbose: bool) -> None:
    """Print a course report as rich tables."""
    check_types = []
    for lesson in report.lessons:
        for result in lesson.results:
            if result.check_type not in check_types:
                check_types.append(result.check_type)

    table = Table(title="Lesson verification", show_header=True)
    table.add_column("Lesson", style="cyan")
    for check_type in check_types:
        table.add_column(check_type.value.replace("_", " "), justify="center")
    table.add_column("Result", justify="center")

    for lesson in report.lessons:
        cells = []
        for check_type in check_types:
            result = lesson.get_result(check_type)
            cells.append(STATUS_STYLES[result.status] if result else "")
        verdict = "[green]PASSED[/green]" if lesson.passed else "[red]FAILED[/red]"
        table.add_row(lesson.lesson_id, *cells, verdict)
    console.print(table)

    for lesson in report.lessons:
        for finding in lesson.findings:
            if finding.severity == Severity.INFO and not verbose:
                continue
            style = SEVERITY_STYLES[finding.severity]
            console.print(
                f"[{style}]{finding.severity.value:>7}[/{style}] "
                f"{escape(finding.location(lesson.source_path))} {escape(finding.message)}",
                highlight=False,
            )

    summary = f"{len(report.lessons)} lessons, {report.error_count} errors, {report.warning_count} warnings"
    if report.passed:
        console.print(f"[bold green]Course verified:[/bold green] {summary}")
    else:
        console.print(f"[bold red]Course failed verification:[/bold red] {summary}")


@main.command()
@click.argument("lesson_id")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to write samples to (default from configuration)",
)
@click.option(
    "--language",
    "-l",
    "languages",
    multiple=True,
    help="Only export samples in this language (repeatable)",
)
@click.pass_context
def samples(ctx: click.Context, lesson_id: str, output: str | None, languages: tuple[str, ...]) -> None:
    """Export the code samples of a lesson to files."""
    cfg: CoursekitConfig = ctx.obj["config"]
    output_dir = output or cfg.output.samples_dir
    try:
        lesson = _load_course(ctx).get(lesson_id)
        written = export_samples(
            lesson,
            output_dir,
            languages=list(languages) or None,
            create_dirs=cfg.output.create_dirs,
        )
    except (CoursekitError, OSError) as e:
        _fail(e, ctx.obj["verbose"])

    for path in written:
        console.print(f"  [green]wrote[/green] {path}", highlight=False)
    console.print(f"Exported {len(written)} samples from {lesson_id} to {output_dir}")


@main.command(name="config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Display the effective configuration."""
    cfg: CoursekitConfig = ctx.obj["config"]
    console.print(Panel("[bold blue]coursekit configuration[/bold blue]", title="Configuration"))
    console.print(f"Course root: {cfg.course.resolve_root()}", highlight=False)
    click.echo(yaml.safe_dump(cfg.to_yaml_dict(), default_flow_style=False, sort_keys=False))


if __name__ == "__main__":
    main()
