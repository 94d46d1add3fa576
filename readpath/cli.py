"""
Typer CLI for the readpath engine.

Developer tooling around the core: every command reads JSON input files,
calls one engine and prints the result as a rich table.

Commands:
    readpath catalog       - Validate and summarize a skill catalog
    readpath recommend     - Rank next-skill suggestions
    readpath next-skill    - Pick the next session's skill and show its context
    readpath rate          - Fold a batch of graded responses into a rating
    readpath baseline      - Estimate a starting level from placement results

Usage:
    readpath --help
    readpath catalog --catalog my_skills.yaml
    readpath recommend --age 7 --interest universe --progress progress.json --current gravity
    readpath rate --responses batch.json --level 2.0
    python -m readpath.cli baseline placement.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import get_settings
from readpath import __version__
from readpath.adaptive import BaselineEstimator, RatingEngine, inflate_rd_for_inactivity
from readpath.catalog import SkillCatalog, get_catalog
from readpath.core import (
    GradedResponse,
    Rating,
    ReadpathError,
    SkillProgress,
    build_progress_map,
)
from readpath.core.logging import configure_logging
from readpath.graph import SkillGraphRecommender, TechTreeSelector

app = typer.Typer(
    help="readpath CLI: adaptive reading ratings and skill-tree navigation",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine decisions at DEBUG"),
) -> None:
    """Adaptive reading engine developer tools."""
    settings = get_settings()
    if verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    configure_logging(settings)


# ========================================
# Input helpers
# ========================================


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, json.JSONDecodeError) as exc:
        rprint(f"[red]✗[/red] Could not read {path}: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _load_catalog(catalog_path: Path | None) -> SkillCatalog:
    try:
        return get_catalog(catalog_path)
    except (OSError, ReadpathError) as exc:
        rprint(f"[red]✗[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _load_progress(path: Path | None) -> dict[str, SkillProgress]:
    """
    Read a progress snapshot.

    Accepts either a list of persistence rows (``skill_id`` = "topic-<slug>")
    or an object mapping slug -> {attempts, mastery, dominated, correct}.
    """
    if path is None:
        return {}
    raw = _read_json(path)
    if isinstance(raw, list):
        return build_progress_map(raw)
    return {
        slug: SkillProgress(
            attempts=int(row.get("attempts", 0)),
            mastery=float(row.get("mastery", 0.0)),
            dominated=bool(row.get("dominated", False)),
            correct=int(row.get("correct", 0)),
        )
        for slug, row in raw.items()
    }


# ========================================
# Commands
# ========================================


@app.command("catalog")
def catalog_summary(
    catalog_path: Path | None = typer.Option(None, "--catalog", "-c", help="Catalog file (YAML/JSON)"),
) -> None:
    """Validate a skill catalog and summarize it by domain."""
    catalog = _load_catalog(catalog_path)

    table = Table(title=f"Skill Catalog v{catalog.version} ({len(catalog)} skills)")
    table.add_column("Domain", style="cyan")
    table.add_column("Level 1", justify="right")
    table.add_column("Level 2", justify="right")
    table.add_column("Level 3", justify="right")
    table.add_column("Ages", style="dim")

    domain_slugs = [d.slug for d in sorted(catalog.domains, key=lambda d: d.order)]
    if not domain_slugs:
        domain_slugs = sorted({s.domain for s in catalog.skills})

    for slug in domain_slugs:
        skills = catalog.skills_in_domain(slug)
        domain = catalog.domain(slug)
        label = f"{domain.emoji} {domain.name}" if domain else slug
        counts = [sum(1 for s in skills if s.level == level) for level in (1, 2, 3)]
        ages = f"{min(s.age_min for s in skills)}-{max(s.age_max for s in skills)}" if skills else "-"
        table.add_row(label, *(str(c) for c in counts), ages)

    console.print(table)
    rprint("[green]✓[/green] Catalog is valid")


@app.command("recommend")
def recommend(
    age: int = typer.Option(..., "--age", "-a", help="Learner age in years"),
    interests: list[str] = typer.Option([], "--interest", "-i", help="Interest domain (repeatable)"),
    progress_path: Path | None = typer.Option(None, "--progress", "-p", help="Progress JSON file"),
    current: str | None = typer.Option(None, "--current", help="Current skill slug"),
    recent: list[str] = typer.Option([], "--recent", "-r", help="Recent skill slug, newest first (repeatable)"),
    include_locked: bool = typer.Option(False, "--include-locked", help="Ignore prerequisite gating"),
    limit: int | None = typer.Option(None, "--limit", "-n", help="Maximum suggestions"),
    catalog_path: Path | None = typer.Option(None, "--catalog", "-c", help="Catalog file (YAML/JSON)"),
) -> None:
    """Rank next-skill suggestions for a learner."""
    catalog = _load_catalog(catalog_path)
    progress_map = _load_progress(progress_path)

    suggestions = SkillGraphRecommender(catalog).recommend(
        age=age,
        interests=set(interests),
        progress_map=progress_map,
        current_skill=current,
        recent_history=recent,
        unlocked_only=not include_locked,
        limit=limit,
    )

    if not suggestions:
        rprint("[yellow]⚠[/yellow] No suggestions: every eligible skill is dominated")
        return

    table = Table(title=f"Suggestions ({len(suggestions)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Skill", style="cyan")
    table.add_column("Domain")
    table.add_column("Intent", style="magenta")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Why", style="dim")

    for rank, suggestion in enumerate(suggestions, start=1):
        table.add_row(
            str(rank),
            f"{suggestion.emoji} {suggestion.name}",
            suggestion.domain,
            suggestion.intent.value,
            f"{suggestion.score:.0f}",
            suggestion.rationale,
        )

    console.print(table)


@app.command("next-skill")
def next_skill(
    age: int = typer.Option(..., "--age", "-a", help="Learner age in years"),
    level: float = typer.Option(2.0, "--level", "-l", help="Learner reading level"),
    interests: list[str] = typer.Option([], "--interest", "-i", help="Interest domain (repeatable)"),
    progress_path: Path | None = typer.Option(None, "--progress", "-p", help="Progress JSON file"),
    recent: list[str] = typer.Option([], "--recent", "-r", help="Recent skill slug, newest first (repeatable)"),
    catalog_path: Path | None = typer.Option(None, "--catalog", "-c", help="Catalog file (YAML/JSON)"),
) -> None:
    """Pick the skill for the next session and show its tech-tree context."""
    catalog = _load_catalog(catalog_path)
    progress_map = _load_progress(progress_path)
    selector = TechTreeSelector(catalog)

    skill = selector.pick_next(age, set(interests), progress_map, recent)
    if skill is None:
        rprint(f"[yellow]⚠[/yellow] No skills available for age {age}")
        raise typer.Exit(code=1)

    context = selector.build_context(skill, progress_map, age, level)

    table = Table(title=f"Next skill: {skill.emoji} {skill.name}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Slug", context.skill_slug)
    table.add_row("Level", str(context.skill_level))
    table.add_row("Objective", context.objective)
    table.add_row("Strategy", context.strategy.value)
    table.add_row("Prerequisites dominated", ", ".join(context.prerequisites_dominated) or "-")
    table.add_row("Prerequisites pending", ", ".join(context.prerequisites_pending) or "-")
    table.add_row("Related dominated", ", ".join(context.related_dominated) or "-")
    table.add_row("Related in progress", ", ".join(context.related_in_progress) or "-")
    table.add_row("Related to reinforce", ", ".join(context.related_to_reinforce) or "-")
    table.add_row("Suggested next", context.suggested_next or "-")

    console.print(table)


@app.command("rate")
def rate(
    responses_path: Path = typer.Option(..., "--responses", help="JSON list of graded responses"),
    level: float = typer.Option(..., "--level", "-l", help="Nominal text level of the batch"),
    rating_path: Path | None = typer.Option(None, "--rating", help="Prior rating JSON (default: onboarding rating)"),
    days_inactive: float | None = typer.Option(None, "--days-inactive", help="Days since the last session"),
) -> None:
    """Fold a batch of graded responses into a rating."""
    try:
        rating = Rating.from_dict(_read_json(rating_path)) if rating_path else Rating.initial()
        responses = [
            GradedResponse(
                category=item["category"],
                correct=bool(item["correct"]),
                item_difficulty=int(item.get("item_difficulty", 3)),
            )
            for item in _read_json(responses_path)
        ]
    except (KeyError, ValueError) as exc:
        rprint(f"[red]✗[/red] Invalid input: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if days_inactive is not None:
        inactivity = get_settings().get_inactivity_config()
        rating = inflate_rd_for_inactivity(
            rating, days_inactive, c=inactivity["c"], grace_days=int(inactivity["grace_days"])
        )
        logger.info("RD after {} inactive days: {}", days_inactive, rating.rd)

    new_rating, deltas = RatingEngine().update(rating, responses, level)

    trace = Table(title=f"Batch at level {level} ({len(deltas)} responses)")
    trace.add_column("#", style="dim", justify="right")
    trace.add_column("Category", style="cyan")
    trace.add_column("Item rating", justify="right")
    trace.add_column("Δ global", justify="right")
    trace.add_column("Δ category", justify="right")
    for index, delta in enumerate(deltas, start=1):
        trace.add_row(
            str(index),
            delta.category.display_name,
            str(delta.item_rating),
            f"{delta.d_global:+.1f}",
            f"{delta.d_category:+.1f}",
        )
    console.print(trace)

    summary = Table(title="Rating")
    summary.add_column("Component", style="cyan")
    summary.add_column("Before", justify="right")
    summary.add_column("After", justify="right", style="green")
    before, after = rating.to_dict(), new_rating.to_dict()
    for key in before:
        summary.add_row(key, f"{before[key]:.1f}", f"{after[key]:.1f}")
    console.print(summary)
    rprint(f"Band: [bold]{new_rating.band.value}[/bold]")


@app.command("baseline")
def baseline(
    results_path: Path = typer.Argument(..., help="JSON list of placement text results"),
) -> None:
    """Estimate a starting level from placement text results."""
    try:
        result = BaselineEstimator().estimate(_read_json(results_path))
    except (KeyError, ValueError, TypeError) as exc:
        rprint(f"[red]✗[/red] Invalid placement results: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    table = Table(title=f"Baseline ({result.texts_completed} texts)")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Level", f"{result.level:g}")
    table.add_row("Comprehension", f"{result.comprehension_score:.2f}")
    table.add_row("Confidence", result.confidence.value)
    for category, accuracy in result.per_category_accuracy.items():
        table.add_row(
            f"{category.display_name} accuracy",
            f"{accuracy.correct}/{accuracy.total}",
        )
    console.print(table)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint(f"[bold]readpath[/bold] v{__version__}")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
