"""podmatch CLI - schedule- and interest-aware study buddy matching."""

import json
import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from podmatch.config import DEFAULT_LIMIT, DEFAULT_SNAPSHOT_PATH
from podmatch.data.repository import JsonSnapshotRepository
from podmatch.schemas.match import MatchResponse
from podmatch.schemas.request import MatchFilters, MatchMode
from podmatch.services.match_service import (
    find_matches_for_seeker,
    plan_hangout,
    search_hobbies,
    suggest_activities,
)
from podmatch.utils import MatchRequestError

app = typer.Typer(help="podmatch - Rank study buddies and pods by shared free time and interests")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show engine logs"),
) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load_repository(snapshot: Path) -> JsonSnapshotRepository:
    if not snapshot.exists():
        console.print(f"[red]Error: Snapshot file not found: {snapshot}[/red]")
        raise typer.Exit(1)
    try:
        return JsonSnapshotRepository.from_file(snapshot)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Error reading snapshot: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def match(
    seeker: str = typer.Option(..., "--seeker", "-s", help="Seeker profile id"),
    snapshot: Path = typer.Option(
        DEFAULT_SNAPSHOT_PATH, "--snapshot", "-f", help="Profiles snapshot JSON"
    ),
    mode: str = typer.Option("pair", "--mode", "-m", help="'pair' or 'pod' (seeker + 2)"),
    majors: list[str] = typer.Option([], "--major", help="Only candidates in this major"),
    classes: list[str] = typer.Option([], "--class", help="Only candidates taking this class"),
    interests: list[str] = typer.Option([], "--interest", help="Only candidates with this interest"),
    hobby: str | None = typer.Option(None, "--hobby", help="Only candidates whose hobbies contain this"),
    same_course: bool = typer.Option(False, "--same-course", help="Require a shared class"),
    limit: int = typer.Option(DEFAULT_LIMIT, "--limit", "-n", help="Number of matches to show"),
    output_json: bool = typer.Option(False, "--json", help="Output results as JSON"),
) -> None:
    """Rank candidates (or pods) for a seeker in the snapshot."""
    repository = _load_repository(snapshot)
    filters = MatchFilters(
        majors=majors,
        classes=classes,
        interests=interests,
        hobby_query=hobby,
        require_same_course=same_course,
    )

    try:
        response = find_matches_for_seeker(
            repository, seeker, mode=mode, filters=filters, limit=limit
        )
    except MatchRequestError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if output_json:
        _output_json(response.model_dump(mode="json", by_alias=True))
    else:
        _output_pretty(response, MatchMode(mode))


@app.command(name="search-hobbies")
def search_hobbies_command(
    hobby: str = typer.Option(..., "--hobby", help="Hobby search term"),
    snapshot: Path = typer.Option(
        DEFAULT_SNAPSHOT_PATH, "--snapshot", "-f", help="Profiles snapshot JSON"
    ),
    seeker: str | None = typer.Option(None, "--seeker", "-s", help="Exclude this profile id"),
) -> None:
    """List candidates whose hobbies contain a term."""
    repository = _load_repository(snapshot)
    try:
        results = search_hobbies(repository, hobby, seeker_id=seeker)
    except MatchRequestError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not results:
        console.print(f"[yellow]No candidates list a hobby matching '{hobby}'.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Candidates into '{hobby}'")
    table.add_column("Name", style="cyan")
    table.add_column("Major", style="green")
    table.add_column("Hobbies")
    table.add_column("Instagram", style="dim")
    for person in results:
        table.add_row(
            person.name or person.id or "",
            person.major or "",
            ", ".join(person.hobbies),
            f"@{person.instagram}" if person.instagram else "",
        )
    console.print(table)


@app.command()
def suggest(
    description: str = typer.Option("", "--description", "-d", help="What kind of meetup"),
    hobbies: list[str] = typer.Option([], "--hobby", help="Hobby to tailor ideas to"),
) -> None:
    """Suggest short on-campus activities (LLM when configured, otherwise built-in ideas)."""
    try:
        suggestions = suggest_activities(description, hobbies)
    except MatchRequestError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    for i, idea in enumerate(suggestions, start=1):
        content = []
        if idea.summary:
            content.append(idea.summary)
        if idea.duration_minutes:
            content.append(f"[cyan]Duration:[/cyan] {idea.duration_minutes} min")
        if idea.tags:
            content.append(f"[cyan]Tags:[/cyan] {', '.join(idea.tags)}")
        if idea.primary_reason:
            content.append(f"[yellow]Why:[/yellow] {idea.primary_reason}")
        console.print(Panel(renderable="\n".join(content), title=f"[bold]#{i} {idea.title}[/bold]"))


@app.command(name="plan-hangout")
def plan_hangout_command(
    seeker: str = typer.Option(..., "--seeker", "-s", help="Host profile id"),
    friends: list[str] = typer.Option(..., "--friend", help="Friend profile id (repeatable)"),
    snapshot: Path = typer.Option(
        DEFAULT_SNAPSHOT_PATH, "--snapshot", "-f", help="Profiles snapshot JSON"
    ),
    focus: str | None = typer.Option(None, "--focus", help="Theme for the hangout"),
    minutes: int | None = typer.Option(None, "--minutes", help="Time available (max 240)"),
) -> None:
    """Draft a timed hangout plan for a host and friends."""
    repository = _load_repository(snapshot)
    try:
        plan = plan_hangout(repository, seeker, friends, focus=focus, duration_minutes=minutes)
    except MatchRequestError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    content = [plan.summary, "", "[cyan]Agenda:[/cyan]"]
    for item in plan.agenda:
        duration = f" ({item.duration_minutes} min)" if item.duration_minutes else ""
        content.append(f"  • {item.label}{duration}")
        if item.detail:
            content.append(f"    {item.detail}")
    content.append("\n[cyan]Conversation starters:[/cyan]")
    content.extend(f"  • {starter}" for starter in plan.conversation_starters)
    content.append("\n[cyan]Shared connections:[/cyan]")
    content.extend(f"  • {line}" for line in plan.shared_connections)
    content.append(f"\n[dim]With: {', '.join(plan.participants)}[/dim]")

    console.print(Panel(renderable="\n".join(content), title=f"[bold]{plan.title}[/bold]"))


@app.command()
def info(
    snapshot: Path = typer.Option(
        DEFAULT_SNAPSHOT_PATH, "--snapshot", "-f", help="Profiles snapshot JSON"
    ),
) -> None:
    """Display snapshot statistics."""
    repository = _load_repository(snapshot)
    records = repository.all_records()

    majors = {r.profile.major for r in records if r.profile.major}
    hobbies = {h.lower() for r in records for h in r.profile.hobbies}
    slots = sum(len(r.availability) for r in records)
    without_slots = sum(1 for r in records if not r.availability)

    table = Table(title="Snapshot Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Snapshot", str(snapshot))
    table.add_row("Profiles", str(len(records)))
    table.add_row("Unique Majors", str(len(majors)))
    table.add_row("Unique Hobbies", str(len(hobbies)))
    table.add_row("Availability Slots", str(slots))
    table.add_row("Profiles Without Availability", str(without_slots))
    console.print(table)


def _output_json(payload: dict) -> None:
    """Output a payload as JSON to stdout."""
    json.dump(obj=payload, fp=sys.stdout, indent=2)
    sys.stdout.write("\n")


def _output_pretty(response: MatchResponse, mode: MatchMode) -> None:
    """Output match previews in pretty console format."""
    if not response.matches:
        console.print(f"[yellow]{response.empty_reason or 'No matches found.'}[/yellow]")
        return

    kind = "pods" if mode is MatchMode.POD_OF_THREE else "matches"
    console.print(f"\n[bold green]Found {len(response.matches)} top {kind}![/bold green]\n")

    for i, preview in enumerate(iterable=response.matches, start=1):
        names = " + ".join(p.name or p.id or "?" for p in preview.participants)
        header = f"[bold]#{i} {names}[/bold] · {preview.cluster_label}"

        content = [
            f"[cyan]Compatibility:[/cyan] {preview.compatibility_score} "
            f"(Similarity: {preview.semantic_similarity:.0%})",
            f"[cyan]Summary:[/cyan] {preview.summary}",
        ]
        if preview.shared_hobbies:
            content.append(f"[cyan]Shared hobbies:[/cyan] {', '.join(preview.shared_hobbies)}")
        if preview.shared_interests:
            content.append(f"[cyan]Shared interests:[/cyan] {', '.join(preview.shared_interests)}")

        content.append(f"\n[cyan]Free together ({preview.overlap_minutes} min):[/cyan]")
        for window in preview.shared_availability[:5]:
            content.append(f"  • {window.label}")
        if len(preview.shared_availability) > 5:
            content.append(f"  ... and {len(preview.shared_availability) - 5} more")

        panel = Panel(
            renderable="\n".join(content),
            title=header,
            border_style="green" if i == 1 else "blue",
        )
        console.print(panel)
        console.print()


if __name__ == "__main__":
    app()
