"""CLI interface for kinship inference."""

import asyncio
import json
from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="kinship",
    help="Genealogy kinship inference over stored relationships",
    add_completion=False,
)
console = Console()


def get_config(db: Path | None = None):
    """Load configuration from environment (and .env)."""
    from dotenv import load_dotenv

    from .config import load_config
    from .logging import configure_logging

    load_dotenv()
    config = load_config()
    configure_logging(config.log_level)

    if db is not None:
        config = replace(config, db_path=str(db))
    return config


def get_engine(config):
    from .graph import KinshipEngine, RelativesCache, SQLiteRelationshipGraph

    store = SQLiteRelationshipGraph(config.db_path)
    cache = RelativesCache(config.cache_size) if config.cache_size else None
    return store, KinshipEngine(store, config=config, cache=cache)


def _require_person(store, person_id: int) -> None:
    if not store.person_exists(person_id):
        console.print(f"[red]Person not found: {person_id}[/red]")
        raise typer.Exit(1)


@app.command()
def seed(
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    couples: int = typer.Option(4, "--couples", "-c", help="Founding couples"),
    generations: int = typer.Option(4, "--generations", "-g", help="Generations to create"),
    rng_seed: int = typer.Option(1880, "--seed", help="Random seed for names and years"),
):
    """Populate the database with a generated multi-generation family."""
    from .graph import SQLiteRelationshipGraph
    from .seed import seed_family

    config = get_config(db)
    store = SQLiteRelationshipGraph(config.db_path)

    if store.count_edges():
        console.print(f"[yellow]Database already has relationships: {config.db_path}[/yellow]")
        raise typer.Exit(1)

    report = seed_family(store, couples=couples, generations=generations, rng_seed=rng_seed)

    console.print(
        f"[green]Seeded {report.total_persons} persons, {len(report.couples)} couples, "
        f"{report.relationships} relationship rows into {config.db_path}[/green]"
    )


@app.command()
def relatives(
    person_id: int = typer.Argument(..., help="Person to start from"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    max_degree: int = typer.Option(None, "--max-degree", "-d", min=0, help="Only relatives up to this degree"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
):
    """List every relative of a person with the relation and path."""
    from .graph import RelativesQuery

    config = get_config(db)
    store, engine = get_engine(config)
    _require_person(store, person_id)

    result = asyncio.run(engine.get_relatives(RelativesQuery(person_id=person_id, max_degree=max_degree)))

    if as_json:
        console.print_json(result.model_dump_json())
        return

    table = Table(title=f"Relatives of {store.display_name(person_id)} ({result.count})")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Relation")
    table.add_column("Degree", justify="right")
    table.add_column("Path")

    ordered = sorted(result.relatives.items(), key=lambda item: (item[1]["degree"], item[0]))
    for pid, info in ordered:
        table.add_row(
            str(pid),
            store.display_name(pid),
            info["description"],
            str(info["degree"]),
            " → ".join(str(p) for p in info["path"]),
        )

    console.print(table)


@app.command()
def path(
    person_a: int = typer.Argument(..., help="Start person"),
    person_b: int = typer.Argument(..., help="Target person"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
):
    """Show the shortest chain of relationships between two persons."""
    from .graph import PathQuery

    config = get_config(db)
    store, engine = get_engine(config)
    _require_person(store, person_a)
    _require_person(store, person_b)

    result = asyncio.run(engine.find_path(PathQuery(person_a_id=person_a, person_b_id=person_b)))

    if as_json:
        console.print_json(result.model_dump_json() if result else "null")
        return

    if result is None:
        console.print("[yellow]No path found[/yellow]")
        return

    chain = " → ".join(f"{store.display_name(pid)} (#{pid})" for pid in result.path)
    console.print(Panel(chain, title=f"Path length {result.length}"))


@app.command()
def relation(
    person_a: int = typer.Argument(..., help="Reference person"),
    person_b: int = typer.Argument(..., help="Person to describe"),
    db: Path = typer.Option(None, "--db", help="SQLite database path"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON"),
):
    """Describe how person B relates to person A."""
    from .graph import KinshipQuery

    config = get_config(db)
    store, engine = get_engine(config)
    _require_person(store, person_a)
    _require_person(store, person_b)

    info = asyncio.run(engine.find_kinship(KinshipQuery(person_a_id=person_a, person_b_id=person_b)))

    if as_json:
        console.print_json(json.dumps(info.to_dict() if info else None))
        return

    if info is None:
        console.print("[yellow]No relation found[/yellow]")
        return

    console.print(
        Panel(
            f"[bold]{info.description}[/bold]\n"
            f"type: {info.relation_type.value}, degree: {info.degree}\n"
            f"path: {' → '.join(str(p) for p in info.path)}",
            title=f"{store.display_name(person_b)} to {store.display_name(person_a)}",
        )
    )


if __name__ == "__main__":
    app()
