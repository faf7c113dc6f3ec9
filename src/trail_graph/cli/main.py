"""
Trail Graph CLI - inspect the relation graph of a corpus snapshot
"""

from __future__ import annotations

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from trail_graph.graph.chains import build_chain_structure, build_edge_map
from trail_graph.graph.sibling_sort import SiblingNode, SortConfig, sort_siblings
from trail_graph.graph.store import EdgeStore
from trail_graph.logging_setup import configure_logging
from trail_graph.settings import settings
from trail_graph.snapshot import Snapshot, SnapshotError, load_snapshot

console = Console()

snapshot_option = click.option(
    "--snapshot",
    "snapshot_path",
    default=None,
    help="JSON snapshot file (defaults to TRAIL_GRAPH_SNAPSHOT_PATH)",
)


def open_snapshot(snapshot_path: str | None) -> tuple[Snapshot, EdgeStore]:
    path = snapshot_path or settings.snapshot_path
    if not path:
        raise click.UsageError("No snapshot given; pass --snapshot or set TRAIL_GRAPH_SNAPSHOT_PATH")
    try:
        snap = load_snapshot(path)
    except SnapshotError as e:
        raise click.ClickException(str(e)) from e
    return snap, snap.to_store()


def resolve_relations(snap: Snapshot, refs: tuple[str, ...] | list[str]) -> set[str]:
    uids: set[str] = set()
    for ref in refs:
        uid = snap.resolve_relation(ref)
        if uid is None:
            raise click.BadParameter(f"Unknown relation: {ref}")
        uids.add(uid)
    return uids


def relation_name(snap: Snapshot, uid: str | None) -> str:
    if not uid:
        return ""
    for rel in snap.relations:
        if rel.uid == uid:
            return rel.name or uid
    return uid


@click.group()
@click.option("--log-level", default=None, help="Override TRAIL_GRAPH_LOG_LEVEL")
def cli(log_level):
    """Trail Graph - typed relations between documents"""
    configure_logging(log_level)


@cli.command()
def version():
    """Print the package version"""
    from trail_graph import __version__

    click.echo(__version__)


@cli.command()
@snapshot_option
def relations(snapshot_path):
    """List relation types and their implied rules"""
    snap, _ = open_snapshot(snapshot_path)

    table = Table(title="Relations")
    table.add_column("UID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Implies", style="magenta")

    for rel in snap.relations:
        implies = ", ".join(
            f"{relation_name(snap, r.target_relation_uid)} ({r.direction})" for r in rel.implied_rules
        )
        table.add_row(rel.uid, rel.name, implies or "-")

    console.print(table)


@cli.command()
@snapshot_option
@click.option("--implied-only", is_flag=True, help="Show only derived edges")
def materialize(snapshot_path, implied_only):
    """Show every edge after rule expansion"""
    snap, store = open_snapshot(snapshot_path)
    edges = store.materialize()
    if implied_only:
        edges = [e for e in edges if e.implied]

    if not edges:
        console.print("[yellow]No edges[/yellow]")
        return

    table = Table(title=f"Edges ({len(edges)})")
    table.add_column("From", style="white")
    table.add_column("Relation", style="cyan")
    table.add_column("Label", style="blue")
    table.add_column("To", style="white")
    table.add_column("Implied from", style="magenta")

    for e in edges:
        table.add_row(
            e.from_path,
            relation_name(snap, e.relation_uid),
            e.label or "",
            e.to_path,
            relation_name(snap, e.implied_from_uid) if e.implied else "",
        )

    console.print(table)


@cli.command()
@snapshot_option
@click.argument("path")
@click.option("--relation", "relation_refs", multiple=True, help="Only follow these relations")
def ancestors(snapshot_path, path, relation_refs):
    """Breadth-first ancestors of PATH"""
    snap, store = open_snapshot(snapshot_path)
    found = store.get_ancestors(path, resolve_relations(snap, relation_refs))

    if not found:
        console.print(f"[yellow]No ancestors for {path}[/yellow]")
        return

    table = Table(title=f"Ancestors of {path}")
    table.add_column("Depth", style="cyan", width=6)
    table.add_column("Path", style="white")
    table.add_column("Via", style="green")
    table.add_column("Implied", style="magenta")

    for node in found:
        implied = relation_name(snap, node.implied_from_uid) if node.implied else ""
        table.add_row(str(node.depth), node.path, relation_name(snap, node.via_relation_uid), implied)

    console.print(table)


def _sequential(snap: Snapshot, refs: tuple[str, ...]) -> set[str]:
    return resolve_relations(snap, refs or tuple(settings.sequential_relations))


@cli.command()
@snapshot_option
@click.argument("paths", nargs=-1, required=True)
@click.option("--sequential", "sequential_refs", multiple=True, help="Sequential relations")
def chains(snapshot_path, paths, sequential_refs):
    """Find chains among the sibling PATHS"""
    snap, store = open_snapshot(snapshot_path)
    structure = build_chain_structure(
        paths, build_edge_map(store.get_outgoing, paths), _sequential(snap, sequential_refs)
    )

    for head, chain in structure.chains.items():
        console.print(Panel(" -> ".join(chain), title=f"chain @ {head}", style="green"))
    if structure.disconnected:
        console.print("[bold]Disconnected[/bold]")
        for p in structure.disconnected:
            console.print(f"  {p}")


@cli.command()
@snapshot_option
@click.argument("parent")
@click.option("--relation", "relation_refs", multiple=True, required=True, help="Child -> parent relations")
@click.option("--sequential", "sequential_refs", multiple=True, help="Sequential relations")
@click.option(
    "--chain-sort",
    type=click.Choice(["disabled", "primary", "secondary"]),
    default=None,
    help="Defaults to TRAIL_GRAPH_CHAIN_SORT",
)
def siblings(snapshot_path, parent, relation_refs, sequential_refs, chain_sort):
    """Children of PARENT in sibling order"""
    snap, store = open_snapshot(snapshot_path)
    rel_uids = resolve_relations(snap, relation_refs)

    nodes: list[SiblingNode] = []
    seen: set[str] = set()
    for e in store.get_incoming(parent, rel_uids):
        if e.from_path in seen:
            continue
        seen.add(e.from_path)
        nodes.append(SiblingNode(path=e.from_path, relation_uid=e.relation_uid))

    config = SortConfig(
        chain_sort=chain_sort or settings.chain_sort,
        sequential_relations=_sequential(snap, sequential_refs),
        relation_order=[r.uid for r in snap.relations],
    )
    ordered = sort_siblings(nodes, store.edges_by_source(), config)

    if not ordered:
        console.print(f"[yellow]No children under {parent}[/yellow]")
        return
    for i, node in enumerate(ordered, 1):
        console.print(f"{i:>3}. {node.path} [dim]({relation_name(snap, node.relation_uid)})[/dim]")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
