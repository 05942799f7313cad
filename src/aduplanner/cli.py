"""Command Line Interface for ADU Planner.

This module provides a small CLI for inspecting floor plan JSON files:
room summaries, wall segments, the export projection and lot geometry.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .config import CANVAS_DEFAULTS
from .engine.api import apply as apply_operation
from .engine.api import build_export_snapshot
from .geo.transform import check_adu_fit, lot_boundary_pixels, setback_boundary
from .geom.polygon import best_interior_label_point, polygon_area_sqft
from .geom.walls import format_feet_inches, wall_segments_with_opening_metadata
from .io.parser import load_lot, load_scene, save_scene

app = typer.Typer(
    name="adu-planner",
    help="A CLI tool for inspecting ADU floor plans",
    no_args_is_help=True,
)
console = Console()


@app.command()
def summary(
    scene: Path = typer.Option(..., "--scene", "-s", help="Path to scene JSON file"),
):
    """Show rooms with their areas and the ADU footprint."""
    try:
        scene_obj = load_scene(str(scene))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    ppf = CANVAS_DEFAULTS.pixels_per_foot
    table = Table(title="Rooms")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Vertices", justify="right")
    table.add_column("Area (sq ft)", justify="right")
    table.add_column("Label at", justify="right")

    for room in scene_obj.rooms:
        label = best_interior_label_point(room.vertices)
        table.add_row(
            room.id,
            room.name,
            room.type,
            str(len(room.vertices)),
            str(round(polygon_area_sqft(room.vertices, ppf))),
            f"({label.x:.0f}, {label.y:.0f})",
        )

    console.print(table)
    console.print(
        f"Doors: {len(scene_obj.doors)}  Windows: {len(scene_obj.windows)}  "
        f"Furniture: {len(scene_obj.furniture)}"
    )
    console.print(
        f"ADU footprint: {round(polygon_area_sqft(scene_obj.adu_boundary, ppf))} sq ft"
    )


@app.command()
def walls(
    scene: Path = typer.Option(..., "--scene", "-s", help="Path to scene JSON file"),
):
    """Show every room edge with its openings and effective length."""
    try:
        scene_obj = load_scene(str(scene))
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    for room in scene_obj.rooms:
        table = Table(title=f"{room.name} ({room.id})")
        table.add_column("Edge", justify="right")
        table.add_column("Length")
        table.add_column("Openings")
        table.add_column("Effective")

        segments = wall_segments_with_opening_metadata(
            room,
            scene_obj.doors,
            scene_obj.windows,
            CANVAS_DEFAULTS.grid_size,
            CANVAS_DEFAULTS.pixels_per_foot,
        )
        for i, segment in enumerate(segments):
            openings = ", ".join(f"{o.kind.value} {o.width_feet:g}'" for o in segment.openings)
            table.add_row(
                str(i),
                format_feet_inches(segment.length_feet),
                openings or "-",
                format_feet_inches(segment.effective_length_feet),
            )
        console.print(table)


@app.command()
def export(
    scene: Path = typer.Option(..., "--scene", "-s", help="Path to scene JSON file"),
    output: Path = typer.Option(..., "--out", help="Path to output JSON file"),
    lot: Optional[Path] = typer.Option(None, "--lot", "-l", help="Path to lot JSON file"),
):
    """Write the export projection of a scene as JSON."""
    try:
        scene_obj = load_scene(str(scene))
        lot_obj = load_lot(str(lot)) if lot is not None else None
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    snapshot = build_export_snapshot(scene_obj, lot_obj, CANVAS_DEFAULTS)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        json.dump(snapshot, f, indent=2)

    console.print(
        f"[green]✓[/green] Exported {len(snapshot['rooms'])} rooms "
        f"({snapshot['total_room_area']} sq ft) to {output}"
    )


@app.command()
def lot(
    lot: Path = typer.Option(..., "--lot", "-l", help="Path to lot JSON file"),
    scene: Optional[Path] = typer.Option(
        None, "--scene", "-s", help="Scene whose ADU footprint is checked against the setbacks"
    ),
):
    """Show the lot boundary and setback area in canvas pixels."""
    try:
        lot_obj = load_lot(str(lot))
        scene_obj = load_scene(str(scene)) if scene is not None else None
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    ppf = CANVAS_DEFAULTS.pixels_per_foot
    boundary = lot_boundary_pixels(lot_obj, ppf, CANVAS_DEFAULTS.canvas_center)
    setback = setback_boundary(boundary, lot_obj.setbacks, ppf)

    table = Table(title="Lot")
    table.add_column("Polygon", style="cyan")
    table.add_column("Vertices")
    table.add_row("boundary", " ".join(f"({p.x:.1f}, {p.y:.1f})" for p in boundary) or "-")
    table.add_row("setback", " ".join(f"({p.x:.1f}, {p.y:.1f})" for p in setback) or "-")
    console.print(table)

    if scene_obj is not None:
        fit = check_adu_fit(scene_obj.adu_boundary, setback)
        if fit.fits:
            console.print("[green]✓[/green] ADU fits within the setbacks")
        else:
            outside = fit.overlap_area / (ppf * ppf)
            console.print(f"[red]✗[/red] ADU extends {outside:.1f} sq ft past the setbacks")


@app.command()
def apply(
    scene: Path = typer.Option(..., "--scene", "-s", help="Path to scene JSON file"),
    operation: Path = typer.Option(..., "--op", help="Path to operation JSON file"),
    output: Path = typer.Option(..., "--out", help="Path to output scene JSON file"),
):
    """Apply an operation to a scene and save the result."""
    try:
        scene_obj = load_scene(str(scene))
        with open(operation, encoding="utf-8") as f:
            operation_data = json.load(f)
        new_scene = apply_operation(scene_obj, operation_data, CANVAS_DEFAULTS)
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if new_scene is scene_obj:
        console.print(f"[yellow]![/yellow] Operation {operation_data.get('op')} was rejected")
    else:
        console.print(f"[green]✓[/green] Applied {operation_data.get('op')}")

    save_scene(new_scene, str(output))
    console.print(f"[green]✓[/green] Scene saved to {output}")


if __name__ == "__main__":
    app()
