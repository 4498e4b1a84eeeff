"""
Import commands: ``sch``, ``lib`` and ``pcb``.

Each command imports one file and prints either a summary table or the
full imported record as JSON.
"""

from __future__ import annotations

import json
from typing import Any, List

from rich.console import Console
from rich.table import Table

from hwt_kicad.config import Config
from hwt_kicad.io import import_pcb_file, import_schematic_file, import_symbol_library_file
from hwt_kicad.models.component import Component
from hwt_kicad.models.layout import Layout
from hwt_kicad.models.schematic import SchematicSheet


def run_schematic(args, config: Config) -> int:
    sheet = import_schematic_file(
        args.file,
        name=config.import_.sheet_name,
        id_source=config.import_.make_id_source(),
        strict=config.import_.strict,
    )
    if args.format == "json":
        _print_json(sheet.to_dict())
    else:
        _print_schematic(sheet, quiet=config.defaults.quiet)
    return 0


def run_library(args, config: Config) -> int:
    components = import_symbol_library_file(
        args.file,
        id_source=config.import_.make_id_source(),
        strict=config.import_.strict,
    )
    if args.format == "json":
        _print_json([c.to_dict() for c in components])
    else:
        _print_library(components, args.file, quiet=config.defaults.quiet)
    return 0


def run_pcb(args, config: Config) -> int:
    layout = import_pcb_file(
        args.file,
        id_source=config.import_.make_id_source(),
        strict=config.import_.strict,
    )
    if args.format == "json":
        _print_json(layout.to_dict())
    else:
        _print_layout(layout, args.file, quiet=config.defaults.quiet)
    return 0


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def _summary_table(title: str, counts: dict) -> Table:
    table = Table(title=title, show_header=False)
    table.add_column("Item", style="dim")
    table.add_column("Value")
    for key, value in counts.items():
        table.add_row(key.replace("_", " "), "-" if value is None else str(value))
    return table


def _print_schematic(sheet: SchematicSheet, quiet: bool = False) -> None:
    console = Console()
    console.print(_summary_table(f"Schematic: {sheet.name}", sheet.summary()))
    if quiet or not sheet.symbols:
        return

    table = Table(title="Symbols")
    table.add_column("Reference", style="cyan")
    table.add_column("Value")
    table.add_column("Library ID")
    table.add_column("Position", justify="right")
    for sym in sorted(sheet.symbols, key=lambda s: s.reference):
        table.add_row(
            sym.reference,
            sym.value,
            sym.lib_id,
            f"({sym.position.x:.2f}, {sym.position.y:.2f})",
        )
    console.print(table)


def _print_library(components: List[Component], filename: str, quiet: bool = False) -> None:
    console = Console()
    if not components:
        console.print(f"[yellow]No symbols found in {filename}[/yellow]")
        return

    table = Table(title=f"Symbols: {filename}")
    table.add_column("Name", style="cyan")
    table.add_column("Pins", justify="right")
    table.add_column("Value")
    table.add_column("Footprint")
    for comp in components:
        table.add_row(comp.component_type, str(comp.pin_count), comp.value or "", comp.footprint or "")
    console.print(table)
    if not quiet:
        console.print(f"\n{len(components)} symbols")


def _print_layout(layout: Layout, filename: str, quiet: bool = False) -> None:
    console = Console()
    console.print(_summary_table(f"PCB: {filename}", layout.summary()))
    if quiet or not layout.components:
        return

    table = Table(title="Footprints")
    table.add_column("Reference", style="cyan")
    table.add_column("Value")
    table.add_column("Footprint")
    table.add_column("Side")
    table.add_column("Pads", justify="right")
    for comp in sorted(layout.components, key=lambda c: c.reference):
        table.add_row(comp.reference, comp.value, comp.footprint, str(comp.layer), str(len(comp.pads)))
    console.print(table)
