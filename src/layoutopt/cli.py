from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from pydantic import ValidationError

from .analyzer import analyze_structs
from .config import Settings, get_settings
from .errors import LayoutError
from .export import export_dict, to_export_format
from .io import load_memory_report, load_struct_definitions, write_json, write_layout_csv
from .layout import compute_layout
from .models import Architecture, Layout, MemoryReport, StructDefinition
from .optimizer import optimize
from .report import render_markdown, write_report
from .sample_data import generate_sample_data
from .type_table import parse_architecture

app = typer.Typer(add_completion=False)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: Exception) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=2)


def _settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as exc:
        _fail(exc)


def _resolve_arch(arch: Optional[str], settings: Settings) -> Architecture:
    return parse_architecture(arch) if arch else settings.architecture


def _load(input: Path) -> List[StructDefinition]:
    if not input.exists():
        raise typer.BadParameter(f"{input} does not exist", param_hint="--input")
    return load_struct_definitions(input)


def _layouts(report: MemoryReport) -> Dict[str, Layout]:
    return {s.analysis.name: s.analysis.layout for s in report.structs}


@app.command()
def analyze(
    input: Path = typer.Option(..., "--input", help="Path to a JSON file of struct definitions"),
    arch: Optional[str] = typer.Option(None, "--arch", help="amd64, arm64 or 386"),
    line_size: Optional[int] = typer.Option(None, "--line-size", min=1, help="Cache line size in bytes"),
    strict: Optional[bool] = typer.Option(None, "--strict/--permissive", help="Fail on unknown types"),
    out_dir: Optional[Path] = typer.Option(None, help="Output directory"),
) -> None:
    settings = _settings()
    out_dir = out_dir or settings.output_dir
    try:
        report = analyze_structs(
            _load(input),
            _resolve_arch(arch, settings),
            line_size=line_size or settings.cache_line_size,
            strict=settings.strict_types if strict is None else strict,
            source=str(input),
        )
    except LayoutError as exc:
        _fail(exc)

    out_dir.mkdir(parents=True, exist_ok=True)

    summary_path = out_dir / "summary.json"
    summary_path.write_text(report.model_dump_json(indent=2), encoding="utf-8")

    export_format = to_export_format(_layouts(report), report.architecture, exported_at=report.generated_at)
    export_path = write_json(export_dict(export_format), out_dir / "export.json")
    csv_path = write_layout_csv(_layouts(report), out_dir / "layout.csv")
    outputs = write_report(report, out_dir)

    typer.echo(f"Wrote {summary_path}")
    typer.echo(f"Wrote {export_path}")
    typer.echo(f"Wrote {csv_path}")
    typer.echo(f"Wrote {outputs['markdown']}")


@app.command()
def export(
    input: Path = typer.Option(..., "--input", help="Path to a JSON file of struct definitions"),
    arch: Optional[str] = typer.Option(None, "--arch", help="amd64, arm64 or 386"),
    output: Path = typer.Option(Path("./export.json"), "--output", help="Export file"),
) -> None:
    settings = _settings()
    try:
        target = _resolve_arch(arch, settings)
        layouts = {
            d.name: compute_layout(d.fields, target, strict=settings.strict_types)
            for d in _load(input)
        }
        export_format = to_export_format(layouts, target)
    except LayoutError as exc:
        _fail(exc)
    write_json(export_dict(export_format), output)
    typer.echo(f"Wrote {output}")


@app.command(name="optimize")
def optimize_cmd(
    input: Path = typer.Option(..., "--input", help="Path to a JSON file of struct definitions"),
    arch: Optional[str] = typer.Option(None, "--arch", help="amd64, arm64 or 386"),
) -> None:
    settings = _settings()
    try:
        target = _resolve_arch(arch, settings)
        results = [(d.name, optimize(d.fields, target, strict=settings.strict_types)) for d in _load(input)]
    except LayoutError as exc:
        _fail(exc)

    for name, result in results:
        if result.already_optimal:
            typer.echo(f"{name}: {result.original.total_size} bytes, already optimal")
        else:
            typer.echo(
                f"{name}: {result.original.total_size} -> {result.optimized.total_size} bytes"
                f" (-{result.bytes_saved})"
            )
            typer.echo(f"  order: {', '.join(result.reordered_fields)}")


@app.command(name="sample-data")
def sample_data(
    out_dir: Path = typer.Option(Path("./sample_data"), help="Output directory"),
) -> None:
    path = generate_sample_data(out_dir)
    typer.echo(f"Sample structs written to {path}")


@app.command(name="dump-markdown")
def dump_markdown(
    input: Path = typer.Option(..., "--input", help="Path to summary.json"),
) -> None:
    if not input.exists():
        raise typer.BadParameter(f"{input} does not exist", param_hint="--input")
    try:
        report = load_memory_report(input)
    except LayoutError as exc:
        _fail(exc)
    typer.echo(render_markdown(report))


if __name__ == "__main__":
    app()
