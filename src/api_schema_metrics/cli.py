"""CLI entry point for api-schema-metrics."""

import json
import logging
from pathlib import Path

import click
import yaml

from api_schema_metrics.analysis import analyze, extract_schema_groups
from api_schema_metrics.config import AnalysisConfig
from api_schema_metrics.exceptions import SchemaMetricsError
from api_schema_metrics.metrics.documentation import calculate_documentation_metrics
from api_schema_metrics.metrics.structure import calculate_schema_size, calculate_structure_size
from api_schema_metrics.parser.detect import detect_version, load_document
from api_schema_metrics.parser.normalize import normalize
from api_schema_metrics.parser.resolver import resolve_refs


def _load_doc(file_path: Path, resolve: bool) -> dict:
    """Load an API document and inline its local references."""
    try:
        doc = load_document(file_path)
        if resolve:
            doc = resolve_refs(doc)
    except SchemaMetricsError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Loaded {file_path} (version: {detect_version(doc)})", err=True)
    return doc


def _render(data, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def _emit(data, output: Path | None, fmt: str) -> None:
    text = _render(data, fmt)
    if output is None:
        click.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Saved to {output}", err=True)


def _doc_options(func):
    func = click.option("--no-resolve", is_flag=True, help="Skip $ref resolution (document is already resolved).")(func)
    func = click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")(func)
    func = click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file path (default: stdout).")(func)
    func = click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))(func)
    return func


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log progress and grouping decisions.")
def main(verbose: bool):
    """API Schema Metrics: group payload schemas and measure API documents."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@_doc_options
@click.option("--ignore", multiple=True, help="Extra schema keyword to ignore when comparing (repeatable).")
def schemas(doc_path: Path, output: Path | None, fmt: str, no_resolve: bool, ignore: tuple[str, ...]):
    """Group structurally equivalent request/response schemas."""
    doc = _load_doc(doc_path, resolve=not no_resolve)
    _, groups = extract_schema_groups(doc, AnalysisConfig.from_env(extra_ignored=ignore))
    click.echo(f"Found {len(groups)} schema groups.", err=True)
    _emit([g.model_dump(mode="json") for g in groups], output, fmt)


@main.command()
@_doc_options
@click.option("--ignore", multiple=True, help="Extra schema keyword to ignore when comparing (repeatable).")
def structure(doc_path: Path, output: Path | None, fmt: str, no_resolve: bool, ignore: tuple[str, ...]):
    """Compute structure and schema size metrics."""
    doc = _load_doc(doc_path, resolve=not no_resolve)
    normalized, groups = extract_schema_groups(doc, AnalysisConfig.from_env(extra_ignored=ignore))
    result = {
        "structure_size": calculate_structure_size(normalized).model_dump(mode="json"),
        "schema_size": calculate_schema_size(normalized, groups).model_dump(mode="json"),
    }
    _emit(result, output, fmt)


@main.command()
@_doc_options
def docs(doc_path: Path, output: Path | None, fmt: str, no_resolve: bool):
    """Compute documentation readability metrics."""
    doc = _load_doc(doc_path, resolve=not no_resolve)
    normalized = normalize(doc)
    _emit(calculate_documentation_metrics(normalized).model_dump(mode="json"), output, fmt)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for all reports.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("--no-resolve", is_flag=True, help="Skip $ref resolution (document is already resolved).")
@click.option("--ignore", multiple=True, help="Extra schema keyword to ignore when comparing (repeatable).")
def run(doc_path: Path, output: Path, fmt: str, no_resolve: bool, ignore: tuple[str, ...]):
    """Full pipeline: load -> normalize -> group schemas -> all metrics."""
    # Step 1: Load
    doc = _load_doc(doc_path, resolve=not no_resolve)

    # Step 2: Analyze
    click.echo("Analyzing schemas and metrics...", err=True)
    report = analyze(doc, AnalysisConfig.from_env(extra_ignored=ignore))

    # Step 3: Write
    output.mkdir(parents=True, exist_ok=True)
    data = report.model_dump(mode="json")
    files = {
        f"schemas.{fmt}": data["schema_groups"],
        f"structure.{fmt}": {"structure_size": data["structure_size"], "schema_size": data["schema_size"]},
        f"documentation.{fmt}": data["documentation"],
    }
    for filename, content in files.items():
        file_path = output / filename
        file_path.write_text(_render(content, fmt), encoding="utf-8")
        click.echo(f"  Created {file_path}", err=True)

    click.echo(f"Done! {len(report.schema_groups)} schema groups, {len(files)} files in {output}", err=True)
