from __future__ import annotations

"""Command line front end for the shape lens."""

from pathlib import Path

import click
from tabulate import tabulate

from shexmap import __version__
from shexmap.config import LensConfig, load_config
from shexmap.errors import ShexMapError
from shexmap.graph_io import load_graph, serialize, write_graph
from shexmap.lens import MapExtension, PathBuilder, generate_from
from shexmap.schema import Schema, load_schema
from shexmap.utils.log_json import configure_all, get_logger
from shexmap.validator import execute

_logger = get_logger("cli")


def _parse_prefixes(values: tuple[str, ...]) -> dict[str, str]:
    prefixes: dict[str, str] = {}
    for value in values:
        name, sep, iri = value.partition("=")
        if not sep or not iri:
            raise click.BadParameter(f"expected PREFIX=IRI, got {value!r}", param_hint="--prefix")
        prefixes[name.strip()] = iri.strip()
    return prefixes


def _load(path: Path, prefixes: dict[str, str]) -> Schema:
    try:
        return load_schema(path, prefixes=prefixes)
    except ShexMapError as exc:
        raise click.ClickException(f"{path}: {exc}") from exc


def _settings(ctx: click.Context) -> LensConfig:
    return ctx.obj["config"]


def _collectors(cfg: LensConfig) -> dict[str, type[MapExtension]]:
    return {cfg.extension_iri: MapExtension}


@click.group()
@click.version_option(__version__)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML configuration file (defaults to $SHEXMAP_CONFIG).",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None) -> None:
    """Map RDF data between ShEx schemas that share map tags."""
    cfg = load_config(config_file)
    configure_all(level=cfg.log_level, max_details_bytes=cfg.max_details_bytes)
    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg


prefix_option = click.option(
    "--prefix",
    "prefix_values",
    multiple=True,
    help="Extra prefix declaration PREFIX=IRI applied to both schemas.",
)


@cli.command(name="map")
@click.argument("source_schema", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("dest_schema", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--focus", required=True, help="Focus node IRI in DATA.")
@click.option("--shape", required=True, help="Source shape label.")
@click.option("--target", required=True, help="Root IRI of the generated graph.")
@click.option("--dest-shape", required=True, help="Destination shape label.")
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--format", "fmt", default=None, help="Output RDF format (default from config).")
@click.option(
    "--shacl",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    multiple=True,
    help="SHACL shapes the generated graph must satisfy.",
)
@prefix_option
@click.pass_context
def map_cmd(
    ctx: click.Context,
    source_schema: Path,
    dest_schema: Path,
    data: Path,
    focus: str,
    shape: str,
    target: str,
    dest_shape: str,
    out: Path | None,
    fmt: str | None,
    shacl: tuple[Path, ...],
    prefix_values: tuple[str, ...],
) -> None:
    """Validate DATA against SOURCE_SCHEMA and rebuild it per DEST_SCHEMA."""
    cfg = _settings(ctx)
    prefixes = _parse_prefixes(prefix_values)
    source = _load(source_schema, prefixes)
    destination = _load(dest_schema, prefixes)
    try:
        focus_node = source.resolve_label(focus)
        target_node = destination.resolve_label(target)
        execute(source, load_graph(data), {focus_node: shape}, extensions=_collectors(cfg))
        graph = generate_from(source, destination, {target_node: dest_shape}, config=cfg)
    except ShexMapError as exc:
        _logger.error("cli.map.failed", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    if shacl:
        from shexmap.validation import check_output

        conforms, report_text = check_output(graph, shacl)
        if not conforms:
            click.echo(report_text, err=True)
            raise click.ClickException("generated graph does not conform to SHACL shapes")

    output_format = fmt or cfg.output_format
    if out is not None:
        write_graph(graph, out, output_format)
        click.echo(f"Wrote {len(graph)} triples to {out}")
    else:
        click.echo(serialize(graph, output_format), nl=False)


@cli.command()
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--shape", default=None, help="Only list tags below this shape.")
@prefix_option
@click.pass_context
def tags(ctx: click.Context, schema_path: Path, shape: str | None, prefix_values: tuple[str, ...]) -> None:
    """List map tags of SCHEMA_PATH and the path leading to each."""
    cfg = _settings(ctx)
    schema = _load(schema_path, _parse_prefixes(prefix_values))
    try:
        labels = [schema.resolve_label(shape)] if shape else list(schema.shapes)
        rows = []
        for label in labels:
            builder = PathBuilder(cfg.extension_iri)
            builder.walk(schema.find(label))
            for raw, path in builder.paths.items():
                name = schema.resolve_iri(raw)
                steps = " / ".join(path.describe())
                rows.append((str(label), str(name), steps))
    except ShexMapError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(tabulate(rows, headers=["Shape", "Tag", "Path"]))


@cli.command()
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("data", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--focus", required=True, help="Focus node IRI in DATA.")
@click.option("--shape", required=True, help="Shape label.")
@prefix_option
@click.pass_context
def bindings(
    ctx: click.Context,
    schema_path: Path,
    data: Path,
    focus: str,
    shape: str,
    prefix_values: tuple[str, ...],
) -> None:
    """Validate DATA and show the tagged values collected."""
    cfg = _settings(ctx)
    schema = _load(schema_path, _parse_prefixes(prefix_values))
    try:
        execute(
            schema,
            load_graph(data),
            {schema.resolve_label(focus): shape},
            extensions=_collectors(cfg),
        )
        extension = schema.extensions.get(cfg.extension_iri)
        collected = extension.bindings if extension is not None else ()
        rows = [(str(b.name), b.value.n3()) for b in collected]
    except ShexMapError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(tabulate(rows, headers=["Tag", "Value"]))


def main() -> None:  # pragma: no cover - console entry point
    cli(obj={})


if __name__ == "__main__":  # pragma: no cover
    main()
