"""sigmem CLI."""

from __future__ import annotations

from pathlib import Path

import click

from sigmem.config import Config
from sigmem.engine import SigelEngine
from sigmem.exceptions import StorageError
from sigmem.logging_config import setup_logging
from sigmem.sigel import Sigel


def _get_engine(ctx: click.Context) -> SigelEngine:
    return ctx.obj["engine"]


@click.group()
@click.option("--data-dir", envvar="SIGMEM_DATA_DIR", default=None, help="Data directory")
@click.option("--seed", type=int, default=None, help="Seed for reproducible runs")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, ...)")
@click.option("--compress", is_flag=True, help="Save sigels as gzip-compressed JSON")
@click.pass_context
def main(ctx: click.Context, data_dir: str | None, seed: int | None,
         log_level: str | None, compress: bool) -> None:
    """sigmem — pattern learning and memory consolidation for Sigels."""
    config = Config()
    if data_dir:
        config.data_dir = Path(data_dir)
    if seed is not None:
        config.seed = seed
    if log_level:
        config.log_level = log_level
    config.storage.compress = compress
    setup_logging(config)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["engine"] = SigelEngine(config)


@main.command()
@click.argument("name")
@click.pass_context
def create(ctx: click.Context, name: str) -> None:
    """Create an empty sigel."""
    engine = _get_engine(ctx)
    engine.config.ensure_dirs()
    path = engine.save(engine.create(name))
    click.echo(f"Created sigel '{name}' at {path}")


@main.command()
@click.argument("name")
@click.argument("text_dir", type=click.Path(exists=True, file_okay=False))
@click.option("--rate", "-r", default=None, type=float, help="Learning rate (0.001 to 1.0)")
@click.option("--output", "-o", default=None, type=click.Path(), help="Output snapshot path")
@click.pass_context
def train(ctx: click.Context, name: str, text_dir: str, rate: float | None, output: str | None) -> None:
    """Train a new sigel from a directory of .txt files."""
    engine = _get_engine(ctx)
    sigel = engine.create(name)
    if rate is not None:
        sigel.learning_state.learning_rate = max(0.001, min(1.0, rate))
    stats = engine.train_directory(sigel, text_dir)
    path = engine.save(sigel, output)
    click.echo(f"Trained '{name}': {stats.memories_added} memories, "
               f"{stats.patterns} patterns, {stats.samples} self-evaluation samples")
    click.echo(f"Saved to {path}")


@main.command()
@click.argument("sigel_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("text_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--source-id", "-s", default="", help="Source tag for new memories")
@click.pass_context
def ingest(ctx: click.Context, sigel_path: str, text_file: str, source_id: str) -> None:
    """Ingest a text file into an existing sigel."""
    engine = _get_engine(ctx)
    sigel = _load_or_fail(engine, sigel_path)
    text = Path(text_file).read_text(encoding="utf-8")
    stats = engine.ingest(sigel, text, source_id or text_file)
    engine.save(sigel, sigel_path)
    click.echo(f"Ingested {Path(text_file).name}: {stats.memories_added} memories, "
               f"{stats.patterns} patterns")


@main.command()
@click.argument("sigel_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("context", nargs=3)
@click.pass_context
def predict(ctx: click.Context, sigel_path: str, context: tuple[str, str, str]) -> None:
    """Predict the token following a three-token CONTEXT."""
    engine = _get_engine(ctx)
    sigel = _load_or_fail(engine, sigel_path)
    click.echo(engine.predict_next(sigel, list(context)))


@main.command()
@click.argument("sigel_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--dry-run", is_flag=True, help="Report without saving")
@click.pass_context
def consolidate(ctx: click.Context, sigel_path: str, dry_run: bool) -> None:
    """Run one consolidation pass."""
    engine = _get_engine(ctx)
    sigel = _load_or_fail(engine, sigel_path)
    report = engine.consolidate(sigel)
    click.echo("Consolidation report")
    click.echo(f"  Memories analyzed:     {report.memories_analyzed}")
    click.echo(f"  Clusters formed:       {report.clusters_formed}")
    click.echo(f"  Memories consolidated: {report.memories_consolidated}")
    click.echo(f"  Reduction ratio:       {report.memory_reduction_ratio:.3f}")
    click.echo(f"  Processing time:       {report.processing_time:.3f}s")
    if not dry_run:
        engine.save(sigel, sigel_path)


@main.command()
@click.argument("sigel_path", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def status(ctx: click.Context, sigel_path: str) -> None:
    """Show sigel status."""
    engine = _get_engine(ctx)
    st = engine.status(_load_or_fail(engine, sigel_path))
    click.echo(f"Sigel '{st['name']}' ({st['id']})")
    click.echo(f"  Words:               {st['words']}")
    click.echo(f"  Patterns:            {st['patterns']}")
    click.echo(f"  Temporal patterns:   {st['temporal_patterns']}")
    click.echo(f"  Memories:            {st['memories']}")
    click.echo(f"  Training iterations: {st['training_iterations']}")


@main.command()
@click.pass_context
def schedule(ctx: click.Context) -> None:
    """Show the background consolidation schedule."""
    sched = _get_engine(ctx).schedule()
    click.echo(f"Next consolidation:  {sched.next_consolidation.isoformat()}")
    click.echo(f"Interval:            {sched.interval_hours:g}h")
    click.echo(f"Deep interval:       {sched.deep_interval_hours:g}h")


def _load_or_fail(engine: SigelEngine, path: str) -> Sigel:
    try:
        return engine.load(path)
    except StorageError as exc:
        raise click.ClickException(str(exc)) from exc


if __name__ == "__main__":
    main()
