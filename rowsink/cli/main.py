import click
import json
import logging
from itertools import islice
from dotenv import load_dotenv
from rowsink.config.loader import load_config, DEFAULT_CONFIG, DEFAULT_CONFIG_PATH

# Load .env file automatically
load_dotenv()
from rowsink.core.utils.fs import ensure_directory, create_file_if_missing, iter_jsonl
from rowsink.connectors.sinks.rows import to_json_row

# Import sinks to register them
import rowsink.connectors.sinks  # noqa: F401
from rowsink.connectors import get_sink

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

EXAMPLE_RECORDS = """{"team": "red", "score": 42}
{"team": "blue", "score": 17}
"""


@click.group()
@click.version_option(version="0.1.0", prog_name="rowsink")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose):
    """rowsink: Project records into warehouse table rows."""
    if verbose:
        logging.getLogger("rowsink").setLevel(logging.DEBUG)


@cli.command()
def init():
    """Initialize a new rowsink project."""
    click.echo("Initializing rowsink project...")

    ensure_directory("inputs")

    if create_file_if_missing(DEFAULT_CONFIG_PATH, DEFAULT_CONFIG):
        click.echo(f"Created {DEFAULT_CONFIG_PATH}")
    else:
        click.echo(f"{DEFAULT_CONFIG_PATH} already exists.")

    if create_file_if_missing("inputs/example.jsonl", EXAMPLE_RECORDS):
        click.echo("Created inputs/example.jsonl")
    else:
        click.echo("inputs/example.jsonl already exists.")

    click.echo("\nProject initialized successfully!")
    click.echo("\nNext steps:")
    click.echo("  1. Set your project:  export GCP_PROJECT=my-project")
    click.echo(f"  2. Edit your fields:  {DEFAULT_CONFIG_PATH}")
    click.echo("  3. Check the schema:  rowsink schema")
    click.echo("  4. Load records:      rowsink load inputs/example.jsonl")


@cli.command()
@click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_PATH, help="Config file path")
def schema(config_path):
    """Print the table schema derived from the configured fields."""
    try:
        config = load_config(config_path)
        projector = config.build_projector()
    except Exception as e:
        raise click.ClickException(str(e))

    click.echo(f"Table: {config.destination.table_id}")
    click.echo(json.dumps(projector.schema.to_api_repr(), indent=2))


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_PATH, help="Config file path")
@click.option("--sink", "sink_type", help="Sink type to use instead of the configured one")
@click.option("--dry-run", is_flag=True, help="Print projected rows instead of writing them")
@click.option("--limit", type=int, help="Only read the first N records")
def load(input_path, config_path, sink_type, dry_run, limit):
    """Project JSONL records from INPUT_PATH and write them to the destination table."""
    try:
        config = load_config(config_path)
        projector = config.build_projector()

        records = iter_jsonl(input_path)
        if limit is not None:
            records = islice(records, limit)

        if dry_run:
            for row in projector.rows(records):
                click.echo(json.dumps(to_json_row(row)))
            return

        sink_type = sink_type or config.sink.type
        sink_options = config.sink.config if sink_type == config.sink.type else {}
        sink = get_sink(sink_type, sink_options)

        click.echo(f"Loading {input_path} into {config.destination.table_id} ({sink_type})")
        projector.run(records, sink=sink)
        click.echo("Done.")

    except Exception as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    cli()
