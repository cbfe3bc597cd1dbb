"""CLI interface for s3sync."""

import logging
from typing import Any, Optional

import click

from . import __version__
from .config import DEFAULT_TIMEOUT, LOG_LEVELS, config
from .exceptions import S3SyncError
from .output import OutputFormatter
from .providers import get_provider
from .sync import SyncEngine, SyncOptions

logger = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Configure process logging from the --log-level option."""
    if log_level == "debug":
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        # Enable debug logging for s3sync modules
        logging.getLogger("s3sync").setLevel(logging.DEBUG)
    else:
        # Third-party libraries stay at WARNING
        logging.basicConfig(level=logging.WARNING)
        logging.getLogger("s3sync").setLevel(log_level.upper())


@click.command()
@click.argument("source", metavar="FROM")
@click.argument("dest", metavar="TO")
@click.option(
    "--delete",
    "-d",
    is_flag=True,
    help="Delete files on the destination that do not exist on the source",
)
@click.option(
    "--public", "-P", is_flag=True, help="Make files public when syncing to S3"
)
@click.option(
    "--max-threads",
    type=click.IntRange(min=1),
    default=None,
    help="Use max N parallel threads for file sync (default: 10)",
)
@click.option(
    "--endpoint",
    default=None,
    help="Alternate S3 endpoint URL for S3-compatible services (e.g. MinIO)",
)
@click.option("--region", default=None, help="S3 region name")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Abort the whole sync after N seconds",
)
@click.option(
    "--request-timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_TIMEOUT,
    show_default=True,
    help="Connect/read timeout for a single S3 request in seconds",
)
@click.option(
    "--dry-run", is_flag=True, help="Show what would be synced without syncing"
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Amount of log output (default: info)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", "json_output", is_flag=True, help="Output stats as JSON")
@click.version_option(version=__version__, prog_name="s3sync")
@click.pass_context
def main(
    ctx: Any,
    source: str,
    dest: str,
    delete: bool,
    public: bool,
    max_threads: Optional[int],
    endpoint: Optional[str],
    region: Optional[str],
    timeout: Optional[float],
    request_timeout: float,
    dry_run: bool,
    log_level: Optional[str],
    quiet: bool,
    json_output: bool,
) -> None:
    """Sync files from FROM to TO.

    FROM and TO are local paths or S3 addresses in the form s3://bucket/path.

    Examples:
        s3sync ./public s3://my-bucket/site --delete --public
        s3sync s3://my-bucket/backup ./restore --max-threads 20
        s3sync ./data s3://bucket/data --endpoint http://localhost:9000
    """
    try:
        log_level = (log_level or config.log_level).lower()
        if max_threads is None:
            max_threads = config.max_threads
        endpoint = endpoint or config.endpoint
        region = region or config.region
    except S3SyncError as e:
        OutputFormatter().error(f"ERR: {e}")
        ctx.exit(1)
        return  # Unreachable, but helps type checker

    _configure_logging(log_level)
    out = OutputFormatter(
        json_output=json_output,
        quiet=quiet or log_level in ("error", "warning"),
        show_warnings=not quiet and log_level != "error",
    )

    options = SyncOptions(
        delete=delete,
        public=public,
        max_threads=max_threads,
        dry_run=dry_run,
        timeout=timeout,
    )

    try:
        source_provider = get_provider(source, endpoint, region, request_timeout)
        dest_provider = get_provider(dest, endpoint, region, request_timeout)

        engine = SyncEngine(source_provider, dest_provider, out, options)
        stats = engine.sync(source, dest)
    except KeyboardInterrupt:
        out.warning("\nSync cancelled by user")
        ctx.exit(130)
        return
    except S3SyncError as e:
        out.error(f"ERR: {e}")
        ctx.exit(1)
        return

    if out.json_output:
        out.output_json(stats)

    if stats["failures"] > 0:
        ctx.exit(1)


if __name__ == "__main__":
    main()
