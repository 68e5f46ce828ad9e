"""Command line entry point: apply filter changes to a query string and evaluate jobs."""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from job_filters.config_loader import ConfigLoader
from job_filters.exceptions import ConfigurationError
from job_filters.jobs.models import Job
from job_filters.logging_config import get_logger, setup_logging
from job_filters.service import JobFilters
from job_filters.store.key_value_store import QueryStringStore

logger = get_logger(__name__)


def _field_value(arg: str) -> Tuple[str, str]:
    """Parse a FIELD=VALUE argument."""
    field, sep, value = arg.partition("=")
    if not sep or not field:
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got '{arg}'")
    return field, value


def load_jobs(path: str, platform_names: Optional[Dict[str, str]] = None) -> List[Job]:
    """
    Load jobs from a JSON file holding a list of job objects.

    Args:
        path: JSON file path, or "-" for stdin
        platform_names: Platform display names used to build search strings

    Returns:
        Jobs with precomputed search strings
    """
    if path == "-":
        data = json.load(sys.stdin)
    else:
        with open(path, "r") as f:
            data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of jobs")
    return [Job.from_dict(item, platform_names) for item in data]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Job Filters - apply filter changes to a query string and evaluate jobs"
    )
    parser.add_argument("--query", default="", help="Current query string")
    parser.add_argument("--config", help="Path to filters config (default: config/filters.yaml)")
    parser.add_argument(
        "--add", action="append", default=[], type=_field_value, metavar="FIELD=VALUE",
        help="Add a filter value (repeatable)",
    )
    parser.add_argument(
        "--remove", action="append", default=[], type=_field_value, metavar="FIELD=VALUE",
        help="Remove a filter value (repeatable)",
    )
    parser.add_argument(
        "--toggle-status", action="append", default=[], metavar="STATUS",
        help="Toggle a group of result statuses (repeatable, applied as one group)",
    )
    parser.add_argument(
        "--toggle-unclassified", action="store_true",
        help="Toggle the unclassified failures view",
    )
    parser.add_argument(
        "--only-superseded", action="store_true", help="Show only superseded jobs"
    )
    parser.add_argument(
        "--clear-field-filters", action="store_true", help="Remove all field filters"
    )
    parser.add_argument("--jobs", help="JSON file with a list of jobs to evaluate ('-' for stdin)")
    parser.add_argument(
        "--explain", action="store_true", help="Print why each hidden job is hidden"
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser


def apply_changes(filters: JobFilters, args: argparse.Namespace) -> None:
    """Apply the filter changes requested on the command line, in a fixed order."""
    if args.clear_field_filters:
        filters.remove_all_field_filters()
    for field, value in args.add:
        filters.add_filter(field, value)
    for field, value in args.remove:
        filters.remove_filter(field, value)
    if args.toggle_status:
        filters.toggle_result_statuses(args.toggle_status)
    if args.toggle_unclassified:
        filters.toggle_unclassified_failures()
    if args.only_superseded:
        filters.set_only_superseded()


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    load_dotenv()

    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level)

    try:
        config = ConfigLoader(args.config).get_filter_config()
    except ConfigurationError as e:
        logger.error(f"Cannot load filter config: {e}")
        return 2

    store = QueryStringStore.from_query_string(args.query)
    filters = JobFilters(store, config=config)
    apply_changes(filters, args)

    output: Dict[str, Any] = {"query": store.to_query_string()}

    if args.jobs:
        jobs = load_jobs(args.jobs, config.platform_names)
        if args.explain:
            output["jobs"] = [
                {"id": job.id, **filters.evaluate_job(job).to_dict()} for job in jobs
            ]
        else:
            output["jobs"] = [job.model_dump() for job in filters.filter_jobs(jobs)]
        logger.info(f"Evaluated {len(jobs)} jobs")

    print(json.dumps(output, indent=2))
    filters.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
