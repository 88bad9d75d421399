"""
carbonmix/run.py

Command-line entry point for generating carbon-intensity and generation-mix
series.

Responsibilities
----------------
- Parse the requested range, source and optional reference time.
- Build the configuration from the environment and run one request through
  the ``SourceAdapter``.
- Print the result to stdout as a table, CSV or JSON.

Conventions
-----------
- All timestamps are handled in UTC.
- Configuration and not-implemented errors are reported on stderr with exit
  status 2; a live fetch that falls back still exits 0.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from .config import load_config
from .errors import ConfigurationError, SourceNotImplementedError
from .series import to_frame
from .sources import Source, SourceAdapter
from .timeaxis import RangeSelector, format_tick_time, parse_utc


def render(bundle, fmt: str) -> str:
    """Return ``bundle`` formatted as ``table``, ``csv`` or ``json``."""
    if fmt == "json":
        return json.dumps(bundle.to_records(), indent=2)

    df = to_frame(bundle)
    if fmt == "csv":
        return df.to_csv(float_format="%.4f")

    df.index = [format_tick_time(ts) for ts in df.index]
    origin = "simulated" if bundle.simulated else "live"
    header = f"{bundle.source.label}: {len(bundle)} points ({origin})"
    return f"{header}\n{df.to_string(float_format=lambda v: f'{v:.3f}')}"


def main(argv=None):
    """CLI entry point.

    Args:
        argv: Optional list of CLI arguments (useful for testing).

    Returns:
        int: Exit code (0 on success, 2 on a configuration error).
    """
    parser = argparse.ArgumentParser(description="Generation mix and carbon intensity series")
    parser.add_argument(
        "--range", dest="rng", choices=[r.value for r in RangeSelector], default="24h"
    )
    parser.add_argument("--source", choices=[s.value for s in Source], default="mock")
    parser.add_argument(
        "--now",
        type=parse_utc,
        help="End of the window as ISO-8601 (default: current UTC time)",
    )
    parser.add_argument("--format", dest="fmt", choices=["table", "csv", "json"], default="table")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )

    try:
        adapter = SourceAdapter(load_config())
        bundle = asyncio.run(adapter.generate(args.rng, args.source, now=args.now))
    except (ConfigurationError, SourceNotImplementedError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    print(render(bundle, args.fmt))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
