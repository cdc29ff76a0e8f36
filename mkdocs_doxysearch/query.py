#!/usr/bin/env python3
"""
Query a Doxygen search index from the command line.

Usage:
    python -m mkdocs_doxysearch.query docs/html/search cli
    python -m mkdocs_doxysearch.query docs/html/search dns --limit 5
    python -m mkdocs_doxysearch.query docs/html/search check --base-url https://example.org/api
"""

import argparse
import sys

from .index import MalformedEntry, load_shards


def format_entry(entry, base_url=""):
    if len(entry.occurrences) == 1:
        occ = entry.first
        return f"{entry.label}\t{occ.url(base_url)}\t{occ.text}"
    lines = [entry.label]
    for occ in entry.occurrences:
        lines.append(f"    {occ.url(base_url)}\t{occ.text}")
    return "\n".join(lines)


def main(argv=None):
    p = argparse.ArgumentParser(description="Search a Doxygen searchData index by prefix")
    p.add_argument("search_dir", help="Doxygen search/ directory holding all_*.js shards")
    p.add_argument("prefix", help="Symbol name prefix (case-insensitive)")
    p.add_argument(
        "--pattern", default="all_*.js", help="Shard file glob (default: all_*.js)"
    )
    p.add_argument("--limit", type=int, default=0, help="Maximum number of symbols to print")
    p.add_argument("--base-url", default="", help="URL of the Doxygen HTML tree")
    args = p.parse_args(argv)

    try:
        table = load_shards(args.search_dir, args.pattern)
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except MalformedEntry as exc:
        print(f"error: malformed search index: {exc}", file=sys.stderr)
        return 2

    count = 0
    for entry in table.search(args.prefix):
        if args.limit > 0 and count >= args.limit:
            break
        print(format_entry(entry, args.base_url))
        count += 1

    print(f"\n{count} symbols")
    return 0


if __name__ == "__main__":
    sys.exit(main())
