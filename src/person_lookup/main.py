"""
CLI Entrypoint for Person Lookup

Runs one search and outputs the candidate list (and optionally one
person's details) as JSON.
"""

import argparse
import asyncio
import json
import sys

from dotenv import load_dotenv

# Load .env file before reading settings
load_dotenv()

from person_lookup.agent import PersonSearchAgent
from person_lookup.config import get_settings

# Parse command-line arguments
def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Person Lookup - Find people (and members of bands, films, shows) on Wikidata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--query", "-q",
        type=str,
        required=True,
        help="Name of a person or group to search for",
    )

    parser.add_argument(
        "--select", "-s",
        type=str,
        default=None,
        help="Entity id (e.g. Q42) to resolve details for",
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file path (default: print to stdout)",
    )

    return parser.parse_args(argv)

# Main entry point of the entire program
async def main(argv=None) -> int:
    args = parse_args(argv)

    agent = PersonSearchAgent(settings=get_settings())
    try:
        candidates = await agent.search(args.query) or []
        result = {
            "query": args.query,
            "candidates": [item.to_dict() for item in candidates],
        }
        if not candidates:
            print("No results found", file=sys.stderr)

        if args.select:
            details = await agent.details(args.select)
            result["details"] = details.to_dict() if details else None
            if details is None:
                print("No details found.", file=sys.stderr)
    finally:
        await agent.close()

    # Format output as JSON
    output = json.dumps(result, indent=2, ensure_ascii=False)

    # Write output
    if args.output: # Write to file
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
        print(f"Results saved to {args.output}", file=sys.stderr)
    else: # Print to stdout
        print(output)

    return 0


def run() -> int:
    return asyncio.run(main())

# Just some standard boilerplate
if __name__ == "__main__":
    sys.exit(run())
