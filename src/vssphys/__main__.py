"""
Check-value printer for the CRC catalog.

Prints every catalog entry (and the folded 32-bit entries) computed over a
test string, 4 hex digits for 16-bit values and 8 for 32-bit values.

Usage:
  python -m vssphys
  python -m vssphys --data "hello" --json
"""

import argparse
import json
import logging
import sys

from .hashes.catalog import CHECK_DATA, check_values, hash_function

logger = logging.getLogger(__name__)


def format_check_values(values: dict[str, int]) -> list[str]:
    """Render check values as "NAME = HEX" lines."""
    lines = []
    for name, value in values.items():
        base = name.split("/")[0]
        wide = "/" not in name and hash_function(base).bits == 32
        digits = 8 if wide else 4
        lines.append(f"{name.upper()} = {value:0{digits}X}")
    return lines


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m vssphys",
        description="Print CRC catalog check values",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Standard check string "123456789"
  python -m vssphys

  # Custom input, machine-readable output
  python -m vssphys --data "hello" --json
        """
    )

    parser.add_argument(
        "--data",
        type=str,
        default=CHECK_DATA.decode("ascii"),
        help="Input text (ASCII). Default: '123456789'."
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit a JSON object of name -> integer value."
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging."
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        data = args.data.encode("ascii")
    except UnicodeEncodeError as e:
        print(f"Error: --data must be ASCII: {e}", file=sys.stderr)
        return 1

    values = check_values(data)
    logger.debug("Computed %d check values over %d bytes", len(values), len(data))

    if args.json:
        print(json.dumps(values, indent=2))
    else:
        for line in format_check_values(values):
            print(line)

    return 0


if __name__ == "__main__":
    sys.exit(main())
