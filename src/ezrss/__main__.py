"""Dev CLI for ezrss. Usage: python -m ezrss <show> [<show> ...]"""

from __future__ import annotations

import sys


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python -m ezrss <show> [<show> ...]", file=sys.stderr)
        sys.exit(1)

    from ezrss import export_markdown, search
    from ezrss.config import load_config

    shows = sys.argv[1:]
    try:
        results = search(shows, load_config())
        items = results.all()
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for show, payload in results.errors.items():
        print(f"Search for '{show}' failed: {payload[:200]}", file=sys.stderr)

    print(export_markdown(items))


if __name__ == "__main__":
    main()
