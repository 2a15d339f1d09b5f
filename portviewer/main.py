#!/usr/bin/env python3
"""
PortViewer - Main Entry Point
Run the PortViewer terminal UI, or print the socket table once with --list
"""
import sys
from typing import List, Optional

from portviewer.cli import build_parser, list_connections


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    if args.list:
        try:
            code = list_connections(
                protocol=args.protocol,
                port=args.port,
                process=args.process,
                sort=args.sort,
                descending=args.desc,
                backend=args.backend,
            )
        except ValueError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            sys.exit(2)
        sys.exit(code)

    from portviewer.UI import run_app

    print("Starting PortViewer Terminal UI...")
    print("Press 'q' to quit, 'r' to refresh, 'a' to toggle auto-refresh, 't' to cycle theme")
    print("-" * 80)

    try:
        run_app()
    except KeyboardInterrupt:
        print("\nPortViewer terminated by user")
    except ValueError as e:
        print(f"\nConfiguration error: {e}")
        sys.exit(2)
    except Exception as e:
        print(f"\nError running PortViewer: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
