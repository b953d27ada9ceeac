"""Entry point for `python -m critique_agent`."""

from critique_agent.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
