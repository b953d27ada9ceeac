from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, List

from dotenv import load_dotenv
from pydantic import ValidationError

from critique_agent.config import AgentSettings, find_env_file
from critique_agent.extension import CritiqueExtension
from critique_agent.responder import run_agent_turn

log = logging.getLogger("critique_agent")

EXAMPLES: dict[str, dict[str, Any]] = {
    "valid-transaction": {
        "hash": "0x123abc",
        "from": "0xUserAddress",
        "to": "0xRecipientAddress",
        "value": 1.5,
        "data": "0x",
        "chainId": "1",
    },
    "scam-transaction": {
        "hash": "0x456def",
        "from": "0xUserAddress",
        "to": "0xknownScamAddress",
        "value": 2.0,
        "data": "0x",
        "chainId": "1",
    },
    "message": {
        "content": "Hello, can you help me with my investment portfolio?",
        "sender": "0xUserAddress",
    },
    "uncertain": {
        "type": "unknown",
        "data": "complex data that the agent can't confidently process",
    },
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run one event through the critique pipeline")
    parser.add_argument("event", nargs="?", default=None, help="JSON event file, or - for stdin")
    parser.add_argument("--example", choices=sorted(EXAMPLES), help="Use a built-in example event")
    parser.add_argument("--list-examples", action="store_true", help="Print example names and exit")
    parser.add_argument("--context", default=None, help="JSON file with history context")
    parser.add_argument("--threshold", type=float, default=None, help="Confidence threshold for deferral")
    parser.add_argument("--monetary-gate", action="store_true", help="Add the monetary safety gate")
    parser.add_argument("--json", action="store_true", help="Print the critique result as JSON")
    parser.add_argument("--debug", action="store_true", help="Log every pipeline stage")
    return parser


def _load_json(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def _settings(args: argparse.Namespace) -> AgentSettings:
    overrides: dict[str, Any] = {}
    if args.threshold is not None:
        overrides["CONFIDENCE_THRESHOLD"] = args.threshold
    if args.debug:
        overrides["DEBUG"] = True
        overrides["LOG_LEVEL"] = "DEBUG"
    if args.monetary_gate:
        overrides["MONETARY_GATE"] = True
    return AgentSettings(**overrides)


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_examples:
        for name in sorted(EXAMPLES):
            print(name)
        return 0

    env_file = find_env_file()
    if env_file is not None:
        load_dotenv(env_file)

    try:
        settings = _settings(args)
    except ValidationError as e:
        logging.basicConfig(level=logging.ERROR)
        log.error("Configuration error: %s", e)
        return 1

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    try:
        if args.example:
            event = EXAMPLES[args.example]
        elif args.event:
            event = _load_json(args.event)
        else:
            parser.error("an event file or --example is required")
        context = _load_json(args.context) if args.context else {}
    except (OSError, json.JSONDecodeError) as e:
        log.error("Could not read input: %s", e)
        return 1
    if not isinstance(context, dict):
        log.error("Context must be a JSON object, got %s", type(context).__name__)
        return 1

    car, output = asyncio.run(run_agent_turn(CritiqueExtension(settings), event, context))

    if args.json:
        payload = {
            "critique": car.result.model_dump(mode="json", by_alias=True) if car.result else None,
            "deferred": car.deferred,
            "deferReason": car.defer_reason,
            "error": car.error,
            "output": output,
        }
        print(json.dumps(payload, indent=2, default=str))
        return 0

    print(output.get("message", ""))
    if car.explanation and not car.deferred:
        print()
        print(car.explanation)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
