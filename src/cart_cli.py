#!/usr/bin/env python3
"""
Apply the discounts described in a scenario file and print the cart breakdown.

The scenario is a JSON document with "products", "items" and "discounts".
The breakdown is printed as JSON and can also be written to --output.

Env:
  CART_DISCOUNTS_LOG_LEVEL sets the default log level (a .env file is honored).
"""
from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from errors import InvalidArgument
from pricing import summarize
from scenario import load_scenario

LOG_LEVEL_ENV = "CART_DISCOUNTS_LOG_LEVEL"

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str]) -> None:
    name = (level or os.getenv(LOG_LEVEL_ENV) or "WARNING").upper()
    if not isinstance(logging.getLevelName(name), int):
        raise SystemExit(f"Unknown log level: {name}")
    logging.basicConfig(level=name, format="%(asctime)s - %(levelname)s - %(message)s")


def write_artifact(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("scenario", type=Path, help="Path to the scenario JSON file")
    parser.add_argument("--output", type=Path, help="Also write the breakdown JSON here")
    parser.add_argument("--log-level", help=f"Overrides ${LOG_LEVEL_ENV} (default WARNING)")
    args = parser.parse_args(argv)

    load_dotenv()
    configure_logging(args.log_level)

    if not args.scenario.is_file():
        raise SystemExit(f"Scenario file not found: {args.scenario}")
    try:
        scenario = load_scenario(args.scenario)
    except InvalidArgument as exc:
        raise SystemExit(f"Invalid scenario: {exc}") from exc

    scenario.cart.apply_discounts()
    for entry in scenario.audit.entries():
        logger.debug("%s: %s", entry.event, entry.details)
    report = json.dumps(summarize(scenario.cart).as_dict(), indent=2)
    print(report)
    if args.output:
        saved = write_artifact(args.output, report + "\n")
        logger.info("Saved breakdown to %s", saved)


if __name__ == "__main__":
    main()
