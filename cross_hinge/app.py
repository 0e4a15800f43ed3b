# -*- coding: utf-8 -*-
"""Command line entry point.

    python -m cross_hinge.app [config.json] [--unlocked] [--percent P] [--verbose]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .core.config import HingeConfig
from .core.controller import HingeController
from .core.errors import HingeError
from .core.sweep import sweep


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cross_hinge", description="Crossed four-bar box hinge analysis")
    parser.add_argument("config", nargs="?", help="hinge configuration JSON (defaults if omitted)")
    parser.add_argument("--unlocked", action="store_true", help="allow configurations without the crossing")
    parser.add_argument("--percent", type=float, default=None, help="also solve the hinge at this slider position (0-100)")
    parser.add_argument("--sweep", type=int, default=0, metavar="STEPS", help="evaluate the travel in STEPS frames")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.config:
            with open(args.config, "r", encoding="utf-8") as f:
                config = HingeConfig.from_json(f.read())
        else:
            config = HingeConfig()
        if args.unlocked:
            config = HingeConfig(config.box, config.pivots, True)
        ctrl = HingeController(config)
    except (OSError, HingeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    out = {"analysis": ctrl.analysis()}
    if args.percent is not None:
        state = ctrl.set_percent(args.percent)
        out["percent"] = ctrl.last_valid_percent
        out["state"] = state.to_dict() if state is not None else None
        out["lid_outline"] = [p.to_dict() for p in ctrl.lid_outline()]
    if args.sweep > 0:
        report = sweep(ctrl.reference, ctrl.lock_mode, ctrl.limits, args.sweep)
        out["sweep"] = report.summary()

    print(json.dumps(out, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
