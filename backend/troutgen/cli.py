"""Command line entry point: render, breed and spawn."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from troutgen.config import settings
from troutgen.genetics.model import Genotype, as_genotype, breed, spawn
from troutgen.genetics.rules import GeneticsConfigError
from troutgen.render import OverlayOptions, rasterize_png, render

logger = logging.getLogger(__name__)


def _write(svg: str, out: str | None) -> None:
    if out is None:
        sys.stdout.write(svg + "\n")
        return
    path = Path(out)
    if path.suffix.lower() == ".png":
        path.write_bytes(rasterize_png(svg))
    else:
        path.write_text(svg, encoding="utf-8")
    print(f"  → Saved: {path}", file=sys.stderr)


def _load_genotype(path: str) -> Genotype:
    """A genotype file holds either ``[left, right]`` or an organism with a ``genotype`` key."""
    data: Any = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("genotype")
    return as_genotype(data)


def cmd_render(args: argparse.Namespace) -> int:
    organism = spawn(args.seed)
    _write(render(organism.phenotype, OverlayOptions(seasonal=args.seasonal), args.seed), args.out)
    return 0


def cmd_breed(args: argparse.Namespace) -> int:
    try:
        left = _load_genotype(args.left)
        right = _load_genotype(args.right)
    except (OSError, json.JSONDecodeError, GeneticsConfigError) as e:
        print(f"Cannot read parents: {e}", file=sys.stderr)
        return 1
    child = breed(left, right, args.seed)
    if args.out:
        _write(render(child.phenotype, OverlayOptions(seasonal=args.seasonal), args.seed), args.out)
    print(json.dumps(child.to_dict(), indent=2))
    return 0


async def _spawn_loop(once: bool, interval: float) -> int:
    from troutgen.spawner import Spawner

    try:
        spawner = Spawner.from_settings(settings)
    except ValueError as e:
        print(f"Cannot start spawner: {e}", file=sys.stderr)
        return 1
    while True:
        report = await spawner.run()
        print(json.dumps(report.to_dict()))
        if once:
            return 0 if report.ok else 1
        await asyncio.sleep(interval)


def cmd_spawn(args: argparse.Namespace) -> int:
    return asyncio.run(_spawn_loop(args.once, args.interval))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="troutgen", description="Procedural fish organisms")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("render", help="Spawn a root organism and draw it")
    p.add_argument("--seed", type=int, required=True)
    p.add_argument("--seasonal", action="store_true", help="Draw the seasonal overlay")
    p.add_argument("--out", help="Output .svg or .png file (default: SVG on stdout)")
    p.set_defaults(func=cmd_render)

    p = sub.add_parser("breed", help="Breed two genotypes read from JSON files")
    p.add_argument("--left", required=True)
    p.add_argument("--right", required=True)
    p.add_argument("--seed", type=int, required=True)
    p.add_argument("--seasonal", action="store_true")
    p.add_argument("--out", help="Also draw the child to this .svg or .png file")
    p.set_defaults(func=cmd_breed)

    p = sub.add_parser("spawn", help="Sync the configured ledger")
    p.add_argument("--once", action="store_true", help="Run a single pass and exit")
    p.add_argument("--interval", type=float, default=60.0, help="Seconds between passes")
    p.set_defaults(func=cmd_spawn)
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=getattr(logging, settings.troutgen_log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    args = build_parser().parse_args(argv)
    return args.func(args)
