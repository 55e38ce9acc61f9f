"""Command-line runner for citysim."""

from __future__ import annotations

import argparse

from citysim import logging
from citysim.simulation import Simulation


def _cli(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a citysim scenario.")
    p.add_argument("--config", type=str, default=None, help="YAML config file")
    p.add_argument("--ticks", type=int, default=None, help="Number of ticks")
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Log level for citysim internals (DEEP_DEBUG, DEBUG, INFO, ...)",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _cli(argv)

    log = logging.getLogger("citysim.main")
    sim = Simulation.init(
        config=args.config, logging={"default_level": args.log_level}
    )
    log.setLevel(logging.INFO)

    n_ticks = args.ticks if args.ticks is not None else sim.n_ticks
    for _ in range(n_ticks):
        sim.step()
        log.info(
            f"=== TICK {sim.t} === population={sim.agg.population:.3f} "
            f"food={sim.res.food:.3f} material={sim.res.material:.3f} "
            f"fame={sim.stats.fame:.3f}"
        )

    log.info("Simulation finished.")


if __name__ == "__main__":
    main()
