from __future__ import annotations

import argparse
import logging


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="orbitcam", description="Smoothed orbit camera demo (IRUN monorepo)")
    parser.add_argument(
        "--smoke",
        action="store_true",
        help="Run briefly offscreen and exit (for quick verification).",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help="Path to settings JSON (key bindings, input gains, damping rates).",
    )
    parser.add_argument(
        "--cameras",
        type=int,
        default=0,
        help="Extra orbit cameras to drive alongside the main view (drawn as axis markers).",
    )
    parser.add_argument(
        "--error-log",
        default=None,
        help="Optional file that receives per-frame errors.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    if args.cameras < 0:
        parser.error("--cameras must be >= 0")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ShowBase is imported lazily so `--help` and argument errors stay cheap.
    from orbitcam.app import run
    from orbitcam.app_config import RunConfig

    run(
        RunConfig(
            smoke=bool(args.smoke),
            settings_path=args.settings,
            extra_cameras=int(args.cameras),
            error_log_path=args.error_log,
        )
    )


if __name__ == "__main__":
    main()
