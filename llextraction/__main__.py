"""Run the reference liquid-liquid extraction case from the command line"""
import argparse
import logging
import sys

from llextraction.core.validation import ChemEngError, ConvergenceFailure
from llextraction.separations.extraction.cascade import CascadeResult, StageCascade
from llextraction.separations.extraction.reference_data import XS_TARGET, reference_spec


def _print_table(result: CascadeResult) -> None:
    print(f"{'n':>3} {'xS':>8} {'xD':>8} {'yS':>8} {'yD':>8} {'R':>10} {'E':>10}")
    for r in result.records:
        print(
            f"{r.stage:>3} {r.R.solute:8.4f} {r.R.solvent:8.4f} "
            f"{r.E.solute:8.4f} {r.E.solvent:8.4f} {r.R_flow:10.2f} {r.E_flow:10.2f}"
        )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="llextraction",
        description="Equilibrium stages for the reference liquid-liquid extraction case",
    )
    parser.add_argument("--target", type=float, default=XS_TARGET,
                        help="final raffinate solute mass fraction")
    parser.add_argument("--degree", type=int, default=2,
                        help="polynomial degree of the equilibrium correlations")
    parser.add_argument("--max-stages", type=int, default=130)
    parser.add_argument("--plot", metavar="PATH", help="save the stage diagram to PATH")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        spec = reference_spec(xS_target=args.target, degree=args.degree,
                              max_stages=args.max_stages)
        result = StageCascade(spec).run()
    except ConvergenceFailure as exc:
        print(f"error: {exc}", file=sys.stderr)
        if exc.result is not None:
            _print_table(exc.result)
        return 1
    except ChemEngError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"Number of equilibrium stages required for the specified separation: {result.N}")
    _print_table(result)

    if args.plot:
        from llextraction.separations.extraction.diagram import DiagramRenderer
        DiagramRenderer.from_result(result).save(args.plot)
        print(f"Diagram written to {args.plot}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
