from __future__ import annotations

import argparse

from strategy_sim.formula import FORMULA_EXAMPLES, FormulaError, evaluate_formula, validate_formula


def main() -> None:
    parser = argparse.ArgumentParser(description="Validate a strategy formula and evaluate it for a given N.")
    parser.add_argument("formula", nargs="?")
    parser.add_argument("--n", type=float, default=1.0)
    parser.add_argument("--examples", action="store_true")
    args = parser.parse_args()

    if args.examples or args.formula is None:
        for example in FORMULA_EXAMPLES:
            print(f"{example['formula']:<20} {example['description']} ({example['example']})")
        return

    check = validate_formula(args.formula)
    if not check.valid:
        raise SystemExit(f"Invalid formula [{check.code}]: {check.reason}")

    try:
        value = evaluate_formula(args.formula, args.n)
    except FormulaError as exc:
        raise SystemExit(f"Evaluation failed [{exc.code}]: {exc}") from exc
    print(f"{args.formula} with N={args.n} -> {value}")


if __name__ == "__main__":
    main()
