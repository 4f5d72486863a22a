import argparse
import os
from dataclasses import fields

from bandits import config as defaults
from bandits.config import ExperimentConfig, apply_config_to_argparse, load_config
from bandits.simulator import simulate_parallel, simulate_regrets, summarize


def build_parser():
    ap = argparse.ArgumentParser(
        prog="bandit-sim",
        description="Compare bandit strategies by mean cumulative regret.",
    )
    ap.add_argument("--config", default=None, help="YAML file with defaults")
    ap.add_argument(
        "--probs",
        "--probabilities",
        dest="probabilities",
        type=float,
        nargs="+",
        default=list(defaults.PROBABILITIES),
    )
    ap.add_argument("--algorithm", default="ucb1")
    ap.add_argument("--epsilon", type=float, default=defaults.EPSILON)
    ap.add_argument("--steps", type=int, default=defaults.STEPS)
    ap.add_argument("--runs", type=int, default=defaults.RUNS)
    ap.add_argument("--seed", type=int, default=defaults.SEED)
    ap.add_argument("--prior-mean", type=float, default=defaults.PRIOR_MEAN)
    ap.add_argument("--workers", type=int, default=None)
    ap.add_argument(
        "--compare", action="store_true", help="run ucb1 and epsilon_greedy"
    )
    ap.add_argument("--hist", default=None, help="save a regret histogram here")
    return ap


def run(cfg, algorithm_name):
    arms = cfg.build_arms()
    algorithm = cfg.build_algorithm(algorithm_name)
    if cfg.workers:
        return simulate_parallel(
            cfg.steps, cfg.runs, algorithm, arms, seed=cfg.seed, workers=cfg.workers
        )
    return simulate_regrets(cfg.steps, cfg.runs, algorithm, arms, seed=cfg.seed)


def main(argv=None):
    ap = build_parser()
    args, _ = ap.parse_known_args(argv)
    if args.config:
        try:
            apply_config_to_argparse(ap, load_config(args.config))
        except ValueError as e:
            ap.error(str(e))
    args = ap.parse_args(argv)

    try:
        cfg = ExperimentConfig.from_dict(
            {f.name: getattr(args, f.name) for f in fields(ExperimentConfig)}
        )
    except ValueError as e:
        ap.error(str(e))

    names = ["ucb1", "epsilon_greedy"] if args.compare else [cfg.algorithm]
    results = {}
    for name in names:
        regrets = run(cfg, name)
        results[name] = regrets
        s = summarize(regrets)
        print(
            f"{name}: mean regret {s['mean']:.3f} "
            f"(std {s['std']:.3f}, stderr {s['stderr']:.3f}, runs {s['runs']})"
        )

    if args.hist:
        import matplotlib

        matplotlib.use("Agg")
        from bandits.plot import plot_regret_histogram

        for name, regrets in results.items():
            fig = plot_regret_histogram(regrets, label=name, show=False)
            path = args.hist
            if len(results) > 1:
                root, ext = os.path.splitext(args.hist)
                path = f"{root}_{name}{ext}"
            fig.savefig(path)
    return results


if __name__ == "__main__":
    main()
