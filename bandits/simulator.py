import copy
import os
from concurrent.futures import ProcessPoolExecutor

import numpy as np

from bandits.arms import best_mean
from bandits.logger import get_logger

logger = get_logger(__name__)


class SimulationCancelled(RuntimeError):
    """cancel トークンがセットされたため、シミュレーションを途中で打ち切った。"""


def _check_args(steps, runs, arms):
    # 設定ミスはラウンドを 1 回も回す前に報告する
    if isinstance(steps, bool) or not isinstance(steps, (int, np.integer)):
        raise ValueError(f"steps must be an int, got {steps!r}")
    if steps < 0:
        raise ValueError(f"steps must be >= 0, got {steps}")
    if isinstance(runs, bool) or not isinstance(runs, (int, np.integer)):
        raise ValueError(f"runs must be an int, got {runs!r}")
    if runs < 1:
        raise ValueError(f"runs must be >= 1, got {runs}")
    if len(arms) == 0:
        raise ValueError("at least one arm is required")


def _check_cancel(cancel, run):
    if cancel is not None and cancel.is_set():
        raise SimulationCancelled(f"cancelled before run {run}")


def run_replicate(steps, algorithm, arms, rng, history=None):
    """
    1 回分の独立な試行（replicate）を steps ラウンド回し、累積後悔を返す。

    各ラウンド t = 1..steps で

        a      = algorithm.select(K, t)
        reward = arms[a].draw(rng)
        learner.update(a, reward)
        regret += max_j p_j - reward

    ここでの後悔は「実際に得た報酬」で測る（realized regret）。
    教科書的な max_j p_j - p_{a_t} と期待値は一致するが、ラウンド単位では
    ノイズが大きく、引いた腕が 1 を返して max_j p_j < 1 なら負にもなる。
    これはバグではなく、この後悔の定義の性質。

    history（長さ steps の配列）を渡すと、各ラウンド後の累積後悔を書き込む。

    試行の間だけ algorithm.rng を rng に差し替え、終わったら元の Generator に戻す。
    """
    n_arms = len(arms)
    best = best_mean(arms)

    previous_rng = algorithm.rng
    algorithm.rng = rng
    try:
        algorithm.initialize(n_arms)
        learner = algorithm.learner

        cumulative_regret = 0.0
        for t in range(1, steps + 1):
            action = algorithm.select(n_arms, t)
            reward = arms[action].draw(rng)
            learner.update(action, reward)
            cumulative_regret += best - reward
            if history is not None:
                history[t - 1] = cumulative_regret
    finally:
        algorithm.rng = previous_rng
    return cumulative_regret


def simulate_regrets(steps, runs, algorithm, arms, seed=None, rng=None, cancel=None):
    """
    runs 回の独立試行を順番に回し、試行ごとの累積後悔を (runs,) の配列で返す。

    乱数は 1 本の Generator（rng、なければ default_rng(seed)）を腕と
    アルゴリズムで順番に共有する。seed と設定が同じなら出力は完全に一致する。
    cancel（is_set() を持つオブジェクト）は試行の境目でだけ確認する。
    """
    _check_args(steps, runs, arms)
    if rng is None:
        rng = np.random.default_rng(seed)

    regrets = np.zeros(runs)
    for run in range(runs):
        _check_cancel(cancel, run)
        regrets[run] = run_replicate(steps, algorithm, arms, rng)
        logger.debug("run %d: cumulative regret %.3f", run, regrets[run])
    return regrets


def simulate(steps, runs, algorithm, arms, seed=None, rng=None, cancel=None):
    """runs 回の独立試行の累積後悔の平均（Monte Carlo 推定）を返す。"""
    regrets = simulate_regrets(
        steps, runs, algorithm, arms, seed=seed, rng=rng, cancel=cancel
    )
    mean_regret = float(np.mean(regrets))
    logger.info(
        "%r: steps=%d runs=%d arms=%s mean regret=%.4f",
        algorithm,
        steps,
        runs,
        [arm.mean for arm in arms],
        mean_regret,
    )
    return mean_regret


def regret_curves(steps, runs, algorithm, arms, seed=None, rng=None, cancel=None):
    """
    all_regrets[run, t] に「run 回目の試行の t+1 ラウンド目までの累積後悔」を
    入れた (runs, steps) の配列を返す。

    np.average(all_regrets, axis=0) がステップごとの平均後悔曲線になる。
    乱数の使い方は simulate_regrets と同じなので、同じ seed なら最終列
    all_regrets[:, -1] は simulate_regrets の結果と一致する。
    """
    _check_args(steps, runs, arms)
    if rng is None:
        rng = np.random.default_rng(seed)

    all_regrets = np.zeros((runs, steps))
    for run in range(runs):
        _check_cancel(cancel, run)
        run_replicate(steps, algorithm, arms, rng, history=all_regrets[run])
    return all_regrets


def _run_block(steps, algorithm, arms, seeds):
    # ワーカープロセス側：試行ごとに独立した乱数列を使う
    return [
        run_replicate(steps, algorithm, arms, np.random.default_rng(s))
        for s in seeds
    ]


def simulate_parallel(
    steps, runs, algorithm, arms, seed=None, workers=None, cancel=None
):
    """
    runs 回の試行をプロセスプールで並列に回し、(runs,) の配列を返す。

    試行ごとに SeedSequence(seed).spawn(runs) の子シードを割り当てるので、
    試行同士の乱数は相関せず、結果はワーカー数によらない。
    各タスクは連続した試行番号のブロックを受け持ち、結果配列の自分の範囲にだけ
    書き込む（ロック不要）。cancel は各ブロックの境目で確認し、
    セットされていれば残りのタスクを取り消して SimulationCancelled を送出する。

    注意：順次版 simulate_regrets とは乱数列の割り当てが違うため、
    同じ seed でも数値は一致しない（どちらも単独では再現可能）。
    """
    _check_args(steps, runs, arms)
    if workers is None:
        workers = os.cpu_count() or 1
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")

    children = np.random.SeedSequence(seed).spawn(runs)
    block = max(1, -(-runs // (workers * 4)))
    starts = range(0, runs, block)

    regrets = np.zeros(runs)
    with ProcessPoolExecutor(max_workers=workers) as executor:
        futures = [
            (
                start,
                executor.submit(
                    _run_block,
                    steps,
                    copy.deepcopy(algorithm),
                    arms,
                    children[start : start + block],
                ),
            )
            for start in starts
        ]
        for start, future in futures:
            if cancel is not None and cancel.is_set():
                for _, f in futures:
                    f.cancel()
                raise SimulationCancelled(f"cancelled before run {start}")
            values = future.result()
            regrets[start : start + len(values)] = values

    logger.info(
        "%r: steps=%d runs=%d workers=%d mean regret=%.4f (parallel)",
        algorithm,
        steps,
        runs,
        workers,
        float(np.mean(regrets)),
    )
    return regrets


def summarize(regrets):
    """累積後悔の配列から平均・標準偏差・標準誤差などをまとめる。"""
    regrets = np.asarray(regrets, dtype=np.float64)
    if regrets.size == 0:
        raise ValueError("no regrets to summarize")
    std = float(np.std(regrets, ddof=1)) if regrets.size > 1 else 0.0
    return {
        "runs": int(regrets.size),
        "mean": float(np.mean(regrets)),
        "std": std,
        "stderr": std / float(np.sqrt(regrets.size)),
        "min": float(np.min(regrets)),
        "max": float(np.max(regrets)),
    }
