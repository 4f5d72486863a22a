import math

import numpy as np

from bandits.learner import MeanLearner


def argmax(xs):
    """
    xs の最大値を取るインデックスを返す。

    最大値が複数あるときは「最初の要素」を返す（決め打ちタイブレーク）。
    np.argmax と同じ振る舞いで、同率なら番号の小さい腕が選ばれやすい偏りが残る。
    この偏りは意図したもので、ランダムタイブレークにはしない。
    """
    return int(np.argmax(xs))


class Algorithm:
    """
    行動選択アルゴリズム（selector）の基底クラス。

    - learner : 価値推定 Q(a) を持つ学習器（アルゴリズムが専有する）
    - rng     : 探索に使う乱数源。シミュレータは 1 回の試行の間だけこれを
                差し替え、腕とアルゴリズムで 1 本の乱数列を順番に共有する
                （試行が終わると元の Generator に戻る）

    選択ロジック自体は状態を持たず、可変な状態はすべて learner 側にある。
    """

    def __init__(self, learner=None, rng=None):
        self.learner = learner if learner is not None else MeanLearner()
        self.rng = rng if rng is not None else np.random.default_rng()

    def initialize(self, n_arms):
        self.learner.initialize(n_arms)

    def _check_ready(self, n_arms):
        if not self.learner.initialized:
            raise RuntimeError("initialize() must be called before select()")
        if n_arms != self.learner.n_arms:
            raise ValueError(
                f"select() called with {n_arms} arms, "
                f"learner holds {self.learner.n_arms}"
            )

    def select(self, n_arms, round_index):
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}()"


class EpsilonGreedy(Algorithm):
    """
    ε-greedy で腕を選ぶ。

    - 確率 ε で探索：K 本の腕から一様ランダムに選ぶ
    - 確率 1-ε で活用：現在の Q が最大の腕を選ぶ（同率なら最初の腕）

    初期状態では Q がすべて prior_mean で等しいので、活用側では必ず腕 0 が選ばれる。
    ε = 0 なら常に活用、ε = 1 なら学習状態によらず常に一様探索になる。
    """

    def __init__(self, epsilon, learner=None, rng=None):
        epsilon = float(epsilon)
        if not 0.0 <= epsilon <= 1.0:
            raise ValueError(f"epsilon must be in [0, 1], got {epsilon}")
        super().__init__(learner=learner, rng=rng)
        self.epsilon = epsilon

    def select(self, n_arms, round_index):
        self._check_ready(n_arms)
        if self.rng.random() < self.epsilon:
            # 探索
            return int(self.rng.integers(0, n_arms))
        # 活用
        return argmax(self.learner.mean_estimates)

    def __repr__(self):
        return f"EpsilonGreedy(epsilon={self.epsilon!r})"


class UCB1(Algorithm):
    """
    UCB1（Upper Confidence Bound）で腕を選ぶ。

    各腕のスコアを

        score_i = Q_i + sqrt(2 * ln(t) / n_i)

    として最大の腕を選ぶ。第 2 項は「不確かさへのボーナス」で、
    n_i が増えると縮み、経過ラウンド t とともにゆっくり（対数的に）増える。
    そのため ε のような調整パラメータなしで探索と活用が自動的に切り替わる。

    ボーナスは n_i = 0 で定義できないので、未試行の腕があればまずそれを
    番号の小さい順に選ぶ（最初の K ラウンドで全腕を 1 回ずつ引く）。
    t はシミュレーション内の 1 始まりのラウンド番号。
    """

    def select(self, n_arms, round_index):
        self._check_ready(n_arms)
        if round_index < 1:
            raise ValueError(f"round_index must be >= 1, got {round_index}")

        counts = self.learner.pull_counts
        untried = np.flatnonzero(counts == 0)
        if len(untried) > 0:
            return int(untried[0])

        bonus = np.sqrt(2.0 * math.log(round_index) / counts)
        return argmax(self.learner.mean_estimates + bonus)


ALGORITHMS = {
    "ucb1": UCB1,
    "epsilon_greedy": EpsilonGreedy,
    "egreedy": EpsilonGreedy,
}


def make_algorithm(name, epsilon=None, prior_mean=0.0, rng=None):
    """名前からアルゴリズムを作る。CLI と設定ファイルから使う。"""
    try:
        cls = ALGORITHMS[name.lower()]
    except KeyError:
        raise ValueError(
            f"unknown algorithm {name!r}, expected one of {sorted(ALGORITHMS)}"
        ) from None

    learner = MeanLearner(prior_mean)
    if cls is EpsilonGreedy:
        if epsilon is None:
            raise ValueError("epsilon_greedy requires epsilon")
        return EpsilonGreedy(epsilon, learner=learner, rng=rng)
    return cls(learner=learner, rng=rng)
