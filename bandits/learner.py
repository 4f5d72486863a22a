import numpy as np


class Learner:
    """各腕の価値推定 Q(a) を観測した報酬から更新していく部品の基底クラス。"""

    def initialize(self, n_arms):
        raise NotImplementedError

    def update(self, arm, reward):
        raise NotImplementedError


class MeanLearner(Learner):
    """
    サンプル平均（sample-average）で各腕の価値を推定する学習器。

    状態：
    - pull_counts[a]    : 腕 a を引いた回数 n(a)
    - mean_estimates[a] : 腕 a の価値推定 Q(a)
    - prior_mean        : 一度も引いていない腕の推定値（初期値）

    腕 a を n 回引いたときの推定値は逐次更新で

        Q_n(a) = Q_{n-1}(a) + (r_n - Q_{n-1}(a)) / n

    と書ける。報酬の履歴を保存しなくても、観測した n 個の報酬の算術平均と
    一致する（1 回の更新は O(1)、全体の記憶は O(K)）。
    報酬を与える順番を入れ替えても、最終的な平均値は変わらない。

    initialize(K) はシミュレーションの開始ごとに呼ぶ。何度呼んでもよい。
    """

    def __init__(self, prior_mean=0.0):
        self.prior_mean = float(prior_mean)
        self.pull_counts = None
        self.mean_estimates = None

    def initialize(self, n_arms):
        if n_arms < 1:
            raise ValueError(f"number of arms must be >= 1, got {n_arms}")
        self.pull_counts = np.zeros(n_arms, dtype=np.int64)
        self.mean_estimates = np.full(n_arms, self.prior_mean, dtype=np.float64)

    @property
    def initialized(self):
        return self.pull_counts is not None

    @property
    def n_arms(self):
        if not self.initialized:
            return 0
        return len(self.pull_counts)

    def __len__(self):
        return self.n_arms

    def update(self, arm, reward):
        """
        腕 arm で報酬 reward を観測した後に Q(arm) を更新する。

            n <- n + 1
            Q <- Q + (reward - Q) / n

        arm が範囲外なのはアルゴリズム側のバグなので、そのまま例外にする。
        負のインデックスも末尾に回り込ませずに拒否する。
        """
        if not self.initialized:
            raise RuntimeError("initialize() must be called before update()")
        if not 0 <= arm < len(self.pull_counts):
            raise IndexError(
                f"arm index {arm} out of range for {len(self.pull_counts)} arms"
            )
        self.pull_counts[arm] += 1
        self.mean_estimates[arm] += (
            reward - self.mean_estimates[arm]
        ) / self.pull_counts[arm]

    def __repr__(self):
        return f"MeanLearner(prior_mean={self.prior_mean!r})"
