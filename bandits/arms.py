import math

import numpy as np


class Arm:
    """
    バンディットの「腕（arm）」の基底クラス。

    腕は報酬を確率的に生成する源で、エージェントはその真の期待報酬を知らない。
    サブクラスは draw() で 1 回分の報酬をサンプルする。

    乱数源は外から注入できる（rng 引数）。シミュレータは 1 本の Generator を
    腕とアルゴリズムで共有することで、seed を固定すれば結果が完全に再現できる。
    """

    def draw(self, rng=None):
        raise NotImplementedError

    @property
    def success_probability(self):
        raise NotImplementedError

    @property
    def mean(self):
        """この腕の真の期待報酬 E[r]。報酬が 0/1 なので成功確率と一致する。"""
        return self.success_probability


class BernoulliArm(Arm):
    """
    ベルヌーイ腕：確率 p で報酬 1、確率 (1 - p) で報酬 0。

        reward ~ Bernoulli(p)

    p は構築時に検証し、[0, 1] の外なら ValueError（設定ミス）。
    勝手に clip はしない。構築後は読み取り専用で、複数のシミュレーションから
    共有される。
    """

    def __init__(self, success_probability, rng=None):
        p = float(success_probability)
        if not math.isfinite(p) or not 0.0 <= p <= 1.0:
            raise ValueError(
                f"success_probability must be in [0, 1], got {success_probability!r}"
            )
        self._p = p
        # rng 未指定ならこの腕専用の Generator を持つ
        self.rng = rng if rng is not None else np.random.default_rng()

    @property
    def success_probability(self):
        return self._p

    def draw(self, rng=None):
        """
        腕を 1 回引いて報酬 0/1 を返す。

        一様乱数 u ~ Uniform(0,1) を生成し、u < p なら成功（報酬 1）。
        p = 0 なら決して 1 にならず、p = 1 なら常に 1 になる。
        """
        if rng is None:
            rng = self.rng
        if rng.random() < self._p:
            return 1
        return 0

    def __repr__(self):
        return f"BernoulliArm({self._p!r})"


def bernoulli_arms(probabilities, rng=None):
    """成功確率の列から BernoulliArm のリストを作る。"""
    return [BernoulliArm(p, rng=rng) for p in probabilities]


def best_mean(arms):
    # 後悔（regret）の基準になる max_j p_j
    if len(arms) == 0:
        raise ValueError("at least one arm is required")
    return max(arm.mean for arm in arms)
