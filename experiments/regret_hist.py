import os, sys

sys.path.append(
    os.path.join(os.path.dirname(__file__), "..")
)  # for importing the parent dirs
from bandits.algorithms import EpsilonGreedy
from bandits.arms import bernoulli_arms
from bandits.plot import plot_regret_histogram
from bandits.simulator import simulate_parallel, summarize


# ε-greedy の「試行ごとの累積後悔」の分布を見る。
# 平均だけでなく、悪い腕に固着した試行がどれくらいあるか（右の裾）を確認する。
# 試行同士は独立なので、プロセスプールで並列に回す。

if __name__ == "__main__":
    runs = 10000
    steps = 1000
    epsilon = 0.1

    arms = bernoulli_arms([0.1, 0.2])
    regrets = simulate_parallel(steps, runs, EpsilonGreedy(epsilon), arms, seed=0)
    print(summarize(regrets))

    plot_regret_histogram(regrets, label=f"epsilon={epsilon}")
