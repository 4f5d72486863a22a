import os, sys

sys.path.append(
    os.path.join(os.path.dirname(__file__), "..")
)  # for importing the parent dirs
import numpy as np
import matplotlib.pyplot as plt
from bandits.algorithms import EpsilonGreedy
from bandits.arms import bernoulli_arms
from bandits.simulator import run_replicate


# 1 回だけの試行で、ε-greedy の累積後悔と推定値の様子を見るスクリプト。
# 1 回の結果は乱数に強く左右されるので、比較には bandit_avg.py を使う。

steps = 1000  # 1試行あたりのラウンド数
epsilon = 0.1  # ε-greedy の探索率
probs = [0.1, 0.2]  # 各腕の成功確率（腕 1 が最良）

rng = np.random.default_rng(0)
arms = bernoulli_arms(probs)
agent = EpsilonGreedy(epsilon)

# history[t]：t+1 ラウンド目までの累積後悔
history = np.zeros(steps)
total_regret = run_replicate(steps, agent, arms, rng, history=history)

print("cumulative regret:", total_regret)
print("pull counts:", agent.learner.pull_counts)
print("estimates:", agent.learner.mean_estimates)

# --- 可視化：累積後悔 ---
# 良い腕に集中できると傾きが小さくなる。
# 後悔は実際の報酬で測っているので、ラウンド単位では下がることもある。
plt.ylabel("Cumulative regret")
plt.xlabel("Steps")
plt.plot(history)
plt.show()
