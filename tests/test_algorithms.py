import numpy as np
import pytest

from bandits.algorithms import UCB1, EpsilonGreedy, argmax, make_algorithm
from bandits.arms import bernoulli_arms
from bandits.learner import MeanLearner


def test_argmax_first_index_on_ties():
    assert argmax([0.2, 0.5, 0.5, 0.1]) == 1
    assert argmax([0.0, 0.0, 0.0]) == 0


def test_greedy_exploits_when_epsilon_zero():
    agent = EpsilonGreedy(0.0, rng=np.random.default_rng(0))
    agent.initialize(3)
    # 全部同率なら最初の腕
    assert all(agent.select(3, t) == 0 for t in range(1, 20))
    agent.learner.update(2, 1)
    agent.learner.update(1, 1)
    agent.learner.update(1, 0)
    assert all(agent.select(3, t) == 2 for t in range(1, 20))
    agent.learner.update(1, 1)
    agent.learner.update(1, 1)
    agent.learner.update(2, 0)
    agent.learner.update(2, 0)
    # Q = [0, 0.75, 1/3]
    assert agent.select(3, 1) == 1


def test_greedy_ties_after_learning():
    agent = EpsilonGreedy(0.0)
    agent.initialize(3)
    agent.learner.update(1, 1)
    agent.learner.update(2, 1)
    assert agent.select(3, 5) == 1


def test_epsilon_one_explores_uniformly():
    agent = EpsilonGreedy(1.0, rng=np.random.default_rng(0))
    agent.initialize(4)
    for _ in range(30):
        agent.learner.update(3, 1)
    picks = np.array([agent.select(4, t) for t in range(1, 8001)])
    counts = np.bincount(picks, minlength=4)
    assert set(picks.tolist()) == {0, 1, 2, 3}
    assert np.all(np.abs(counts / len(picks) - 0.25) < 0.03)


@pytest.mark.parametrize("eps", [-0.01, 1.01])
def test_invalid_epsilon(eps):
    with pytest.raises(ValueError):
        EpsilonGreedy(eps)


def test_ucb1_pulls_every_arm_once_first():
    rng = np.random.default_rng(0)
    arms = bernoulli_arms([0.9, 0.0, 0.5, 1.0, 0.3])
    agent = UCB1(rng=rng)
    agent.initialize(len(arms))
    picks = []
    for t in range(1, len(arms) + 1):
        a = agent.select(len(arms), t)
        picks.append(a)
        agent.learner.update(a, arms[a].draw(rng))
    assert picks == [0, 1, 2, 3, 4]
    assert agent.learner.pull_counts.tolist() == [1] * 5


def test_ucb1_score():
    agent = UCB1()
    agent.initialize(2)
    # Q = [0.5, 0.6], n = [2, 8]
    for r in (1, 0):
        agent.learner.update(0, r)
    for r in (1, 1, 1, 0, 1, 0, 0, 0.8):
        agent.learner.update(1, r)
    t = 10
    scores = agent.learner.mean_estimates + np.sqrt(
        2 * np.log(t) / agent.learner.pull_counts
    )
    assert agent.select(2, t) == int(np.argmax(scores)) == 0


def test_ucb1_prefers_better_estimate_with_equal_counts():
    agent = UCB1()
    agent.initialize(3)
    for a, r in [(0, 0), (1, 1), (2, 1)]:
        agent.learner.update(a, r)
    # 1 と 2 は同点なので番号の小さい方
    assert agent.select(3, 4) == 1


def test_ucb1_rejects_round_zero():
    agent = UCB1()
    agent.initialize(1)
    agent.learner.update(0, 1)
    with pytest.raises(ValueError):
        agent.select(1, 0)


def test_select_before_initialize():
    with pytest.raises(RuntimeError):
        UCB1().select(2, 1)
    with pytest.raises(RuntimeError):
        EpsilonGreedy(0.1).select(2, 1)


def test_select_with_wrong_arm_count():
    agent = UCB1()
    agent.initialize(2)
    with pytest.raises(ValueError):
        agent.select(3, 1)


def test_make_algorithm():
    ucb = make_algorithm("UCB1", prior_mean=0.3)
    assert isinstance(ucb, UCB1)
    assert ucb.learner.prior_mean == 0.3
    eg = make_algorithm("egreedy", epsilon=0.2)
    assert isinstance(eg, EpsilonGreedy) and eg.epsilon == 0.2
    assert isinstance(eg.learner, MeanLearner)
    with pytest.raises(ValueError):
        make_algorithm("thompson")
    with pytest.raises(ValueError):
        make_algorithm("epsilon_greedy")
