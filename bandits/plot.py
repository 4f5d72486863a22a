import numpy as np
import matplotlib.pyplot as plt


def plot_regret_curves(curves, show=True):
    """
    アルゴリズムごとの「平均累積後悔」の推移をプロットする。

    入力：
    - curves: dict {label: all_regrets}
        all_regrets は regret_curves() が返す (runs, steps) の配列、
        またはすでに平均済みの (steps,) の配列

    runs 回の曲線を step ごとに平均すると、典型的な学習挙動が見える。
    後悔の伸びが対数的に寝てくるほど、良い腕に集中できている。
    """
    fig = plt.figure()
    plt.ylabel("Cumulative regret")
    plt.xlabel("Steps")
    for label, all_regrets in curves.items():
        all_regrets = np.asarray(all_regrets)
        if all_regrets.ndim == 2:
            avg_regrets = np.average(all_regrets, axis=0)
        else:
            avg_regrets = all_regrets
        plt.plot(np.arange(1, len(avg_regrets) + 1), avg_regrets, label=label)
    plt.legend()
    if show:
        plt.show()
    return fig


def plot_regret_histogram(regrets, bins=50, label=None, show=True):
    """
    試行ごとの累積後悔の分布をヒストグラムで描く。

    平均値だけでは「たまに悪い腕に固着する試行」が見えないので、
    分布の裾を確認するのに使う。平均は縦線で示す。
    """
    regrets = np.asarray(regrets)
    fig = plt.figure()
    plt.xlabel("Cumulative regret")
    plt.ylabel("Runs")
    plt.hist(regrets, bins=bins, alpha=0.7, label=label)
    plt.axvline(np.mean(regrets), color="k", linestyle="--")
    if label is not None:
        plt.legend()
    if show:
        plt.show()
    return fig
