from dataclasses import dataclass, fields
from typing import Optional, Tuple

from bandits.algorithms import ALGORITHMS, make_algorithm
from bandits.arms import bernoulli_arms

# --- 実験設定（デフォルト） ---
STEPS = 1000  # 1試行あたりのラウンド数 T
RUNS = 200  # 独立試行の回数 S
EPSILON = 0.1  # ε-greedy の探索率
PROBABILITIES = (0.1, 0.2)  # 各腕の成功確率
PRIOR_MEAN = 0.0  # 未試行の腕の価値推定
SEED = None  # 固定すると結果が再現できる


def _as_float(name, value):
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _as_int(name, value):
    # "10" や 10.0 は受け付けるが、1.5 や True は設定ミスとして弾く
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an int, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an int, got {value!r}") from None
    if isinstance(value, float) and number != value:
        raise ValueError(f"{name} must be an int, got {value!r}")
    return number


@dataclass
class ExperimentConfig:
    """1 つの実験（腕の構成 × アルゴリズム × T × S）の設定。不正な値は構築時に弾く。"""

    probabilities: Tuple[float, ...] = PROBABILITIES
    algorithm: str = "ucb1"
    epsilon: float = EPSILON
    steps: int = STEPS
    runs: int = RUNS
    seed: Optional[int] = SEED
    prior_mean: float = PRIOR_MEAN
    workers: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.probabilities, (str, bytes)):
            raise ValueError(
                f"probabilities must be a list of numbers, got {self.probabilities!r}"
            )
        try:
            probabilities = list(self.probabilities)
        except TypeError:
            raise ValueError(
                f"probabilities must be a list of numbers, got {self.probabilities!r}"
            ) from None
        self.probabilities = tuple(
            _as_float("arm probability", p) for p in probabilities
        )
        if len(self.probabilities) == 0:
            raise ValueError("at least one arm probability is required")
        for p in self.probabilities:
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"arm probability must be in [0, 1], got {p}")

        if not isinstance(self.algorithm, str) or self.algorithm.lower() not in ALGORITHMS:
            raise ValueError(
                f"unknown algorithm {self.algorithm!r}, "
                f"expected one of {sorted(ALGORITHMS)}"
            )

        self.epsilon = _as_float("epsilon", self.epsilon)
        if not 0.0 <= self.epsilon <= 1.0:
            raise ValueError(f"epsilon must be in [0, 1], got {self.epsilon}")
        self.steps = _as_int("steps", self.steps)
        if self.steps < 0:
            raise ValueError(f"steps must be >= 0, got {self.steps}")
        self.runs = _as_int("runs", self.runs)
        if self.runs < 1:
            raise ValueError(f"runs must be >= 1, got {self.runs}")
        self.prior_mean = _as_float("prior_mean", self.prior_mean)
        if self.seed is not None:
            self.seed = _as_int("seed", self.seed)
        if self.workers is not None:
            self.workers = _as_int("workers", self.workers)
            if self.workers < 1:
                raise ValueError(f"workers must be >= 1, got {self.workers}")

    @classmethod
    def from_dict(cls, cfg):
        names = {f.name for f in fields(cls)}
        unknown = sorted(k for k in cfg if k not in names)
        if unknown:
            raise ValueError(
                f"unknown config keys {unknown}, expected some of {sorted(names)}"
            )
        return cls(**cfg)

    def build_arms(self):
        return bernoulli_arms(self.probabilities)

    def build_algorithm(self, name=None):
        return make_algorithm(
            name or self.algorithm, epsilon=self.epsilon, prior_mean=self.prior_mean
        )


def load_config(path):
    import yaml

    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    return cfg


def apply_config_to_argparse(parser, cfg):
    # 設定ファイルの値を argparse のデフォルトとして上書きする（コマンドライン引数が優先）。
    # 対応する引数がないキーは黙って捨てずに ValueError にする
    dests = {action.dest for action in parser._actions}
    unknown = sorted(k for k in cfg if k not in dests)
    if unknown:
        raise ValueError(f"unknown config keys {unknown}")
    for action in list(parser._actions):
        if action.dest in cfg:
            action.default = cfg[action.dest]
