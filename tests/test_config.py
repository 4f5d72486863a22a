import argparse

import pytest

from bandits.algorithms import UCB1, EpsilonGreedy
from bandits.config import ExperimentConfig, apply_config_to_argparse, load_config


def test_defaults_build():
    cfg = ExperimentConfig()
    arms = cfg.build_arms()
    assert [a.mean for a in arms] == [0.1, 0.2]
    assert isinstance(cfg.build_algorithm(), UCB1)
    eg = cfg.build_algorithm("epsilon_greedy")
    assert isinstance(eg, EpsilonGreedy) and eg.epsilon == cfg.epsilon


@pytest.mark.parametrize(
    "kwargs",
    [
        {"probabilities": ()},
        {"probabilities": (0.1, 1.2)},
        {"algorithm": "softmax"},
        {"epsilon": 2.0},
        {"steps": -5},
        {"runs": 0},
        {"workers": 0},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        ExperimentConfig(**kwargs)


def test_from_dict_rejects_unknown_keys():
    cfg = ExperimentConfig.from_dict({"probabilities": [0.3, 0.4], "runs": 5})
    assert cfg.probabilities == (0.3, 0.4)
    assert cfg.runs == 5
    with pytest.raises(ValueError, match="note"):
        ExperimentConfig.from_dict({"probabilities": [0.3], "note": "x"})


def test_numeric_fields_are_coerced():
    cfg = ExperimentConfig(steps="10", runs=4.0, epsilon="0.25", probabilities=["0.5"])
    assert (cfg.steps, cfg.runs, cfg.epsilon) == (10, 4, 0.25)
    assert cfg.probabilities == (0.5,)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"steps": "ten"},
        {"steps": 1.5},
        {"runs": None},
        {"runs": True},
        {"epsilon": "high"},
        {"epsilon": None},
        {"probabilities": 0.5},
        {"probabilities": "0.5"},
        {"probabilities": [0.1, "x"]},
        {"workers": "many"},
        {"algorithm": None},
    ],
)
def test_bad_types_raise_value_error(kwargs):
    with pytest.raises(ValueError):
        ExperimentConfig(**kwargs)


def test_yaml_overlay(tmp_path):
    path = tmp_path / "exp.yaml"
    path.write_text("steps: 50\nepsilon: 0.3\n", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg == {"steps": 50, "epsilon": 0.3}

    ap = argparse.ArgumentParser()
    ap.add_argument("--steps", type=int, default=1000)
    ap.add_argument("--epsilon", type=float, default=0.1)
    apply_config_to_argparse(ap, cfg)
    args = ap.parse_args([])
    assert (args.steps, args.epsilon) == (50, 0.3)
    assert ap.parse_args(["--steps", "7"]).steps == 7


def test_overlay_rejects_unknown_keys():
    ap = argparse.ArgumentParser()
    ap.add_argument("--steps", type=int, default=1000)
    with pytest.raises(ValueError, match="probs_typo"):
        apply_config_to_argparse(ap, {"probs_typo": [0.5]})


def test_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == {}
