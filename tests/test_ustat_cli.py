"""
Tests for the command-line entry point and the histogram plot.
"""

import json

import pytest

from ustat_decouple.cli import build_config, build_parser, load_jsonl, main
from ustat_decouple.errors import InputError
from ustat_decouple.plotting import plot_decouple_result
from ustat_decouple.result import DecoupleResult


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("B", "PARALLEL", "WORKERS", "SEED", "TIMEOUT"):
        monkeypatch.delenv(f"USTAT_DECOUPLE_{name}", raising=False)


def write_jsonl(path, rows):
    path.write_text("\n".join(json.dumps(r) for r in rows) + "\n\n", encoding="utf-8")
    return path


def test_load_jsonl_skips_blank_lines(tmp_path):
    path = write_jsonl(tmp_path / "data.jsonl", [["A", "C"], ["A", "G"]])
    assert load_jsonl(path) == [["A", "C"], ["A", "G"]]


def test_load_jsonl_invalid_line(tmp_path):
    path = tmp_path / "bad.jsonl"
    path.write_text('["A"]\n{not json\n', encoding="utf-8")
    with pytest.raises(InputError, match="bad.jsonl:2"):
        load_jsonl(path)


def test_cli_overrides_config_file(tmp_path):
    config_path = tmp_path / "cfg.yaml"
    config_path.write_text("B: 40\nseed: 3\n", encoding="utf-8")
    args = build_parser().parse_args(
        ["--example", "sequences", "--config", str(config_path), "--seed", "8", "--parallel"]
    )
    config = build_config(args)
    assert config.B == 40
    assert config.seed == 8
    assert config.parallel is True


def test_example_run_prints_summary(capsys):
    assert main(["--example", "sequences", "--B", "20", "--seed", "1"]) == 0
    out = capsys.readouterr().out
    assert "Original U-statistic" in out
    assert "Kernel: Hamming Distance" in out


def test_input_file_with_json_output(tmp_path, capsys):
    data = write_jsonl(tmp_path / "seqs.jsonl", [list("ACGT"), list("ACGA"), list("TCGA"), list("ACCT")])
    out_path = tmp_path / "result.json"
    assert main(["--input", str(data), "--B", "15", "--json-out", str(out_path)]) == 0

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["n_iterations"] == 15
    assert payload["n_samples"] == 4
    assert len(payload["decoupled_distribution"]) == 15


def test_asymmetric_flag(capsys):
    assert main(["--example", "sequences", "--B", "5", "--asymmetric"]) == 0


def test_single_observation_exit_code(tmp_path, capsys):
    data = write_jsonl(tmp_path / "one.jsonl", [list("ACGT")])
    assert main(["--input", str(data), "--B", "5"]) == 2
    assert "sample size must be at least 2" in capsys.readouterr().err


def test_missing_input_file(tmp_path, capsys):
    assert main(["--input", str(tmp_path / "missing.jsonl")]) == 2


def test_unknown_kernel(capsys):
    assert main(["--example", "sequences", "--kernel", "cosine"]) == 2
    assert "unknown kernel" in capsys.readouterr().err


def test_missing_config_file_exit_code(tmp_path, capsys):
    missing = tmp_path / "missing.yaml"
    assert main(["--example", "sequences", "--config", str(missing)]) == 2
    assert "cannot read configuration file" in capsys.readouterr().err


def test_malformed_config_file_exit_code(tmp_path, capsys):
    config_path = tmp_path / "broken.yaml"
    config_path.write_text("B: [1,\n", encoding="utf-8")
    assert main(["--example", "sequences", "--config", str(config_path)]) == 2
    assert "cannot read configuration file" in capsys.readouterr().err


def test_plot_written(tmp_path):
    result = DecoupleResult(
        original_stat=2.5,
        decoupled_distribution=tuple(float(v) for v in range(10)),
        kernel_name="Hamming Distance",
        p_value=0.3,
        z_score=-1.0,
    )
    path = plot_decouple_result(result, tmp_path / "hist.png")
    assert path.exists()
    assert path.stat().st_size > 0


def test_cli_plot(tmp_path, capsys):
    plot_path = tmp_path / "null.png"
    assert main(["--example", "expression", "--kernel", "spearman", "--B", "10", "--plot", str(plot_path)]) == 0
    assert plot_path.exists()
