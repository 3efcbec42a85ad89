import numpy as np
import pytest

from gigacalc import main


def run(capsys, *argv):
    main(list(argv))
    return capsys.readouterr().out.splitlines()


def run_failing(capsys, *argv):
    with pytest.raises(SystemExit) as e:
        main(list(argv))
    assert e.value.code == 1
    return capsys.readouterr().out


@pytest.mark.parametrize("argv, expected", [
    (("eval", "5.4321", "+", "6.7894"), "12.2215"),
    (("eval", "-8", "-", "5"), "-13"),
    (("eval", "-9.8712", "*", "481267111"), "-4750683906.1032"),
    (("eval", "2350", "x", "15.67"), "36824.5"),
    (("eval", "2", "^", "10"), "1024"),
    (("eval", "1e-20", "+", "1e-20"), "2E-20"),
    (("--format", "R", "eval", "1", "/", "2"), "5E-1"),
    (("--format", "F5", "eval", "1", "/", "3"), "0.33333"),
    (("--format", "E2U", "eval", "12345", "+", "0"), "1.23×10⁴"),
    (("--rounding", "floor", "--format", "F0", "eval", "-7", "/", "2"), "-4"),
])
def test_eval(capsys, argv, expected):
    assert run(capsys, *argv) == [expected]


def test_sum_text_file(capsys, tmp_path):
    path = tmp_path / "values.txt"
    path.write_text("1.5\n# skipped\n2.5\n", encoding="utf-8")
    assert run(capsys, "sum", str(path)) == [f"Loaded 2 values from {path}", "4"]


def test_product_npy_file(capsys, tmp_path):
    path = tmp_path / "factors.npy"
    np.save(path, np.array([2, 3, 4], dtype=np.int64))
    assert run(capsys, "product", str(path))[-1] == "24"


def test_sum_npy_floats_use_shortest_digits(capsys, tmp_path):
    path = tmp_path / "values.npy"
    np.save(path, np.array([0.1, 0.2], dtype=np.float32))
    assert run(capsys, "--format", "R", "sum", str(path))[-1] == "3E-1"


def test_division_by_zero(capsys):
    out = run_failing(capsys, "eval", "1", "/", "0")
    assert out.startswith("Error: Division by 0")


def test_parse_error(capsys):
    out = run_failing(capsys, "eval", "cat", "+", "1")
    assert out.startswith("Error parsing input")


def test_non_integer_exponent(capsys):
    out = run_failing(capsys, "eval", "2", "^", "0.5")
    assert "Exponent must be an integer" in out


def test_invalid_format(capsys):
    out = run_failing(capsys, "--format", "Z", "eval", "1", "+", "1")
    assert out.startswith("Error: Invalid format specifier")


def test_invalid_rounding(capsys):
    out = run_failing(capsys, "--rounding", "sideways", "eval", "1", "+", "1")
    assert out.startswith("Error: Rounding 'sideways'")


def test_missing_file(capsys, tmp_path):
    out = run_failing(capsys, "sum", str(tmp_path / "nope.txt"))
    assert out.startswith("Error: file not found")
