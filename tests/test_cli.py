import numpy as np
import pytest
from isotropic_wavelets.cli import build_parser, main


@pytest.mark.parametrize("wavelet", ["Held", "Vow", "Simoncelli", "Shannon"])
@pytest.mark.parametrize("reuse", ["--reuse-pyramid", "--no-reuse-pyramid"])
def test_round_trip_2d(wavelet, reuse):
  argv = [wavelet, "2", "--levels", "2", "--bands", "2", "--size", "64", reuse]
  assert main(argv) == 0


def test_round_trip_3d():
  argv = ["Held", "3", "--levels", "1", "--bands", "2", "--size", "16"]
  assert main(argv) == 0


def test_input_and_output(tmp_path):
  x = np.random.randn(20, 24)
  np.save(tmp_path / "input.npy", x)
  output = tmp_path / "output.npy"
  argv = [
    "Vow", "2", "--levels", "3", "--kappa", "0.5",
    "--input", str(tmp_path / "input.npy"), "--output", str(output)
  ]
  assert main(argv) == 0
  np.testing.assert_allclose(np.load(output), x, atol=1e-10)


def test_wavelet_parameters():
  argv = ["Held", "2", "--polynomial-order", "2", "--size", "32", "-v"]
  assert main(argv) == 0


def test_missing_input(tmp_path):
  assert main(["Held", "2", "--input", str(tmp_path / "missing.npy")]) == 1


def test_unreadable_input(tmp_path):
  path = tmp_path / "corrupt.npy"
  path.write_text("not an array")
  assert main(["Held", "2", "--input", str(path)]) == 1


def test_dimension_mismatch(tmp_path):
  np.save(tmp_path / "volume.npy", np.zeros((4, 4, 4)))
  assert main(["Held", "2", "--input", str(tmp_path / "volume.npy")]) == 1


@pytest.mark.parametrize("argv", [
  ["Held", "2", "--bands", "0", "--size", "32"],
  ["Held", "2", "--levels", "-1", "--size", "32"],
  ["Vow", "2", "--kappa", "2.0", "--size", "32"],
])
def test_invalid_configuration(argv):
  assert main(argv) == 1


@pytest.mark.parametrize("argv", [
  ["Morlet", "2"],
  ["Held", "4"],
  ["Held"],
  ["Held", "2", "--levels", "two"],
])
def test_invalid_arguments(argv):
  with pytest.raises(SystemExit) as e:
    main(argv)
  assert e.value.code == 2


def test_parser_defaults():
  args = build_parser().parse_args(["Shannon", "2"])
  assert args.levels == 1
  assert args.bands == 1
  assert args.reuse_pyramid
  assert args.tolerance == 1e-6
