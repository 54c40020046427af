"""Round trip of the undecimated isotropic wavelet transform.

Runs FFT -> forward wavelet -> inverse wavelet -> inverse FFT on an image and
checks the metadata, size and reconstruction error of the result.

Example:
  isotropic-wavelets Held 2 --levels 3 --bands 2 --reuse-pyramid
"""
import argparse
import logging
import sys
from typing import List, Sequence

import numpy as np
from skimage import data, transform

from .errors import WaveletError
from .frequency_utils import forward_fft, inverse_fft
from .undecimated import WaveletOptions, forward_undecimated, inverse_undecimated

logger = logging.getLogger(__name__)

WAVELET_NAMES = ("Held", "Vow", "Simoncelli", "Shannon")


def _synthetic_image(dimension: int, size: int | None) -> np.ndarray:
  if dimension == 2:
    image = data.camera().astype(np.float64) / 255.0
    if size is not None:
      image = transform.resize(image, (size, size), anti_aliasing=True)
    return image
  return data.binary_blobs(
    length=size or 32, n_dim=3, rng=0
  ).astype(np.float64)


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(
    prog="isotropic-wavelets",
    description="Forward and inverse undecimated isotropic wavelet transform "
                "with reconstruction checks."
  )
  parser.add_argument("wavelet", choices=WAVELET_NAMES,
                      help="Wavelet family.")
  parser.add_argument("dimension", type=int, choices=(2, 3),
                      help="Image dimension.")
  parser.add_argument("--levels", type=int, default=1,
                      help="Number of decomposition levels.")
  parser.add_argument("--bands", type=int, default=1,
                      help="Number of high pass sub-bands per level.")
  parser.add_argument("--reuse-pyramid", action=argparse.BooleanOptionalAction,
                      default=True,
                      help="Reuse the forward filter bank pyramid in the "
                           "inverse transform.")
  parser.add_argument("--input", default=None,
                      help="Input image as a .npy file. A synthetic image is "
                           "used if omitted.")
  parser.add_argument("--size", type=int, default=None,
                      help="Edge length of the synthetic image.")
  parser.add_argument("--output", default=None,
                      help="Where to save the reconstructed image (.npy).")
  parser.add_argument("--polynomial-order", type=int, default=None,
                      help="Polynomial order of the Held wavelet.")
  parser.add_argument("--kappa", type=float, default=None,
                      help="Shape parameter of the Vow wavelet.")
  parser.add_argument("--tolerance", type=float, default=1e-6,
                      help="Maximum relative reconstruction error.")
  parser.add_argument("-v", "--verbose", action="store_true",
                      help="Log every transform step.")
  return parser


def _wavelet_params(args: argparse.Namespace) -> dict:
  params = {}
  if args.polynomial_order is not None:
    params["polynomial_order"] = args.polynomial_order
  if args.kappa is not None:
    params["kappa"] = args.kappa
  return params


def main(argv: Sequence[str] | None = None) -> int:
  """Runs the round trip.

  Returns:
    0 if every check passed, 1 otherwise.
  """
  args = build_parser().parse_args(argv)
  logging.basicConfig(
    level=logging.DEBUG if args.verbose else logging.INFO,
    format="%(levelname)s %(name)s: %(message)s"
  )

  if args.input is not None:
    try:
      image = np.load(args.input)
    except (OSError, ValueError) as e:
      logger.error("Cannot read %s: %s", args.input, e)
      return 1
  else:
    image = _synthetic_image(args.dimension, args.size)
  if image.ndim != args.dimension:
    logger.error("Input is %d-D, expected %d-D.", image.ndim, args.dimension)
    return 1
  logger.info("Image of shape %s.", image.shape)

  freq = forward_fft(image)
  try:
    options = WaveletOptions(
      levels=args.levels,
      high_pass_subbands=args.bands,
      wavelet=args.wavelet,
      wavelet_params=_wavelet_params(args),
      store_filter_bank_pyramid=args.reuse_pyramid,
      use_filter_bank_pyramid=args.reuse_pyramid,
    )
    subbands, pyramid = forward_undecimated(freq, options)
    logger.info("Forward transform: %d outputs.", len(subbands))
    for i, subband in enumerate(subbands):
      logger.debug("Output %d: shape %s, spacing %s.", i, subband.shape,
                   subband.spacing)
    reconstructed = inverse_undecimated(subbands, options, pyramid)
  except WaveletError as e:
    logger.error("%s: %s", type(e).__name__, e)
    return 1

  failures: List[str] = []
  if reconstructed.spacing != (1.0,) * freq.ndim:
    failures.append(f"spacing is {reconstructed.spacing}")
  if reconstructed.origin != (0.0,) * freq.ndim:
    failures.append(f"origin is {reconstructed.origin}")
  if reconstructed.shape != freq.shape:
    failures.append(f"size is {reconstructed.shape}, expected {freq.shape}")

  recovered = inverse_fft(reconstructed)
  error = np.linalg.norm(image - recovered) / max(np.linalg.norm(image), 1e-300)
  logger.info("Reconstruction error (relative L2): %.2e", error)
  if error > args.tolerance:
    failures.append(f"reconstruction error {error:.2e} above {args.tolerance:.0e}")

  if args.output is not None:
    np.save(args.output, recovered)
    logger.info("Saved reconstruction to %s.", args.output)

  for failure in failures:
    logger.error("Check failed: %s.", failure)
  return 1 if failures else 0


def run() -> None:
  sys.exit(main())


if __name__ == "__main__":
  run()
