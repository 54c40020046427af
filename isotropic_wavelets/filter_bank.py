""" Wavelet Filter Bank Generator
-----------------------------
Materializes the frequency masks of an isotropic wavelet over the discrete
centered frequency grid of an image, for one level or for a whole pyramid.

The transform is undecimated, so the masks of every level have the shape of
the input. Deeper levels emulate the octave halving by evaluating the wavelet
on a dilated frequency axis: level i uses r * 2^(i * J), J being the number of
high pass sub-bands, so that each level spans J octaves.
"""
import logging
import warnings
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError, DomainBoundaryAnomaly, PyramidMismatch
from .frequency_utils import normalize_metadata, radial_frequency_grid
from .wavelet_functions import HIGH_CUTOFF, NYQUIST, IsotropicWavelet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelFilterBank:
  """Masks of one decomposition level.

  Attributes:
    low_pass: Low pass mask, input of the next level.
    high_pass: The J high pass sub-band masks, ordered from the lowest
      sub-band (j = 1) to the high pass (j = J).
  """
  low_pass: np.ndarray
  high_pass: Tuple[np.ndarray, ...]

  @property
  def high_pass_subbands(self) -> int:
    return len(self.high_pass)


@dataclass(frozen=True)
class FilterBankPyramid:
  """The filter banks of every level of a transform (level 0 is the finest).

  Attributes:
    levels: One `LevelFilterBank` per level.
    shape: Shape of the frequency grid.
    spacing: Spacing used to build the frequency grid.
    wavelet: Wavelet the masks were evaluated from. It carries the number of
      high pass sub-bands.
    inverse: Whether the masks are the synthesis (inverse) responses.
  """
  levels: Tuple[LevelFilterBank, ...]
  shape: Tuple[int, ...]
  spacing: Tuple[float, ...]
  wavelet: IsotropicWavelet
  inverse: bool = False

  @property
  def num_levels(self) -> int:
    return len(self.levels)

  @property
  def high_pass_subbands(self) -> int:
    return self.wavelet.high_pass_subbands

  def __len__(self) -> int:
    return len(self.levels)

  def __getitem__(self, level: int) -> LevelFilterBank:
    return self.levels[level]

  def __iter__(self) -> Iterator[LevelFilterBank]:
    return iter(self.levels)

  def check_compatible(
    self,
    wavelet: IsotropicWavelet,
    levels: int,
    inverse: bool = False
  ) -> None:
    """Verifies that the pyramid was built for the given configuration.

    Args:
      wavelet: Wavelet of the transform.
      levels: Number of levels of the transform.
      inverse: Whether the transform needs synthesis masks. Analysis and
        synthesis masks are interchangeable for self-adjoint wavelets only.

    Raises:
      PyramidMismatch: If the number of levels, sub-bands, the wavelet or the
        mask direction disagree.
    """
    if self.inverse != inverse and not wavelet.self_adjoint:
      raise PyramidMismatch(
        f"{wavelet.name} is not self-adjoint, the pyramid holds "
        f"{'synthesis' if self.inverse else 'analysis'} masks."
      )
    if self.num_levels != levels:
      raise PyramidMismatch(
        f"Pyramid has {self.num_levels} levels, transform expects {levels}."
      )
    if self.high_pass_subbands != wavelet.high_pass_subbands:
      raise PyramidMismatch(
        f"Pyramid has {self.high_pass_subbands} high pass sub-bands, "
        f"transform expects {wavelet.high_pass_subbands}."
      )
    if self.wavelet != wavelet:
      raise PyramidMismatch(
        f"Pyramid was built from {self.wavelet}, transform uses {wavelet}."
      )


def level_scale_factor(level: int, high_pass_subbands: int) -> float:
  """Frequency dilation applied to the masks of `level`."""
  return 2.0 ** (level * high_pass_subbands)


def _read_only(mask) -> np.ndarray:
  mask = np.asarray(mask, dtype=np.float64)
  mask.flags.writeable = False
  return mask


def _check_domain(radius: np.ndarray, wavelet: IsotropicWavelet, level: int) -> None:
  """Warns when the level's low pass collapses onto the zero frequency."""
  positive = radius[radius > 0]
  if positive.size == 0:
    return
  if radius.max() > NYQUIST:
    logger.debug(
      "Level %d: radial frequencies up to %.3f clamped to the boundary "
      "response above %.1f.", level, radius.max(), NYQUIST
    )
  low_pass_support = HIGH_CUTOFF / 2.0 ** (wavelet.high_pass_subbands - 1)
  if positive.min() > low_pass_support:
    message = (
      f"Level {level}: the smallest scaled frequency {positive.min():.3g} "
      f"exceeds the low pass support {low_pass_support:.3g}; the low pass "
      "is reduced to the zero frequency."
    )
    logger.warning(message)
    warnings.warn(message, DomainBoundaryAnomaly, stacklevel=3)


def _filter_bank_from_radius(
  wavelet: IsotropicWavelet,
  radius: np.ndarray,
  inverse: bool,
  level: int
) -> LevelFilterBank:
  _check_domain(radius, wavelet, level)
  sub_band = wavelet.inverse_sub_band if inverse else wavelet.forward_sub_band
  return LevelFilterBank(
    low_pass=_read_only(sub_band(radius, 0)),
    high_pass=tuple(
      _read_only(sub_band(radius, j))
      for j in range(1, wavelet.high_pass_subbands + 1)
    )
  )


def generate_filter_bank(
  wavelet: IsotropicWavelet,
  shape: Sequence[int],
  spacing: Sequence[float] | None = None,
  level: int = 0,
  inverse: bool = False
) -> LevelFilterBank:
  """Generates the masks of a single level.

  Args:
    wavelet: Wavelet to evaluate.
    shape: Shape of the frequency image.
    spacing: Spatial spacing of the image (defaults to ones).
    level: Decomposition level, 0 being the finest.
    inverse: Whether to evaluate the synthesis responses.

  Returns:
    The level's low pass mask and its J high pass masks, all read-only.
  """
  if level < 0:
    raise ConfigurationError(f"level must be non-negative, got {level}.")
  radius = radial_frequency_grid(shape, spacing)
  radius = radius * level_scale_factor(level, wavelet.high_pass_subbands)
  return _filter_bank_from_radius(wavelet, radius, inverse, level)


def generate_filter_bank_pyramid(
  wavelet: IsotropicWavelet,
  shape: Sequence[int],
  levels: int,
  spacing: Sequence[float] | None = None,
  inverse: bool = False
) -> FilterBankPyramid:
  """Generates the masks of every level of a transform.

  Level i of the result is bit-identical to
  `generate_filter_bank(wavelet, shape, spacing, level=i, inverse=inverse)`.

  Args:
    wavelet: Wavelet to evaluate.
    shape: Shape of the frequency image.
    levels: Number of decomposition levels.
    spacing: Spatial spacing of the image (defaults to ones).
    inverse: Whether to evaluate the synthesis responses.

  Returns:
    The filter bank pyramid.
  """
  if levels < 0:
    raise ConfigurationError(f"levels must be non-negative, got {levels}.")
  shape = tuple(int(n) for n in shape)
  spacing = normalize_metadata(spacing, len(shape), 1.0, "spacing")
  radius = radial_frequency_grid(shape, spacing)
  logger.debug(
    "Generating %s pyramid: %s, shape=%s, levels=%d.",
    "inverse" if inverse else "forward", wavelet, shape, levels
  )
  banks = tuple(
    _filter_bank_from_radius(
      wavelet,
      radius * level_scale_factor(level, wavelet.high_pass_subbands),
      inverse,
      level
    )
    for level in range(levels)
  )
  return FilterBankPyramid(
    levels=banks, shape=shape, spacing=spacing, wavelet=wavelet, inverse=inverse
  )
