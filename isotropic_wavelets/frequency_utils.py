""" Frequency Domain Utilities
--------------------------
Centered orthonormal FFTs, the `FrequencyImage` container carrying spacing and
origin metadata, and the normalized radial frequency grid the filter banks
are evaluated on.

All frequency-domain arrays use the centered layout produced by
`fftshift(fftn(ifftshift(x)))`, so the zero frequency sits at index n // 2.
"""
from dataclasses import dataclass, field
from typing import Sequence, Tuple

import numpy as np
from scipy import fft

from .errors import DimensionMismatch


def fftn_centered(x: np.ndarray) -> np.ndarray:
  """Computes the N-D FFT with centered layout and orthonormal scaling."""
  return fft.fftshift(fft.fftn(fft.ifftshift(x), norm="ortho"))


def ifftn_centered(xf: np.ndarray) -> np.ndarray:
  """Computes the inverse of `fftn_centered`."""
  return fft.fftshift(fft.ifftn(fft.ifftshift(xf), norm="ortho"))


def normalize_metadata(
  values: Sequence[float] | None,
  ndim: int,
  default: float,
  label: str
) -> Tuple[float, ...]:
  """Expands per-axis metadata to a tuple of `ndim` floats."""
  if values is None:
    return (default,) * ndim
  values = tuple(float(v) for v in np.atleast_1d(values))
  if len(values) == 1 and ndim > 1:
    values = values * ndim
  if len(values) != ndim:
    raise DimensionMismatch(
      f"{label} has {len(values)} entries for a {ndim}-D image."
    )
  return values


@dataclass
class FrequencyImage:
  """A frequency-domain image with its spatial metadata.

  Attributes:
    data: Complex array in centered layout.
    spacing: Spatial sampling step per axis (defaults to ones).
    origin: Spatial origin per axis (defaults to zeros).
  """
  data: np.ndarray
  spacing: Tuple[float, ...] | None = field(default=None)
  origin: Tuple[float, ...] | None = field(default=None)

  def __post_init__(self):
    self.data = np.asarray(self.data)
    self.spacing = normalize_metadata(self.spacing, self.data.ndim, 1.0, "spacing")
    self.origin = normalize_metadata(self.origin, self.data.ndim, 0.0, "origin")
    if any(s <= 0 for s in self.spacing):
      raise DimensionMismatch(f"spacing must be positive, got {self.spacing}.")

  @property
  def shape(self) -> Tuple[int, ...]:
    return self.data.shape

  @property
  def ndim(self) -> int:
    return self.data.ndim


def forward_fft(
  image: np.ndarray,
  spacing: Sequence[float] | None = None,
  origin: Sequence[float] | None = None
) -> FrequencyImage:
  """Transforms a spatial image into a `FrequencyImage`.

  The metadata of the spatial image is carried over unchanged.
  """
  image = np.asarray(image)
  return FrequencyImage(
    fftn_centered(image.astype(np.result_type(image.dtype, np.complex64))),
    spacing,
    origin
  )


def inverse_fft(freq_image: FrequencyImage, real: bool = True) -> np.ndarray:
  """Transforms a `FrequencyImage` back into the spatial domain.

  Args:
    freq_image: Image to transform.
    real: Whether to return only the real part.

  Returns:
    Spatial image.
  """
  x = ifftn_centered(freq_image.data)
  return np.real(x) if real else x


def radial_frequency_grid(
  shape: Sequence[int],
  spacing: Sequence[float] | None = None
) -> np.ndarray:
  """Normalized radial frequency of every bin of a centered spectrum.

  The per-axis frequencies are the physical ones, fftfreq(n, d=spacing),
  multiplied by the smallest spacing. Nyquist is therefore 0.5 along the most
  finely sampled axis, and anisotropic voxels are measured on a common
  physical scale.

  Args:
    shape: Array shape.
    spacing: Spatial sampling step per axis (defaults to ones).

  Returns:
    Array of `shape` with the Euclidean norm of the normalized frequency.
  """
  shape = tuple(int(n) for n in shape)
  spacing = normalize_metadata(spacing, len(shape), 1.0, "spacing")
  reference = min(spacing)
  axes = [
    fft.fftshift(fft.fftfreq(n, d=s)) * reference
    for n, s in zip(shape, spacing)
  ]
  grids = np.meshgrid(*axes, indexing="ij", sparse=True)
  radius_sq = np.zeros(shape)
  for g in grids:
    radius_sq = radius_sq + g ** 2
  return np.sqrt(radius_sq)
