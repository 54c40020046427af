""" Isotropic Wavelet Functions
--------------------------
This module provides the radial frequency responses of the isotropic wavelet
families (Held, Vow, Simoncelli and Shannon).

Every family is defined by a mother band h(r) supported on (1/8, 1/2], with
the frequency normalized so that Nyquist is 0.5. The band satisfies the dyadic
partition of unity h(r)^2 + h(2r)^2 = 1 for r in (1/8, 1/4]. From h we build:

  * the low pass: 1 below 1/8, h(2r) on (1/8, 1/4], 0 above,
  * the high pass: 0 below 1/8, h(r) on (1/8, 1/4], 1 above,
  * J sub-bands: sub-band 0 is the low pass dilated by 2^(J-1), sub-band J is
    the high pass and sub-band 0 < j < J is h(2^(J-j) r).

The squared sub-bands telescope, so they sum to one at every frequency. This
is the tight frame property that gives exact reconstruction.
"""
from dataclasses import dataclass
from typing import Callable, ClassVar, Dict, Protocol, runtime_checkable

import numpy as np
from numpy.polynomial import polynomial
from scipy import special

from .errors import ConfigurationError

# Band edges in normalized frequency (cycles per sample).
LOW_CUTOFF = 1.0 / 8.0
HIGH_CUTOFF = 1.0 / 4.0
NYQUIST = 1.0 / 2.0

Response = Callable[[np.ndarray], np.ndarray]


@runtime_checkable
class IsotropicWavelet(Protocol):
  """Capability shared by all the isotropic wavelet families.

  Every evaluator accepts a scalar or an array of radial frequencies and
  returns a value of the same shape. They are total functions on [0, inf):
  negative frequencies are evaluated at 0 and frequencies beyond the support
  return the boundary value of the response.
  """
  name: ClassVar[str]
  self_adjoint: ClassVar[bool]
  high_pass_subbands: int

  def magnitude(self, freq): ...
  def forward_low_pass(self, freq): ...
  def forward_high_pass(self, freq): ...
  def forward_sub_band(self, freq, j: int): ...
  def inverse_low_pass(self, freq): ...
  def inverse_high_pass(self, freq): ...
  def inverse_sub_band(self, freq, j: int): ...


def _evaluate(response: Response, freq):
  """Evaluates a vectorized response on a scalar or array input."""
  r = np.maximum(np.asarray(freq, dtype=np.float64), 0.0)
  values = response(np.atleast_1d(r)).reshape(r.shape)
  if values.ndim == 0:
    return float(values)
  return values


def _low_pass(magnitude: Response, r: np.ndarray) -> np.ndarray:
  out = np.zeros_like(r)
  out[r <= LOW_CUTOFF] = 1.0
  band = (r > LOW_CUTOFF) & (r <= HIGH_CUTOFF)
  out[band] = magnitude(2.0 * r[band])
  return out


def _high_pass(magnitude: Response, r: np.ndarray) -> np.ndarray:
  out = np.zeros_like(r)
  out[r > HIGH_CUTOFF] = 1.0
  band = (r > LOW_CUTOFF) & (r <= HIGH_CUTOFF)
  out[band] = magnitude(r[band])
  return out


def _sub_band(
  magnitude: Response,
  r: np.ndarray,
  j: int,
  high_pass_subbands: int
) -> np.ndarray:
  """Sub-band j of a filter bank with `high_pass_subbands` high pass bands.

  Args:
    magnitude: Vectorized mother band of the family.
    r: Non-negative radial frequencies.
    j: Sub-band index, 0 is the low pass and `high_pass_subbands` the high
      pass.
    high_pass_subbands: Number of high pass sub-bands (J).

  Returns:
    Response array with the shape of `r`.
  """
  if not 0 <= j <= high_pass_subbands:
    raise ConfigurationError(
      f"Sub-band index {j} outside [0, {high_pass_subbands}]."
    )
  if j == 0:
    return _low_pass(magnitude, 2.0 ** (high_pass_subbands - 1) * r)
  if j == high_pass_subbands:
    return _high_pass(magnitude, r)
  return magnitude(2.0 ** (high_pass_subbands - j) * r)


def _check_subbands(high_pass_subbands: int) -> None:
  if int(high_pass_subbands) != high_pass_subbands or high_pass_subbands < 1:
    raise ConfigurationError(
      f"high_pass_subbands must be a positive integer, got {high_pass_subbands}."
    )


def smoothstep_coefficients(order: int) -> np.ndarray:
  """Coefficients of the order-m smoothstep polynomial.

  S_m(s) = s^(m+1) sum_n C(m+n, n) C(2m+1, m-n) (-s)^n, which rises from 0 at
  s = 0 to 1 at s = 1 with its first m derivatives vanishing at both ends.

  Args:
    order: Polynomial order m.

  Returns:
    Coefficients in increasing powers of s (length 2m + 2).
  """
  coeffs = np.zeros(2 * order + 2)
  for n in range(order + 1):
    coeffs[order + 1 + n] = (
      (-1) ** n
      * special.comb(order + n, n, exact=True)
      * special.comb(2 * order + 1, order - n, exact=True)
    )
  return coeffs


@dataclass(frozen=True)
class HeldWavelet:
  """Held et al. (2010) steerable wavelet frame.

  h(r) = cos(2 pi q(r)) for r in (1/8, 1/4]
  h(r) = sin(2 pi q(r/2)) for r in (1/4, 1/2]
  h(r) = 0 elsewhere.

  q is a polynomial whose coefficients are fixed by the requirements
  q(1/8) = 1/4, q(1/4) = 0 and vanishing derivatives up to
  `polynomial_order` at both ends. Only the order is configurable.

  Attributes:
    polynomial_order: Order m of the smoothstep used to build q.
    high_pass_subbands: Number of high pass sub-bands (J).
  """
  polynomial_order: int = 5
  high_pass_subbands: int = 1

  name: ClassVar[str] = "Held"
  self_adjoint: ClassVar[bool] = True

  def __post_init__(self):
    _check_subbands(self.high_pass_subbands)
    if (int(self.polynomial_order) != self.polynomial_order
        or self.polynomial_order < 1):
      raise ConfigurationError(
        f"polynomial_order must be a positive integer, got {self.polynomial_order}."
      )

  def compute_polynomial(self, freq):
    """Evaluates q(t) = (1 - S_m(8t - 1)) / 4."""
    coeffs = smoothstep_coefficients(self.polynomial_order)
    s = 8.0 * np.asarray(freq, dtype=np.float64) - 1.0
    q = 0.25 * (1.0 - polynomial.polyval(s, coeffs))
    return float(q) if np.ndim(q) == 0 else q

  def _magnitude(self, r: np.ndarray) -> np.ndarray:
    out = np.zeros_like(r)
    rising = (r > LOW_CUTOFF) & (r <= HIGH_CUTOFF)
    falling = (r > HIGH_CUTOFF) & (r <= NYQUIST)
    out[rising] = np.cos(2 * np.pi * self.compute_polynomial(r[rising]))
    out[falling] = np.sin(2 * np.pi * self.compute_polynomial(r[falling] / 2))
    return out

  def magnitude(self, freq):
    return _evaluate(self._magnitude, freq)

  def forward_low_pass(self, freq):
    return self.forward_sub_band(freq, 0)

  def forward_high_pass(self, freq):
    return self.forward_sub_band(freq, self.high_pass_subbands)

  def forward_sub_band(self, freq, j: int):
    return _evaluate(
      lambda r: _sub_band(self._magnitude, r, j, self.high_pass_subbands), freq
    )

  def inverse_low_pass(self, freq):
    return self.forward_low_pass(freq)

  def inverse_high_pass(self, freq):
    return self.forward_high_pass(freq)

  def inverse_sub_band(self, freq, j: int):
    return self.forward_sub_band(freq, j)


@dataclass(frozen=True)
class VowWavelet:
  """Variance optimal wavelet (Papadakis et al.).

  With x = 2 log2(8r) - 1 on (1/8, 1/4] and y = 2 log2(4r) - 1 on (1/4, 1/2]:

  h(r) = sqrt(1/2 + tan(kappa x) / (2 tan(kappa)))  rising edge
  h(r) = sqrt(1/2 - tan(kappa y) / (2 tan(kappa)))  falling edge

  Attributes:
    kappa: Shape parameter in (0, pi/2), controls the steepness.
    high_pass_subbands: Number of high pass sub-bands (J).
  """
  kappa: float = 0.75
  high_pass_subbands: int = 1

  name: ClassVar[str] = "Vow"
  self_adjoint: ClassVar[bool] = True

  def __post_init__(self):
    _check_subbands(self.high_pass_subbands)
    if not 0.0 < self.kappa < np.pi / 2:
      raise ConfigurationError(f"kappa must lie in (0, pi/2), got {self.kappa}.")

  def _magnitude(self, r: np.ndarray) -> np.ndarray:
    out = np.zeros_like(r)
    rising = (r > LOW_CUTOFF) & (r <= HIGH_CUTOFF)
    falling = (r > HIGH_CUTOFF) & (r <= NYQUIST)
    norm = 2.0 * np.tan(self.kappa)
    x = 2.0 * np.log2(8.0 * r[rising]) - 1.0
    y = 2.0 * np.log2(4.0 * r[falling]) - 1.0
    # Rounding can push the argument of the root a hair below zero.
    out[rising] = np.sqrt(np.maximum(0.5 + np.tan(self.kappa * x) / norm, 0.0))
    out[falling] = np.sqrt(np.maximum(0.5 - np.tan(self.kappa * y) / norm, 0.0))
    return out

  def magnitude(self, freq):
    return _evaluate(self._magnitude, freq)

  def forward_low_pass(self, freq):
    return self.forward_sub_band(freq, 0)

  def forward_high_pass(self, freq):
    return self.forward_sub_band(freq, self.high_pass_subbands)

  def forward_sub_band(self, freq, j: int):
    return _evaluate(
      lambda r: _sub_band(self._magnitude, r, j, self.high_pass_subbands), freq
    )

  def inverse_low_pass(self, freq):
    return self.forward_low_pass(freq)

  def inverse_high_pass(self, freq):
    return self.forward_high_pass(freq)

  def inverse_sub_band(self, freq, j: int):
    return self.forward_sub_band(freq, j)


@dataclass(frozen=True)
class SimoncelliWavelet:
  """Portilla and Simoncelli log-raised-cosine band.

  h(r) = cos(pi/2 log2(4r)) for r in (1/8, 1/2], 0 elsewhere.
  """
  high_pass_subbands: int = 1

  name: ClassVar[str] = "Simoncelli"
  self_adjoint: ClassVar[bool] = True

  def __post_init__(self):
    _check_subbands(self.high_pass_subbands)

  def _magnitude(self, r: np.ndarray) -> np.ndarray:
    out = np.zeros_like(r)
    band = (r > LOW_CUTOFF) & (r <= NYQUIST)
    out[band] = np.cos(np.pi / 2 * np.log2(4.0 * r[band]))
    return out

  def magnitude(self, freq):
    return _evaluate(self._magnitude, freq)

  def forward_low_pass(self, freq):
    return self.forward_sub_band(freq, 0)

  def forward_high_pass(self, freq):
    return self.forward_sub_band(freq, self.high_pass_subbands)

  def forward_sub_band(self, freq, j: int):
    return _evaluate(
      lambda r: _sub_band(self._magnitude, r, j, self.high_pass_subbands), freq
    )

  def inverse_low_pass(self, freq):
    return self.forward_low_pass(freq)

  def inverse_high_pass(self, freq):
    return self.forward_high_pass(freq)

  def inverse_sub_band(self, freq, j: int):
    return self.forward_sub_band(freq, j)


@dataclass(frozen=True)
class ShannonWavelet:
  """Ideal band: h(r) = 1 for r in (1/4, 1/2], 0 elsewhere."""
  high_pass_subbands: int = 1

  name: ClassVar[str] = "Shannon"
  self_adjoint: ClassVar[bool] = True

  def __post_init__(self):
    _check_subbands(self.high_pass_subbands)

  def _magnitude(self, r: np.ndarray) -> np.ndarray:
    return ((r > HIGH_CUTOFF) & (r <= NYQUIST)).astype(np.float64)

  def magnitude(self, freq):
    return _evaluate(self._magnitude, freq)

  def forward_low_pass(self, freq):
    return self.forward_sub_band(freq, 0)

  def forward_high_pass(self, freq):
    return self.forward_sub_band(freq, self.high_pass_subbands)

  def forward_sub_band(self, freq, j: int):
    return _evaluate(
      lambda r: _sub_band(self._magnitude, r, j, self.high_pass_subbands), freq
    )

  def inverse_low_pass(self, freq):
    return self.forward_low_pass(freq)

  def inverse_high_pass(self, freq):
    return self.forward_high_pass(freq)

  def inverse_sub_band(self, freq, j: int):
    return self.forward_sub_band(freq, j)


WAVELETS: Dict[str, type] = {
  "held": HeldWavelet,
  "vow": VowWavelet,
  "simoncelli": SimoncelliWavelet,
  "shannon": ShannonWavelet,
}


def get_wavelet(name: str, **params) -> IsotropicWavelet:
  """Builds a wavelet family by name.

  Args:
    name: One of "Held", "Vow", "Simoncelli" or "Shannon" (case insensitive).
    **params: Family parameters, e.g. `polynomial_order` for Held, `kappa` for
      Vow, and `high_pass_subbands` for all of them.

  Returns:
    The wavelet instance.

  Raises:
    ConfigurationError: If the name or a parameter is not valid.
  """
  try:
    wavelet_cls = WAVELETS[name.lower()]
  except KeyError:
    raise ConfigurationError(
      f"Wavelet '{name}' not supported. "
      f"Available: {[cls.name for cls in WAVELETS.values()]}"
    ) from None
  try:
    return wavelet_cls(**params)
  except TypeError as e:
    raise ConfigurationError(f"Invalid parameters for {wavelet_cls.name}: {e}") from e
