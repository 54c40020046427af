""" Undecimated Isotropic Wavelet Transform
--------------------------------------
Forward and inverse undecimated wavelet transforms of N-D frequency-domain
images.

The forward transform splits the current low pass image at each level into J
high pass sub-bands and the low pass input of the next level. No level
downsamples, so every output has the shape of the input. The outputs are
ordered level-major:

  [level 0 sub-band 1, ..., level 0 sub-band J, level 1 sub-band 1, ...,
   level L-1 sub-band J, low pass residual]

which gives L * J + 1 images. The inverse transform consumes exactly this
sequence, from the coarsest level outwards.
"""
import dataclasses
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError, DimensionMismatch, PyramidMismatch
from .filter_bank import FilterBankPyramid, generate_filter_bank_pyramid
from .frequency_utils import FrequencyImage, normalize_metadata
from .wavelet_functions import IsotropicWavelet, get_wavelet

logger = logging.getLogger(__name__)


@dataclass
class WaveletOptions:
  """Options for the undecimated wavelet transforms.

  Attributes:
    levels: Number of decomposition levels (L >= 0).
    high_pass_subbands: Number of high pass sub-bands per level (J >= 1).
    wavelet: Wavelet family name ("Held", "Vow", "Simoncelli", "Shannon") or
      a wavelet instance. After construction it is always an instance
      carrying `high_pass_subbands`.
    wavelet_params: Family parameters used when `wavelet` is a name, e.g.
      {"polynomial_order": 3}. Emptied once the instance is built.
    store_filter_bank_pyramid: Whether the forward transform returns the
      pyramid it used, so that an inverse transform can reuse it.
    use_filter_bank_pyramid: Whether the inverse transform takes its masks
      from a supplied pyramid instead of regenerating them.
    shape: Expected shape of the input. If None, any shape is accepted.
    spacing: Spatial spacing of the images. Plain arrays are given this
      spacing, and inputs carrying another one are rejected. If None, the
      spacing comes from the inputs.
  """
  levels: int = 1
  high_pass_subbands: int = 1
  wavelet: str | IsotropicWavelet = "Held"
  wavelet_params: Dict[str, Any] = field(default_factory=dict)
  store_filter_bank_pyramid: bool = True
  use_filter_bank_pyramid: bool = False
  shape: Tuple[int, ...] | None = None
  spacing: Tuple[float, ...] | None = None

  def __post_init__(self):
    if int(self.levels) != self.levels or self.levels < 0:
      raise ConfigurationError(
        f"levels must be a non-negative integer, got {self.levels}."
      )
    if int(self.high_pass_subbands) != self.high_pass_subbands or self.high_pass_subbands < 1:
      raise ConfigurationError(
        f"high_pass_subbands must be a positive integer, got {self.high_pass_subbands}."
      )
    self.levels = int(self.levels)
    self.high_pass_subbands = int(self.high_pass_subbands)
    if self.shape is not None:
      self.shape = tuple(int(n) for n in self.shape)
    if self.spacing is not None:
      self.spacing = tuple(float(s) for s in np.atleast_1d(self.spacing))
      if any(s <= 0 for s in self.spacing):
        raise ConfigurationError(f"spacing must be positive, got {self.spacing}.")

    if isinstance(self.wavelet, str):
      self.wavelet = get_wavelet(
        self.wavelet,
        high_pass_subbands=self.high_pass_subbands,
        **self.wavelet_params
      )
      # The parameters now live in the wavelet instance.
      self.wavelet_params = {}
    elif self.wavelet_params:
      raise ConfigurationError(
        "wavelet_params can only be used with a wavelet given by name."
      )
    elif not isinstance(self.wavelet, IsotropicWavelet):
      raise ConfigurationError(f"{self.wavelet!r} is not an isotropic wavelet.")
    elif self.wavelet.high_pass_subbands != self.high_pass_subbands:
      if not dataclasses.is_dataclass(self.wavelet):
        raise ConfigurationError(
          f"Wavelet has {self.wavelet.high_pass_subbands} high pass sub-bands, "
          f"options require {self.high_pass_subbands}."
        )
      self.wavelet = dataclasses.replace(
        self.wavelet, high_pass_subbands=self.high_pass_subbands
      )

  @property
  def number_of_outputs(self) -> int:
    return self.levels * self.high_pass_subbands + 1


def _as_frequency_image(image, spacing=None) -> FrequencyImage:
  if isinstance(image, FrequencyImage):
    return image
  return FrequencyImage(image, spacing)


def _configured_spacing(
  options: WaveletOptions,
  ndim: int
) -> Tuple[float, ...] | None:
  if options.spacing is None:
    return None
  return normalize_metadata(options.spacing, ndim, 1.0, "spacing")


def forward_undecimated(
  image: FrequencyImage | np.ndarray,
  options: WaveletOptions,
  pyramid: FilterBankPyramid | None = None
) -> Tuple[List[FrequencyImage], FilterBankPyramid | None]:
  """Forward undecimated wavelet transform.

  Args:
    image: Frequency-domain image in centered layout.
    options: Transform options.
    pyramid: Analysis pyramid to use instead of generating one.

  Returns:
    A tuple (subbands, pyramid). `subbands` holds the L * J + 1 outputs in
    level-major order, with the input's spacing and origin. `pyramid` is the
    filter bank pyramid used, or None if `options.store_filter_bank_pyramid`
    is False.

  Raises:
    DimensionMismatch: If the input shape or spacing disagrees with the
      options or with the supplied pyramid.
    PyramidMismatch: If the supplied pyramid was built for another
      configuration.
  """
  image = _as_frequency_image(image, options.spacing)
  subbands, pyramid = _forward(image, options, pyramid)
  return subbands, (pyramid if options.store_filter_bank_pyramid else None)


def _forward(
  image: FrequencyImage,
  options: WaveletOptions,
  pyramid: FilterBankPyramid | None
) -> Tuple[List[FrequencyImage], FilterBankPyramid]:
  if options.shape is not None and options.shape != image.shape:
    raise DimensionMismatch(
      f"Input shape {image.shape} differs from the configured {options.shape}."
    )
  spacing = _configured_spacing(options, image.ndim)
  if spacing is not None and spacing != image.spacing:
    raise DimensionMismatch(
      f"Input spacing {image.spacing} differs from the configured {spacing}."
    )

  if pyramid is None:
    pyramid = generate_filter_bank_pyramid(
      options.wavelet, image.shape, options.levels, image.spacing
    )
  else:
    pyramid.check_compatible(options.wavelet, options.levels)
    if pyramid.shape != image.shape:
      raise DimensionMismatch(
        f"Input shape {image.shape} differs from the pyramid's {pyramid.shape}."
      )
    if pyramid.spacing != image.spacing:
      raise DimensionMismatch(
        f"Input spacing {image.spacing} differs from the pyramid's "
        f"{pyramid.spacing}."
      )

  subbands = []
  current = image.data
  for level, bank in enumerate(pyramid):
    subbands.extend(
      FrequencyImage(current * mask, image.spacing, image.origin)
      for mask in bank.high_pass
    )
    current = current * bank.low_pass
    logger.debug("Forward level %d: %d sub-bands.", level, len(bank.high_pass))
  subbands.append(FrequencyImage(np.array(current), image.spacing, image.origin))
  return subbands, pyramid


def inverse_undecimated(
  subbands: Sequence[FrequencyImage | np.ndarray],
  options: WaveletOptions,
  pyramid: FilterBankPyramid | None = None
) -> FrequencyImage:
  """Inverse undecimated wavelet transform.

  Args:
    subbands: The L * J + 1 images produced by `forward_undecimated`, in the
      same order.
    options: Transform options, with the same levels, sub-bands and wavelet
      as the forward transform.
    pyramid: Pyramid to take the masks from. Only used when
      `options.use_filter_bank_pyramid` is set.

  Returns:
    The reconstructed frequency image, with unit spacing and zero origin.

  Plain arrays carry no spacing. Unless `options.spacing` is set or a pyramid
  is reused, the masks cannot be regenerated on the forward grid from them.

  Raises:
    ConfigurationError: If the number of sub-bands is not L * J + 1.
    DimensionMismatch: If the sub-bands do not share one shape and spacing,
      or if their spacing is unknown and masks have to be regenerated.
    PyramidMismatch: If reuse is requested and the pyramid is missing or
      disagrees with the configuration or the sub-bands.
  """
  known = {s.spacing for s in subbands if isinstance(s, FrequencyImage)}
  subbands = [_as_frequency_image(s, options.spacing) for s in subbands]
  if len(subbands) != options.number_of_outputs:
    raise ConfigurationError(
      f"Expected {options.number_of_outputs} sub-bands for "
      f"{options.levels} levels and {options.high_pass_subbands} high pass "
      f"sub-bands, got {len(subbands)}."
    )
  shape = subbands[0].shape
  if any(s.shape != shape for s in subbands):
    raise DimensionMismatch(
      f"Sub-bands have different shapes: {sorted({s.shape for s in subbands})}."
    )
  if options.shape is not None and options.shape != shape:
    raise DimensionMismatch(
      f"Sub-band shape {shape} differs from the configured {options.shape}."
    )
  configured = _configured_spacing(options, len(shape))
  if configured is not None:
    known.add(configured)
  if len(known) > 1:
    raise DimensionMismatch(f"Sub-bands have different spacings: {sorted(known)}.")
  spacing = known.pop() if known else None

  if options.use_filter_bank_pyramid:
    if pyramid is None:
      raise PyramidMismatch(
        "use_filter_bank_pyramid is set but no pyramid was supplied."
      )
    pyramid.check_compatible(options.wavelet, options.levels, inverse=True)
    if pyramid.shape != shape:
      raise PyramidMismatch(
        f"Pyramid shape {pyramid.shape} differs from the sub-bands' {shape}."
      )
    if spacing is not None and pyramid.spacing != spacing:
      raise PyramidMismatch(
        f"Pyramid spacing {pyramid.spacing} differs from the sub-bands' "
        f"{spacing}."
      )
  else:
    if spacing is None:
      raise DimensionMismatch(
        "The spacing of plain array sub-bands is unknown. Pass FrequencyImage "
        "sub-bands or set options.spacing."
      )
    pyramid = generate_filter_bank_pyramid(
      options.wavelet, shape, options.levels, spacing, inverse=True
    )

  j_bands = options.high_pass_subbands
  current = subbands[-1].data
  for level in reversed(range(options.levels)):
    bank = pyramid[level]
    reconstructed = current * bank.low_pass
    for band, mask in zip(subbands[level * j_bands:(level + 1) * j_bands],
                          bank.high_pass):
      reconstructed = reconstructed + band.data * mask
    current = reconstructed
    logger.debug("Inverse level %d done.", level)

  return FrequencyImage(np.array(current))


class TransformState(enum.Enum):
  UNCONFIGURED = "unconfigured"
  CONFIGURED = "configured"
  DONE = "done"


class WaveletForwardUndecimated:
  """Stateful front end of `forward_undecimated`.

  The pyramid generated by an update is cached and reused by later updates on
  images of the same shape and spacing. Configuring new options drops it.
  """

  def __init__(self, options: WaveletOptions | None = None):
    self._options = None
    self._pyramid = None
    self._outputs = None
    if options is not None:
      self.configure(options)

  @property
  def state(self) -> TransformState:
    if self._options is None:
      return TransformState.UNCONFIGURED
    if self._outputs is None:
      return TransformState.CONFIGURED
    return TransformState.DONE

  @property
  def options(self) -> WaveletOptions | None:
    return self._options

  @property
  def outputs(self) -> List[FrequencyImage] | None:
    return self._outputs

  @property
  def filter_bank_pyramid(self) -> FilterBankPyramid | None:
    """The stored pyramid, None unless `store_filter_bank_pyramid` is set."""
    if self._options is None or not self._options.store_filter_bank_pyramid:
      return None
    return self._pyramid

  def configure(self, options: WaveletOptions) -> None:
    if self._options is None or (
      options.levels, options.high_pass_subbands, options.wavelet
    ) != (
      self._options.levels, self._options.high_pass_subbands,
      self._options.wavelet
    ):
      self._pyramid = None
    self._options = options
    self._outputs = None

  def update(self, image: FrequencyImage | np.ndarray) -> List[FrequencyImage]:
    if self._options is None:
      raise ConfigurationError("The forward transform is not configured.")
    image = _as_frequency_image(image, self._options.spacing)
    pyramid = self._pyramid
    if pyramid is not None and (
      pyramid.shape != image.shape or pyramid.spacing != image.spacing
    ):
      pyramid = None
    self._outputs, self._pyramid = _forward(image, self._options, pyramid)
    return self._outputs


class WaveletInverseUndecimated:
  """Stateful front end of `inverse_undecimated`."""

  def __init__(
    self,
    options: WaveletOptions | None = None,
    pyramid: FilterBankPyramid | None = None
  ):
    self._options = options
    self._pyramid = pyramid
    self._output = None

  @property
  def state(self) -> TransformState:
    if self._options is None:
      return TransformState.UNCONFIGURED
    if self._output is None:
      return TransformState.CONFIGURED
    return TransformState.DONE

  @property
  def output(self) -> FrequencyImage | None:
    return self._output

  def configure(self, options: WaveletOptions) -> None:
    self._options = options
    self._output = None

  def set_filter_bank_pyramid(self, pyramid: FilterBankPyramid | None) -> None:
    self._pyramid = pyramid
    self._output = None

  def update(
    self,
    subbands: Sequence[FrequencyImage | np.ndarray]
  ) -> FrequencyImage:
    if self._options is None:
      raise ConfigurationError("The inverse transform is not configured.")
    self._output = inverse_undecimated(subbands, self._options, self._pyramid)
    return self._output
