from .wavelet_functions import (
  IsotropicWavelet,
  HeldWavelet,
  VowWavelet,
  SimoncelliWavelet,
  ShannonWavelet,
  WAVELETS,
  get_wavelet
)
from .frequency_utils import (
  FrequencyImage,
  forward_fft,
  inverse_fft,
  radial_frequency_grid
)
from .filter_bank import (
  LevelFilterBank,
  FilterBankPyramid,
  generate_filter_bank,
  generate_filter_bank_pyramid
)
from .undecimated import (
  WaveletOptions,
  forward_undecimated,
  inverse_undecimated,
  WaveletForwardUndecimated,
  WaveletInverseUndecimated,
  TransformState
)
from .wavelet_system import (
  WaveletSystem,
  get_wavelet_system
)
from .errors import (
  WaveletError,
  ConfigurationError,
  DimensionMismatch,
  PyramidMismatch,
  DomainBoundaryAnomaly
)

__all__ = [
  "IsotropicWavelet",
  "HeldWavelet",
  "VowWavelet",
  "SimoncelliWavelet",
  "ShannonWavelet",
  "WAVELETS",
  "get_wavelet",
  "FrequencyImage",
  "forward_fft",
  "inverse_fft",
  "radial_frequency_grid",
  "LevelFilterBank",
  "FilterBankPyramid",
  "generate_filter_bank",
  "generate_filter_bank_pyramid",
  "WaveletOptions",
  "forward_undecimated",
  "inverse_undecimated",
  "WaveletForwardUndecimated",
  "WaveletInverseUndecimated",
  "TransformState",
  "WaveletSystem",
  "get_wavelet_system",
  "WaveletError",
  "ConfigurationError",
  "DimensionMismatch",
  "PyramidMismatch",
  "DomainBoundaryAnomaly"
]
