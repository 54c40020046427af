"""Exceptions and warnings raised by the isotropic wavelet transforms."""


class WaveletError(Exception):
  """Base class for all errors raised by this package."""


class ConfigurationError(WaveletError, ValueError):
  """Invalid levels, sub-bands, wavelet name or wavelet parameters."""


class DimensionMismatch(WaveletError, ValueError):
  """Input shape or metadata inconsistent with the configured transform."""


class PyramidMismatch(WaveletError, ValueError):
  """A reused filter bank pyramid does not match the transform."""


class DomainBoundaryAnomaly(RuntimeWarning):
  """Scaled radial frequencies fall outside the wavelet support.

  The responses are clamped to their boundary values, so this is only ever
  issued as a warning.
  """
