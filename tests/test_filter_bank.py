import warnings
import numpy as np
from absl.testing import parameterized
from absl.testing import absltest
from isotropic_wavelets import filter_bank as fb
from isotropic_wavelets import wavelet_functions as wf
from isotropic_wavelets.errors import (
  ConfigurationError,
  DimensionMismatch,
  DomainBoundaryAnomaly,
  PyramidMismatch
)
from isotropic_wavelets.frequency_utils import radial_frequency_grid

_NAMES = ("Held", "Vow", "Simoncelli", "Shannon")


class TestRadialFrequencyGrid(parameterized.TestCase):

  def test_centered_layout(self):
    radius = radial_frequency_grid((8, 8))
    self.assertEqual(radius.shape, (8, 8))
    self.assertEqual(radius[4, 4], 0.0)
    self.assertEqual(radius[0, 4], 0.5)
    self.assertEqual(radius[4, 6], 0.25)

  def test_odd_shape(self):
    radius = radial_frequency_grid((9, 5, 7))
    self.assertEqual(radius.shape, (9, 5, 7))
    self.assertEqual(radius[4, 2, 3], 0.0)
    self.assertLess(radius.max(), 0.5 * np.sqrt(3))

  def test_anisotropic_spacing(self):
    """Frequencies are scaled by the smallest spacing."""
    radius = radial_frequency_grid((8, 8), spacing=(1.0, 2.0))
    self.assertEqual(radius[0, 4], 0.5)
    self.assertEqual(radius[4, 0], 0.25)

  def test_spacing_mismatch(self):
    with self.assertRaises(DimensionMismatch):
      radial_frequency_grid((8, 8), spacing=(1.0, 1.0, 1.0))


class TestFilterBank(parameterized.TestCase):
  """Unit tests for filter bank and pyramid generation."""

  @parameterized.product(
    name=_NAMES,
    shape=[(32, 32), (24, 17), (8, 8, 8)],
    subbands=[1, 2, 3]
  )
  def test_level_partition_of_unity(self, name, shape, subbands):
    """low^2 + sum of high^2 = 1 on every bin of every level."""
    wavelet = wf.get_wavelet(name, high_pass_subbands=subbands)
    with warnings.catch_warnings():
      warnings.simplefilter("ignore", DomainBoundaryAnomaly)
      pyramid = fb.generate_filter_bank_pyramid(wavelet, shape, levels=3)
    self.assertLen(pyramid, 3)
    for bank in pyramid:
      self.assertEqual(bank.high_pass_subbands, subbands)
      total = bank.low_pass**2 + sum(mask**2 for mask in bank.high_pass)
      np.testing.assert_allclose(total, 1.0, atol=1e-10)

  @parameterized.parameters(*_NAMES)
  def test_determinism(self, name):
    """Equal inputs give bit-identical masks."""
    wavelet = wf.get_wavelet(name, high_pass_subbands=2)
    a = fb.generate_filter_bank(wavelet, (20, 30), level=1)
    b = fb.generate_filter_bank(wavelet, (20, 30), level=1)
    np.testing.assert_array_equal(a.low_pass, b.low_pass)
    for mask_a, mask_b in zip(a.high_pass, b.high_pass):
      np.testing.assert_array_equal(mask_a, mask_b)

  @parameterized.product(name=_NAMES, inverse=[False, True])
  def test_pyramid_matches_single_levels(self, name, inverse):
    wavelet = wf.get_wavelet(name, high_pass_subbands=2)
    spacing = (0.5, 1.0)
    pyramid = fb.generate_filter_bank_pyramid(
      wavelet, (32, 32), levels=2, spacing=spacing, inverse=inverse
    )
    self.assertEqual(pyramid.inverse, inverse)
    for level in range(2):
      bank = fb.generate_filter_bank(
        wavelet, (32, 32), spacing, level=level, inverse=inverse
      )
      np.testing.assert_array_equal(pyramid[level].low_pass, bank.low_pass)
      for mask_a, mask_b in zip(pyramid[level].high_pass, bank.high_pass):
        np.testing.assert_array_equal(mask_a, mask_b)

  def test_level_dilation(self):
    """Level i evaluates the wavelet at r * 2^(i J)."""
    wavelet = wf.SimoncelliWavelet(high_pass_subbands=2)
    radius = radial_frequency_grid((32, 32))
    bank = fb.generate_filter_bank(wavelet, (32, 32), level=1)
    self.assertEqual(fb.level_scale_factor(1, 2), 4.0)
    np.testing.assert_array_equal(
      bank.low_pass, wavelet.forward_low_pass(radius * 4.0)
    )
    np.testing.assert_array_equal(
      bank.high_pass[0], wavelet.forward_sub_band(radius * 4.0, 1)
    )

  def test_masks_are_read_only(self):
    bank = fb.generate_filter_bank(wf.HeldWavelet(), (16, 16))
    self.assertFalse(bank.low_pass.flags.writeable)
    self.assertFalse(bank.high_pass[0].flags.writeable)
    with self.assertRaises(ValueError):
      bank.low_pass[0, 0] = 2.0

  def test_masks_shape_and_dtype(self):
    bank = fb.generate_filter_bank(wf.VowWavelet(high_pass_subbands=3), (10, 12, 14))
    self.assertEqual(bank.low_pass.shape, (10, 12, 14))
    self.assertEqual(bank.low_pass.dtype, np.float64)
    self.assertLen(bank.high_pass, 3)
    for mask in bank.high_pass:
      self.assertEqual(mask.shape, (10, 12, 14))

  def test_deep_level_warns_and_clamps(self):
    """A level whose low pass only keeps DC warns instead of failing."""
    wavelet = wf.ShannonWavelet()
    with self.assertWarns(DomainBoundaryAnomaly):
      bank = fb.generate_filter_bank(wavelet, (16, 16), level=3)
    self.assertEqual(np.count_nonzero(bank.low_pass), 1)
    self.assertEqual(bank.low_pass[8, 8], 1.0)
    np.testing.assert_allclose(bank.low_pass**2 + bank.high_pass[0]**2, 1.0)

  def test_shallow_level_does_not_warn(self):
    with warnings.catch_warnings(record=True) as caught:
      warnings.simplefilter("always")
      fb.generate_filter_bank(wf.ShannonWavelet(), (16, 16), level=2)
    self.assertFalse(
      any(issubclass(w.category, DomainBoundaryAnomaly) for w in caught)
    )

  def test_negative_level(self):
    with self.assertRaises(ConfigurationError):
      fb.generate_filter_bank(wf.HeldWavelet(), (16, 16), level=-1)
    with self.assertRaises(ConfigurationError):
      fb.generate_filter_bank_pyramid(wf.HeldWavelet(), (16, 16), levels=-1)

  def test_empty_pyramid(self):
    pyramid = fb.generate_filter_bank_pyramid(wf.HeldWavelet(), (16, 16), levels=0)
    self.assertLen(pyramid, 0)
    self.assertEqual(pyramid.shape, (16, 16))
    self.assertEqual(pyramid.spacing, (1.0, 1.0))

  def test_check_compatible(self):
    wavelet = wf.HeldWavelet(high_pass_subbands=2)
    pyramid = fb.generate_filter_bank_pyramid(wavelet, (16, 16), levels=2)
    pyramid.check_compatible(wavelet, 2)
    # Self-adjoint masks serve both directions.
    pyramid.check_compatible(wavelet, 2, inverse=True)

  @parameterized.named_parameters(
    ("Levels", wf.HeldWavelet(high_pass_subbands=2), 3),
    ("Subbands", wf.HeldWavelet(high_pass_subbands=1), 2),
    ("Order", wf.HeldWavelet(polynomial_order=2, high_pass_subbands=2), 2),
    ("Family", wf.VowWavelet(high_pass_subbands=2), 2),
  )
  def test_check_compatible_rejects(self, wavelet, levels):
    pyramid = fb.generate_filter_bank_pyramid(
      wf.HeldWavelet(high_pass_subbands=2), (16, 16), levels=2
    )
    with self.assertRaises(PyramidMismatch):
      pyramid.check_compatible(wavelet, levels)


if __name__ == "__main__":
  absltest.main()
