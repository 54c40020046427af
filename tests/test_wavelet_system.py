import jax
import jax.numpy as jnp
import numpy as np
from absl.testing import absltest
from absl.testing import parameterized
from isotropic_wavelets import (
    WaveletOptions,
    forward_fft,
    forward_undecimated,
)
from isotropic_wavelets.wavelet_system import (
    WaveletSystem,
    get_wavelet_system,
    jax_fftn,
    jax_ifftn,
)

jax.config.update("jax_enable_x64", True)


class TestWaveletSystem(parameterized.TestCase):
    """Unit tests for the WaveletSystem Pytree."""

    @parameterized.product(
        shape=[(32, 32), (24, 16)],
        wavelet=["Held", "Vow", "Simoncelli", "Shannon"],
        bands=[1, 2]
    )
    def test_get_wavelet_system_jit(self, shape, wavelet, bands):
        """Verify that get_wavelet_system returns a JIT-compatible Pytree."""
        options = WaveletOptions(
            levels=2, high_pass_subbands=bands, wavelet=wavelet
        )
        system = get_wavelet_system(shape, options)

        self.assertIsInstance(system, WaveletSystem)
        self.assertIsInstance(system.low_pass, jnp.ndarray)
        self.assertEqual(system.low_pass.shape, (2,) + shape)
        self.assertEqual(system.high_pass.shape, (2, bands) + shape)
        self.assertEqual(system.levels, 2)
        self.assertEqual(system.high_pass_subbands, bands)
        self.assertEqual(system.shape, shape)

        @jax.jit
        def round_trip(s, x):
            return s.synthesize(s.analyze(x))

        img = jnp.array(np.random.randn(*shape))
        rec = round_trip(system, img)
        np.testing.assert_allclose(jnp.real(rec), img, atol=1e-10)

    @parameterized.parameters("Held", "Vow", "Simoncelli", "Shannon")
    def test_matches_numpy(self, wavelet):
        """Verify that the jax forward transform equals the numpy one."""
        options = WaveletOptions(levels=3, high_pass_subbands=2, wavelet=wavelet)
        x = np.random.randn(32, 32)
        freq = forward_fft(x)
        subbands, _ = forward_undecimated(freq, options)

        system = get_wavelet_system((32, 32), options)
        jax_subbands = system.forward(jnp.asarray(freq.data))
        self.assertEqual(jax_subbands.shape, (7, 32, 32))
        for i, subband in enumerate(subbands):
            np.testing.assert_allclose(jax_subbands[i], subband.data, atol=1e-10)

    def test_configured_spacing(self):
        """The system is built on the grid of `options.spacing`."""
        options = WaveletOptions(levels=2, wavelet="Held", spacing=(2.0, 0.5))
        freq = forward_fft(np.random.randn(24, 32), spacing=(2.0, 0.5))
        subbands, _ = forward_undecimated(freq, options)

        system = get_wavelet_system((24, 32), options)
        jax_subbands = system.forward(jnp.asarray(freq.data))
        for i, subband in enumerate(subbands):
            np.testing.assert_allclose(jax_subbands[i], subband.data, atol=1e-10)

    def test_fft_matches_numpy(self):
        x = np.random.randn(16, 20)
        np.testing.assert_allclose(jax_fftn(x), forward_fft(x).data, atol=1e-10)
        np.testing.assert_allclose(jnp.real(jax_ifftn(jax_fftn(x))), x, atol=1e-12)

    def test_3d_round_trip(self):
        options = WaveletOptions(levels=2, high_pass_subbands=2, wavelet="Held")
        system = get_wavelet_system((12, 12, 12), options)
        img = jnp.array(np.random.randn(12, 12, 12))
        coeffs = system.analyze(img)
        self.assertEqual(coeffs.shape, (5, 12, 12, 12))
        np.testing.assert_allclose(
            jnp.real(system.synthesize(coeffs)), img, atol=1e-10
        )

    def test_zero_levels(self):
        system = get_wavelet_system((8, 8), WaveletOptions(levels=0))
        freq = jnp.array(np.random.randn(8, 8) + 0j)
        subbands = system.forward(freq)
        self.assertEqual(subbands.shape, (1, 8, 8))
        np.testing.assert_allclose(system.inverse(subbands), freq)

    def test_gradient(self):
        """The analysis energy equals the image energy, so its gradient is 2x."""
        options = WaveletOptions(levels=2, high_pass_subbands=2, wavelet="Vow")
        system = get_wavelet_system((16, 16), options)

        def energy(x):
            return jnp.sum(jnp.abs(system.analyze(x))**2)

        img = jnp.array(np.random.randn(16, 16))
        grad = jax.grad(energy)(img)
        self.assertEqual(grad.shape, (16, 16))
        np.testing.assert_allclose(grad, 2 * img, atol=1e-8)


if __name__ == "__main__":
    absltest.main()
