"""Isotropic wavelet system in jax.

The filter bank pyramid is generated once with numpy and stored as dense jax
arrays. The undecimated transforms then reduce to products and sums of those
masks with the spectrum, which are jit-compatible and differentiable. The
system trades memory (L * (J + 1) masks of the image size) for speed when the
same configuration is applied to many images.
"""

from typing import Sequence

import jax
import jax.numpy as jnp
import numpy as np

from .filter_bank import generate_filter_bank_pyramid
from .undecimated import WaveletOptions

Array = jax.Array


def jax_fftn(spatial_input: Array) -> Array:
  """Computes the N-D FFT with centered layout and orthonormal scaling."""
  return jnp.fft.fftshift(jnp.fft.fftn(jnp.fft.ifftshift(spatial_input),
                                       norm='ortho'))


def jax_ifftn(frequency_input: Array) -> Array:
  """Computes the inverse of `jax_fftn`."""
  return jnp.fft.fftshift(jnp.fft.ifftn(jnp.fft.ifftshift(frequency_input),
                                        norm='ortho'))


@jax.tree_util.register_pytree_node_class
class WaveletSystem:
  """A JAX Pytree holding an isotropic wavelet filter bank pyramid.

  Attributes:
    low_pass: Low pass masks, [levels, *shape].
    high_pass: High pass sub-band masks, [levels, subbands, *shape].
  """

  def __init__(self, low_pass: Array, high_pass: Array):
    self.low_pass = low_pass
    self.high_pass = high_pass

  def tree_flatten(self):
    children = (self.low_pass, self.high_pass)
    aux_data = None
    return (children, aux_data)

  @classmethod
  def tree_unflatten(cls, aux_data, children):
    return cls(*children)

  @property
  def levels(self) -> int:
    return self.high_pass.shape[0]

  @property
  def high_pass_subbands(self) -> int:
    return self.high_pass.shape[1]

  @property
  def shape(self) -> tuple:
    return tuple(self.high_pass.shape[2:])

  def forward(self, freq: Array) -> Array:
    """Forward undecimated transform of a centered spectrum.

    Args:
      freq: Frequency image [*shape].

    Returns:
      subbands: [levels * subbands + 1, *shape] in level-major order, the low
        pass residual last.
    """
    outputs = []
    current = freq
    for level in range(self.levels):
      outputs.append(current[None] * self.high_pass[level])
      current = current * self.low_pass[level]
    outputs.append(current[None])
    return jnp.concatenate(outputs, axis=0)

  def inverse(self, subbands: Array) -> Array:
    """Inverse undecimated transform.

    Args:
      subbands: [levels * subbands + 1, *shape] as returned by `forward`.

    Returns:
      freq: Reconstructed frequency image [*shape].
    """
    n_bands = self.high_pass_subbands
    current = subbands[-1]
    for level in reversed(range(self.levels)):
      bands = subbands[level * n_bands:(level + 1) * n_bands]
      current = current * self.low_pass[level] + jnp.sum(
        bands * self.high_pass[level], axis=0
      )
    return current

  def analyze(self, img: Array) -> Array:
    """Spatial image to spatial sub-band images.

    Args:
      img: Image [*shape].

    Returns:
      coeffs: Sub-band images [levels * subbands + 1, *shape] (complex).
    """
    subbands = self.forward(jax_fftn(img))
    return jax.vmap(jax_ifftn)(subbands)

  def synthesize(self, coeffs: Array) -> Array:
    """Spatial sub-band images back to the image.

    Args:
      coeffs: Sub-band images [levels * subbands + 1, *shape].

    Returns:
      img: Reconstructed image [*shape] (complex).
    """
    subbands = jax.vmap(jax_fftn)(coeffs)
    return jax_ifftn(self.inverse(subbands))


def get_wavelet_system(
  shape: Sequence[int],
  options: WaveletOptions,
  spacing: Sequence[float] | None = None
) -> WaveletSystem:
  """Builds the wavelet system for images of a given shape.

  Args:
    shape: Shape of the images to transform.
    options: WaveletOptions object containing transform parameters.
    spacing: Spatial spacing of the images (defaults to `options.spacing`,
      then to ones).

  Returns:
    A WaveletSystem object containing the analysis masks.
  """
  if spacing is None:
    spacing = options.spacing
  pyramid = generate_filter_bank_pyramid(
    options.wavelet, shape, options.levels, spacing
  )
  shape = tuple(pyramid.shape)
  n_bands = options.high_pass_subbands

  if pyramid.num_levels == 0:
    low_pass = np.zeros((0,) + shape)
    high_pass = np.zeros((0, n_bands) + shape)
  else:
    low_pass = np.stack([bank.low_pass for bank in pyramid])
    high_pass = np.stack([np.stack(bank.high_pass) for bank in pyramid])

  return WaveletSystem(jnp.asarray(low_pass), jnp.asarray(high_pass))
