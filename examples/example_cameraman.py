import numpy as np
import matplotlib.pyplot as plt
from skimage import data
import time
from isotropic_wavelets import (
  WaveletOptions,
  forward_fft,
  forward_undecimated,
  inverse_fft,
  inverse_undecimated
)

def run_example():
  """Run a demonstration of the undecimated wavelet transform on the cameraman image."""
  print("--- Isotropic Undecimated Wavelet Transform Example ---")

  # Load cameraman image.
  image = data.camera().astype(np.float64)
  n1, n2 = image.shape
  print(f"Loaded image of size {n1}x{n2}")

  # Setup options.
  options = WaveletOptions(
    levels=3,
    high_pass_subbands=2,
    wavelet="Held",
    wavelet_params={"polynomial_order": 5},
    use_filter_bank_pyramid=True
  )

  # 1. Forward Transform.
  print("Computing forward transform...")
  start_time = time.time()
  freq = forward_fft(image)
  subbands, pyramid = forward_undecimated(freq, options)
  print(f"Forward transform took: {time.time() - start_time:.2f} seconds")
  print(f"Number of outputs: {len(subbands)} (redundancy factor {len(subbands)})")

  # 2. Energy per sub-band.
  total_energy = np.sum(np.abs(freq.data)**2)
  for i, subband in enumerate(subbands[:-1]):
    level, j = divmod(i, options.high_pass_subbands)
    energy = np.sum(np.abs(subband.data)**2) / total_energy
    print(f"Level {level} sub-band {j + 1}: {100 * energy:.2f}% of the energy")
  residual = np.sum(np.abs(subbands[-1].data)**2) / total_energy
  print(f"Low pass residual: {100 * residual:.2f}% of the energy")

  # 3. Inverse Transform, reusing the forward pyramid.
  print("Computing inverse transform...")
  start_time = time.time()
  recovered = inverse_fft(inverse_undecimated(subbands, options, pyramid))
  print(f"Inverse transform took: {time.time() - start_time:.2f} seconds")

  # 4. Verification.
  error = np.linalg.norm(image - recovered) / np.linalg.norm(image)
  print(f"Reconstruction Error (Relative L2): {error:.2e}")

  # 5. Visualization.
  fig, axes = plt.subplots(2, 4, figsize=(16, 8))
  for i, (ax, subband) in enumerate(zip(axes[0], subbands)):
    ax.imshow(inverse_fft(subband), cmap='gray')
    ax.set_title(f"Output {i}")
    ax.axis('off')

  axes[1, 0].imshow(inverse_fft(subbands[-1]), cmap='gray')
  axes[1, 0].set_title("Low Pass Residual")

  axes[1, 1].imshow(image, cmap='gray')
  axes[1, 1].set_title("Original Image")

  axes[1, 2].imshow(recovered, cmap='gray')
  axes[1, 2].set_title("Reconstructed Image")

  error_map = np.abs(image - recovered)
  im_err = axes[1, 3].imshow(error_map, cmap='hot')
  axes[1, 3].set_title("Absolute Error Map")
  plt.colorbar(im_err, ax=axes[1, 3])
  for ax in axes[1]:
    ax.axis('off')

  plt.tight_layout()
  plt.savefig('wavelet_reconstruction.png')
  print("Artifact saved: wavelet_reconstruction.png")
  plt.show()

if __name__ == "__main__":
  run_example()
