import jax
import jax.numpy as jnp
import numpy as np
import matplotlib.pyplot as plt
from skimage import data
import time
from isotropic_wavelets import (
    WaveletOptions,
    forward_fft,
    forward_undecimated,
    get_wavelet_system
)

jax.config.update('jax_enable_x64', True)

def run_jax_example():
    """Run a demonstration of the JAX wavelet system, compared with numpy."""
    print("--- JAX Isotropic Wavelet Example (Cameraman) ---")

    # Load cameraman image and convert to JAX array.
    image_np = data.camera().astype(np.float64) / 255.0
    image = jnp.array(image_np)
    m, n = image.shape
    print(f"Loaded image of size {m}x{n}")

    options = WaveletOptions(levels=4, high_pass_subbands=1, wavelet="Vow")

    # Generate the Wavelet System (Pre-computation).
    print("Generating Wavelet System (Pre-computation)...")
    start_time = time.time()
    system = get_wavelet_system((m, n), options)
    print(f"System generation took: {time.time() - start_time:.2f} seconds")

    @jax.jit
    def forward_transform(img, system):
        return system.analyze(img)

    @jax.jit
    def inverse_transform(coeffs, system):
        return system.synthesize(coeffs)

    # Warm up JIT.
    print("Warming up JIT...")
    coeffs = forward_transform(image, system)
    _ = inverse_transform(coeffs, system)

    print("[JAX] Benchmarking warm forward transform (5 trials)...")
    jax_times = []
    for _ in range(5):
        start_time = time.time()
        coeffs = forward_transform(image, system)
        coeffs.block_until_ready()
        jax_times.append(time.time() - start_time)
    print(f"JAX Warm Mean: {np.mean(jax_times):.4f}s, Variance: {np.var(jax_times):.2e}s")

    print("[NumPy] Benchmarking forward transform (5 trials)...")
    np_times = []
    for _ in range(5):
        start_time = time.time()
        subbands, _ = forward_undecimated(forward_fft(image_np), options)
        np_times.append(time.time() - start_time)
    print(f"NumPy Mean: {np.mean(np_times):.4f}s, Variance: {np.var(np_times):.2e}s")

    # Compare sub-bands in the frequency domain.
    jax_subbands = system.forward(jnp.asarray(forward_fft(image_np).data))
    max_diff = max(
        np.max(np.abs(np.array(jax_subbands[i]) - s.data))
        for i, s in enumerate(subbands)
    )
    print(f"Maximum difference in sub-bands: {max_diff:.2e}")

    # Perform Inverse Transform (Reconstruction).
    start_time = time.time()
    reconstructed = inverse_transform(coeffs, system)
    reconstructed.block_until_ready()
    print(f"Inverse transform took: {time.time() - start_time:.4f} seconds")

    reconstructed_real = jnp.real(reconstructed)
    error = jnp.linalg.norm(image - reconstructed_real) / jnp.linalg.norm(image)
    print(f"Reconstruction Error (Relative L2): {error:.2e}")

    # Visualization.
    fig, axes = plt.subplots(1, 3, figsize=(15, 5))

    axes[0].imshow(image_np, cmap='gray')
    axes[0].set_title("Original Image")
    axes[0].axis('off')

    axes[1].imshow(np.abs(np.array(coeffs[0])), cmap='gray')
    axes[1].set_title("Finest Sub-band (JAX)")
    axes[1].axis('off')

    error_map = np.abs(image_np - np.array(reconstructed_real))
    im_err = axes[2].imshow(error_map, cmap='hot')
    axes[2].set_title("Absolute Error Map")
    axes[2].axis('off')
    plt.colorbar(im_err, ax=axes[2])

    plt.tight_layout()
    plt.savefig('wavelet_jax_reconstruction.png')
    print("Artifact saved: wavelet_jax_reconstruction.png")
    # plt.show() # Disabled for headless execution

if __name__ == "__main__":
    run_jax_example()
