from setuptools import setup, find_packages

setup(
    name="isotropic_wavelets",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "examples"]),
    install_requires=[
        "numpy",
        "scipy",
        "jax",
        "scikit-image",
        "matplotlib",
    ],
    extras_require={
        "test": ["pytest", "absl-py"],
    },
    entry_points={
        "console_scripts": [
            "isotropic-wavelets=isotropic_wavelets.cli:run",
        ],
    },
    description="Undecimated isotropic wavelet transforms of N-D images in the frequency domain.",
    keywords="wavelets, isotropic wavelets, steerable wavelets, frequency domain, image processing",
    python_requires=">=3.10",
    license="MIT",
)
