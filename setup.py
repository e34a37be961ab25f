from setuptools import setup, find_packages

setup(
    name="opalinus_tensors",
    version="0.1.0",
    packages=find_packages(exclude=["tests"]),
    install_requires=[
        "numpy>=1.20.0",
        "scipy>=1.7.0",
        "matplotlib>=3.4.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    description="Rotated anisotropic permeability and elasticity tensors for bedded rock",
    python_requires=">=3.8",
)
