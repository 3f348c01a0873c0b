import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="xuniq",
    version="0.1.0",
    description="JAX-optimized first-occurrence deduplication of unsigned integer sequences",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=["xuniq", "xuniq.*"]),
    install_requires=[
        "jax>=0.4.20",
        "chex>=0.1.0",
        "numpy>=1.22",
        "absl-py>=1.0.0",
        "typing_extensions>=4.0.0",
    ],
    extras_require={
        "cuda": [
            "jax[cuda]>=0.4.20",
        ],
        "benchmarks": [
            "rich>=13.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "rich>=13.0.0",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
)
