from setuptools import find_packages, setup

LIBRARY_NAME = "rlinalg"


def get_install_requires():
    return [
        "torch>=2.0",
        "numpy",
        "wandb",
    ]


def get_extras_require():
    return {
        "test": [
            "pytest",
            "scipy",
        ],
    }


setup(
    name=LIBRARY_NAME,
    version="0.1.0",
    description="Randomized linear algebra: compressors, iterative solvers and "
    "low-rank approximators in PyTorch",
    packages=find_packages(include=[LIBRARY_NAME, f"{LIBRARY_NAME}.*"]),
    python_requires=">=3.10",
    install_requires=get_install_requires(),
    extras_require=get_extras_require(),
)
