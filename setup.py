"""featalign: aligned bases of features between query and target."""

from setuptools import find_packages, setup

from featalign import __version__

setup(
    name="featalign",
    version=__version__,
    license="BSD-3-Clause",
    packages=find_packages(),
    install_requires=[
        "polars-u64-idx >= 1.21",
        "click",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points="""
          [console_scripts]
          featalign=featalign.cli:cli
      """,
)
