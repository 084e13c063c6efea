# -*- coding: utf-8 -*-
import pathlib
import site
import sys

import setuptools

# odd bug with develop (editable) installs, see: https://github.com/pypa/pip/issues/7953
site.ENABLE_USER_SITE = "--user" in sys.argv[1:]

required = [
    "numpy",
    "nidaqmx>=1.0.0",
    "mashumaro>=3.11",
    "pyzmq",
    "loguru",
    "click>=8.0.0",
    "setproctitle",
]

extras = {
    "test": [
        "pytest",
    ],
    "dev": [
        "doit",
        "ruff",
        "pdoc3",
    ],
}

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

# Read version
version = {}
with open(here / "src/painlab_nidaq/_version.py", "r") as f:
    exec(f.read(), version)

if __name__ == "__main__":
    setuptools.setup(
        name="painlab-nidaq",
        version=version["__version__"],
        description="PainLab device bridge for an NI-DAQ electrical stimulator.",
        long_description=long_description,
        long_description_content_type="text/markdown",
        keywords=[
            "PainLab",
            "NI-DAQ",
            "stimulation",
            "pain research",
        ],
        classifiers=[
            "Development Status :: 3 - Alpha",
            "Intended Audience :: Science/Research",
        ],
        package_dir={"": "src"},
        packages=setuptools.find_packages(
            where="src",
            exclude=["*.test", "*.test.*", "test.*", "test", "test_*"],
        ),
        entry_points={
            "console_scripts": [
                "painlab-nidaq=painlab_nidaq.cli:cli",
            ],
        },
        install_requires=required,
        extras_require=extras,
        python_requires=">= 3.10",
        package_data={"": ["*.md", "*.json"]},
    )
