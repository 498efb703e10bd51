from setuptools import setup

setup(
    name="fa-checker",
    version="0.1.0",
    description="Validate deterministic and nondeterministic finite automata and test input strings.",
    python_requires=">=3.9",
    packages=["fa_checker"],
    py_modules=["main"],
    extras_require={"tests": ["pytest>=7"]},
    entry_points={"console_scripts": ["fa-checker=fa_checker.cli:run"]},
)
