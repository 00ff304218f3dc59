"""solverify — reproduce the compilation of verified smart contracts."""

__version__ = "0.1.0"
