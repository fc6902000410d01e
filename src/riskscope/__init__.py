"""riskscope: unified risk scoring for heterogeneous security findings."""

__version__ = "0.1.0"
