"""Quality-gate evaluations for LLM chat responses."""

__version__ = "0.1.0"
