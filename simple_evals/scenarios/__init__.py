"""Live evaluation scenarios, run with ``pytest simple_evals/scenarios -m eval``."""
