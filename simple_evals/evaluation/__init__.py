"""Quality evaluators, their metric types, and the composite evaluator."""
