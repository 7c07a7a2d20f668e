"""Training pipelines and loss helpers for mlpnet."""
