"""Command line entry points for mlpnet."""
