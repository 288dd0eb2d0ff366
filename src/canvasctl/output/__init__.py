"""CLI output: Rich rendering for humans, JSON for machines."""
