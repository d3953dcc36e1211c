"""Command-line adapter: loads a dataset file and renders engine results."""
