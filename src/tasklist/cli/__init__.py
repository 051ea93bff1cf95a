"""Console entrypoint, composition root and slash commands."""
