"""Command-line interface for the Fretes admin client."""
