"""Command-line interface for react-codemods."""
