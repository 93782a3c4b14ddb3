"""CLI commands for react-codemods."""
