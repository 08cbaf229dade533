"""Command-line tools for Backend GameScore."""
