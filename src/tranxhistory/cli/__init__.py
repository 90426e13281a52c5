"""CLI for tranxhistory."""
