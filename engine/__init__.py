"""Git operations and the history-squashing workflow."""
