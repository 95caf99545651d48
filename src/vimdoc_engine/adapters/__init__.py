"""Host adapters that render engine snapshots and forward key events."""
