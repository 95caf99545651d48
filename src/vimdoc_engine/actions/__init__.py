"""Command handlers. Submodules are imported explicitly by the keymap defaults."""
