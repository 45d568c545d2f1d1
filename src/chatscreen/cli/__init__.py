"""chatscreen CLI."""
