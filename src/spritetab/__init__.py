"""Sprite sheet tab for Stash scenes."""
