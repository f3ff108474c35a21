"""Process-wide state shared between the loader and the game."""
