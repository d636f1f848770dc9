"""
Squink - Turn-based grid painting game engine

Players compete to paint the most cells of a shared grid within a
fixed number of rounds. The package provides:
- The grid and the game state machine (Forming -> Active -> Finished)
- Move validation and scoring
- Pluggable player policies
- A turn driver, a local match runner and a REST API
"""

__version__ = "0.1.0"
