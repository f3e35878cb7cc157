"""
Heads Up - forehead pose detection for the guessing game.

This package decides when a phone is being held against the player's
forehead (landscape, screen facing outward) from a stream of device
orientation readings, and announces the change only once the stance has been
held for a dwell time.

Features:
- Pure pose classification of alpha/beta/gamma orientation samples
- Debounced, cancellable pose-change confirmation
- Typed event bus connecting sensor, detector and debug services
- Replayable sample sources for demos and deterministic tests
"""

__version__ = "1.0.0"
