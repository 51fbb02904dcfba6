"""Nerdland episode archive - SoundCloud acquisition pipeline"""

__version__ = "1.0.0"
