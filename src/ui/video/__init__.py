"""Media player components.

video_player is not imported here: importing it loads libmpv.
"""

from .player_controls import MPVSignals, SeekSlider

__all__ = ['MPVSignals', 'SeekSlider']
