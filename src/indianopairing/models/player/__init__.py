from indianopairing.models.player.base_player import Player

__all__ = [
    "Player",
]
