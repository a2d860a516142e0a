from notetune_core.contracts.songs import SongDataDTO, SongDTO

__all__ = [
    "SongDataDTO",
    "SongDTO",
]
