from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TileBio:
    value: int
    name: str
    bio: str


TILE_BIOS: dict[int, TileBio] = {
    b.value: b
    for b in (
        TileBio(2, "Seed", "A tiny citrus seed, full of potential!"),
        TileBio(4, "Sprout", "Just waking up to the world."),
        TileBio(8, "Slice", "A fresh orange slice, ready to merge!"),
        TileBio(16, "Mandy", "Mandarin with big dreams."),
        TileBio(32, "Ruby", "Blood orange with a fiery personality."),
        TileBio(64, "Tang", "Tangerine who loves to party!"),
        TileBio(128, "Lemmy", "Lemon who brings the zest!"),
        TileBio(256, "Grape", "Grapefruit with serious goals."),
        TileBio(512, "Pom", "Pomelo, the wise elder."),
        TileBio(1024, "Goldie", "Golden citrus royalty!"),
        TileBio(2048, "THE ORANGE", "The legendary supreme citrus!"),
    )
}


def bio_for(value: int) -> TileBio | None:
    return TILE_BIOS.get(value)
