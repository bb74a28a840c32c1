"""Game rules operating on the entity store and world state."""
