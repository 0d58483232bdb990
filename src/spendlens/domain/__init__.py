"""Domain layer: persistence interfaces the services depend on."""
