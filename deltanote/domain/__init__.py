"""Domain layer: typed errors and the ports the core depends on."""
