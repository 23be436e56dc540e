"""Domain layer: roster types, reconciliation core, ports and services."""
