"""Domain layer: atoms, templates, grid snapshots, connectivity, ledger, strategies."""
