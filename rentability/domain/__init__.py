"""Domain layer: data contract and pure calculators."""
