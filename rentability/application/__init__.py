"""Application layer: simulation orchestration and the compute boundary."""
