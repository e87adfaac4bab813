"""Application layer: classification, ranking and the analysis pipeline."""
