"""aggbench core: models, pipeline, metrics and the ambient stack."""
