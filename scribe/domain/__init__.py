"""Domain models shared by the pipeline and persistence layers."""
