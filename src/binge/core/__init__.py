"""Core services: asset matching, extraction, release access and the
install/update orchestrator."""
