"""Application layer - ports and the playback orchestration services."""
