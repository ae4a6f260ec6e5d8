"""Application services: import orchestration, filtering, display and export."""
