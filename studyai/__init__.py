"""Study assistant orchestration service."""
