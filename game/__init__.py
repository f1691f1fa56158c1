"""Core game domain package for the defendant interrogation game."""

# This package contains:
# - Data models and error types (`models`, `errors`)
# - Case generation and the defendant turn loop (`case_generator`, `turn_processor`)
# - The public orchestrator and its startup wiring (`orchestrator`, `startup`)
