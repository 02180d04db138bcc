"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- anthropic: Claude API client for performance summaries
- benchmarks: World best time lookup

These wrappers translate between external formats and our domain models.
"""
