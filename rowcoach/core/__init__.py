"""
Core business logic for rowing session timing.

This module is framework-agnostic - it doesn't import FastAPI, Anthropic,
or any infrastructure concerns, so the timing rules can be tested in
isolation.
"""
