"""Optimizer process package.

`engine` holds the pure pack fulfillment search and `types` its result and
error types. The CLI adapter in `adapter` wraps the engine for single orders
and CSV batches and is testable in isolation.
"""
