"""HTTP API for the pack fulfillment optimizer."""
