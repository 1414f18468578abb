"""Persisted state: the deployment record and the card catalog."""
