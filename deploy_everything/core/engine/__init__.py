"""Execution driver."""
