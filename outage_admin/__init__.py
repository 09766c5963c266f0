"""
Outage Admin module.

This module contains the operator CLI and its environment configuration.
It is the only layer that reads the wall clock.
"""
