"""
Welcome Gate - first-run mode selection for the digital-human host.

Decides on each launch whether the onboarding page must be shown, hosts it
in an embedded web surface, relays the user's choice and language across the
bridge, and persists the outcome so later launches route straight through.

Usage:
    python -m welcome_gate --config welcome_gate.json
"""
__version__ = "0.1.0"
