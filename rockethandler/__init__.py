"""
Rocket Handler - posts monitoring events to Rocket.Chat channels.

This package renders a description from a monitoring event with a
template, authenticates against the Rocket.Chat REST API and posts the
result as a formatted message to a channel.
"""

__version__ = "0.1.0"
