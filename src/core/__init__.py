"""Core domain package for nexusbot.

Core holds the event-role bindings, the command grammar and the handlers
without any Discord or storage-specific code, keeping the business logic
portable and testable with fakes.
"""
