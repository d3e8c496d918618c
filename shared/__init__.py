"""
Shared kernel.

Entity and aggregate base classes, value objects, the Result type and the
message bus / unit of work used by the booking context.
"""
