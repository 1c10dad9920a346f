"""
notification_pane runtime package.

Holds the process-wide pieces of the notification pane application that do
not belong to the pipeline itself, currently the logging setup.
"""

__all__ = [
    "logger",
]
