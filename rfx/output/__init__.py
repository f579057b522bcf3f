# RFX Output Module
# Rich console output and interactive prompts

from rfx.output.console import Console, create_console, describe_upstream, truncate
from rfx.output.interactive import InteractiveFlowHandler, interactive_branch, interactive_commit

__all__ = [
    "Console",
    "create_console",
    "describe_upstream",
    "truncate",
    "InteractiveFlowHandler",
    "interactive_commit",
    "interactive_branch",
]
