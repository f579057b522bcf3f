# RFX Git Module
# Process adapter, output parsing and repository operations

from rfx.git.operations import GitRepository
from rfx.git.parsing import (
    parse_ahead_behind,
    parse_commit_line,
    parse_remote_branch_line,
    parse_remote_line,
    parse_remote_url,
    parse_status_line,
    unquote_path,
)
from rfx.git.runner import GitRunner, SubprocessGitRunner

__all__ = [
    "GitRunner",
    "SubprocessGitRunner",
    "GitRepository",
    "parse_status_line",
    "parse_commit_line",
    "parse_remote_line",
    "parse_remote_url",
    "parse_remote_branch_line",
    "parse_ahead_behind",
    "unquote_path",
]
