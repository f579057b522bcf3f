# RFX Git Output Parsing
# Turns fixed-format git output into typed records.
# Parsers never raise on malformed input; they degrade to sentinel values.

from typing import Optional

from rfx.models import CommitInfo, FileChange, RemoteBranchInfo, RemoteDirection, RemoteInfo

UNKNOWN = "Unknown"
NO_COMMIT = "No commit"

RENAME_SEPARATOR = " -> "

# Single-character escapes used by git's C-style path quoting
_C_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "t": 0x09,
    "n": 0x0A,
    "v": 0x0B,
    "f": 0x0C,
    "r": 0x0D,
    '"': 0x22,
    "\\": 0x5C,
}
_OCTAL_DIGITS = "01234567"


def unquote_path(path: str) -> str:
    """
    Decode a path printed by git in C-quoted form.

    Git quotes paths containing special or non-ASCII characters, e.g.
    "caf\\303\\251.txt" for café.txt. Unquoted paths are returned as is.
    Bytes that are not valid UTF-8 are kept as surrogate escapes so the
    path can still be passed back to git.
    """
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path

    body = path[1:-1]
    decoded = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == "\\" and i + 1 < len(body):
            escape = body[i + 1]
            octal = body[i + 1 : i + 4]
            if escape in _C_ESCAPES:
                decoded.append(_C_ESCAPES[escape])
                i += 2
                continue
            if len(octal) == 3 and all(digit in _OCTAL_DIGITS for digit in octal):
                decoded.append(int(octal, 8) & 0xFF)
                i += 4
                continue
        decoded += ch.encode("utf-8", errors="surrogateescape")
        i += 1

    return decoded.decode("utf-8", errors="surrogateescape")


def _split_rename(path: str) -> tuple[Optional[str], str]:
    """Split "old -> new" into (old, new); either side may be quoted."""
    if path.startswith('"'):
        # Find the closing quote of the first path, skipping escaped characters.
        i = 1
        while i < len(path):
            if path[i] == "\\":
                i += 2
                continue
            if path[i] == '"':
                break
            i += 1
        rest = path[i + 1 :]
        if rest.startswith(RENAME_SEPARATOR):
            return path[: i + 1], rest[len(RENAME_SEPARATOR) :]
        return None, path

    source, separator, target = path.partition(RENAME_SEPARATOR)
    if not separator:
        return None, path
    return source, target


def parse_status_line(line: str) -> FileChange:
    """
    Parse one porcelain v1 status line.

    Format: XY<space>path, where XY occupies fixed columns and may
    begin with a space (" M file"). Renames and copies read
    "R  old -> new". Quoted paths are decoded.

    Args:
        line: Untrimmed status line.

    Returns:
        FileChange with trimmed status code and decoded path, relative
        to the repository root.
    """
    if len(line) < 4:
        return FileChange(status="?", path=line)

    status = line[:3].strip()
    path = line[3:].strip()
    orig_path = None
    if "R" in line[:2] or "C" in line[:2]:
        orig_path, path = _split_rename(path)
        if orig_path is not None:
            orig_path = unquote_path(orig_path)
    return FileChange(status=status, path=unquote_path(path), orig_path=orig_path)


def parse_status(output: str) -> list[FileChange]:
    """Parse raw `git status --porcelain=v1` output."""
    return [parse_status_line(line) for line in output.splitlines() if line.strip()]


def parse_first_commit(line: str) -> tuple[str, str]:
    """Parse a `%an|%ad` line into (author, date)."""
    parts = line.split("|", 1)
    author = parts[0] if parts[0] else UNKNOWN
    created = parts[1] if len(parts) > 1 and parts[1] else UNKNOWN
    return author, created


def parse_last_commit(line: str) -> tuple[str, str]:
    """Parse a `%ad|%s` line into (date, subject)."""
    parts = line.split("|", 1)
    changed = parts[0] if parts[0] else UNKNOWN
    subject = parts[1] if len(parts) > 1 and parts[1] else NO_COMMIT
    return changed, subject


def parse_commit_line(line: str) -> CommitInfo:
    """
    Parse a `%h|%an|%ad|%s` line.

    The subject may itself contain "|", so at most three splits are made.
    Missing fields become empty strings.
    """
    parts = line.strip().split("|", 3)
    parts += [""] * (4 - len(parts))
    return CommitInfo(hash=parts[0], author=parts[1], date=parts[2], message=parts[3])


def parse_commits(output: str) -> list[CommitInfo]:
    return [parse_commit_line(line) for line in output.splitlines() if line.strip()]


def parse_remote_url(url: str) -> tuple[Optional[str], Optional[str], Optional[str]]:
    """
    Split a remote URL into (host, owner, repo).

    Recognizes https://host/owner/repo[.git] and git@host:owner/repo[.git].
    Anything else yields (None, None, None).
    """
    if url.startswith("https://"):
        parts = url[len("https://"):].split("/")
        if len(parts) >= 3:
            return parts[0], parts[1], _strip_git_suffix(parts[2])

    if url.startswith("git@"):
        parts = url[len("git@"):].split(":")
        if len(parts) == 2:
            path = parts[1].split("/")
            if len(path) == 2:
                return parts[0], path[0], _strip_git_suffix(path[1])

    return None, None, None


def _strip_git_suffix(name: str) -> str:
    while name.endswith(".git"):
        name = name[: -len(".git")]
    return name


def parse_remote_line(line: str) -> Optional[RemoteInfo]:
    """
    Parse one `git remote -v` line: "origin <url> (fetch)".

    Returns:
        RemoteInfo, or None for lines that don't have three tokens
        or carry an unknown direction.
    """
    parts = line.split()
    if len(parts) < 3:
        return None

    try:
        direction = RemoteDirection(parts[2].strip("()"))
    except ValueError:
        return None

    host, owner, repo = parse_remote_url(parts[1])
    return RemoteInfo(
        name=parts[0],
        url=parts[1],
        direction=direction,
        host=host,
        owner=owner,
        repo=repo,
    )


def parse_remotes(output: str) -> list[RemoteInfo]:
    remotes = (parse_remote_line(line) for line in output.splitlines())
    return [remote for remote in remotes if remote is not None]


def parse_remote_branch_line(line: str) -> Optional[RemoteBranchInfo]:
    """
    Parse a `%(refname:short)|%(authorname)|%(committerdate:short)` line.

    Symbolic HEAD entries and names without a remote segment are skipped.
    """
    parts = line.strip().split("|")
    full_name = parts[0]
    if not full_name or full_name == "HEAD" or full_name.endswith("/HEAD"):
        return None
    if "/" not in full_name:
        return None

    author = parts[1] if len(parts) > 1 else ""
    date = parts[2] if len(parts) > 2 else ""
    return RemoteBranchInfo(
        full_name=full_name,
        short_name=full_name.split("/", 1)[1],
        author=author,
        date=date,
    )


def parse_remote_branches(output: str) -> list[RemoteBranchInfo]:
    branches = (parse_remote_branch_line(line) for line in output.splitlines())
    return [branch for branch in branches if branch is not None]


def parse_ahead_behind(output: str) -> tuple[int, int]:
    """
    Parse `git rev-list --left-right --count HEAD...upstream` output.

    Returns:
        (ahead, behind); (0, 0) when the output is short or not numeric.
    """
    parts = output.split()
    if len(parts) < 2:
        return 0, 0
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return 0, 0
