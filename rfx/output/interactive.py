# RFX Interactive Flows
# Prompt-driven commit and branch creation, and the pull/push flow handler

from typing import Optional

from rfx.errors import UserCancelled, ValidationError
from rfx.logger import RfxLogger
from rfx.models import FileChange
from rfx.output.console import Console
from rfx.workflow import ChangeDecision, Workflow

STAGE_ALL = "All changes"
STAGE_SELECTED = "Select files"


def interactive_commit(workflow: Workflow, console: Console, logger: RfxLogger) -> Optional[str]:
    """
    Walk the user through staging and committing.

    The message is collected and validated before anything is staged,
    so cancelling leaves the index untouched.

    Returns:
        Short hash of the new commit, or None if there was nothing to commit.

    Raises:
        UserCancelled: If a prompt is dismissed.
    """
    changes = workflow.list_changes()
    if not changes:
        logger.info("Nothing to commit, working tree clean")
        return None

    console.print("[bold]Changed files:[/bold]")
    console.print_changes(changes)
    console.print()

    mode = console.choose("What do you want to commit?", [STAGE_ALL, STAGE_SELECTED], default=STAGE_ALL)

    selected: list[str] = []
    if mode == STAGE_SELECTED:
        paths = {change.display_path: change.path for change in changes}
        labels = console.choose_many("Files to commit (numbers, separated by spaces)", list(paths))
        selected = [paths[label] for label in labels]
        if not selected:
            logger.warning("No files selected")
            raise UserCancelled()

    message = _ask_commit_message(workflow, console, logger)

    if mode == STAGE_ALL:
        workflow.stage_all()
    else:
        workflow.stage_files(selected)

    commit_hash = workflow.create_commit(message)
    logger.success(f"Committed {commit_hash}: {message}")
    return commit_hash


def _ask_commit_message(workflow: Workflow, console: Console, logger: RfxLogger) -> str:
    while True:
        try:
            return workflow.validate_commit_message(console.ask("Commit message"))
        except ValidationError as e:
            logger.error(e.reason)


def interactive_branch(workflow: Workflow, console: Console, logger: RfxLogger) -> str:
    """
    Ask for a branch name until a valid one is given, then create it.

    Raises:
        UserCancelled: If the prompt is dismissed.
    """
    while True:
        name = console.ask("New branch name")
        try:
            name = workflow.create_branch(name)
        except ValidationError as e:
            logger.error(e.reason)
            continue
        logger.success(f"Created and switched to branch '{name}'")
        return name


class InteractiveFlowHandler:
    """FlowHandler that asks the user at each decision point."""

    def __init__(self, console: Console, logger: RfxLogger, action: str):
        """
        Args:
            console: Console used for prompts.
            logger: Logger for status messages.
            action: "pull" or "push", used in prompt wording.
        """
        self.console = console
        self.logger = logger
        self.action = action

    def decide(self, changes: list[FileChange]) -> ChangeDecision:
        self.logger.warning(f"You have {len(changes)} uncommitted change(s):")
        self.console.print_changes(changes)
        self.console.print()

        options = {
            "Commit them now": ChangeDecision.COMMIT,
            f"Stash them during the {self.action}": ChangeDecision.STASH,
            "Cancel": ChangeDecision.CANCEL,
        }
        labels = list(options)
        try:
            choice = self.console.choose("How do you want to continue?", labels, default=labels[0])
        except UserCancelled:
            return ChangeDecision.CANCEL
        return options[choice]

    def commit_changes(self, workflow: Workflow) -> None:
        try:
            interactive_commit(workflow, self.console, self.logger)
        except UserCancelled:
            self.logger.warning("Commit cancelled")

    def select_target(self, candidates: list[str], default: Optional[str]) -> Optional[str]:
        verb = "Pull from" if self.action == "pull" else "Push to"
        try:
            return self.console.choose(f"{verb} which branch?", candidates, default=default)
        except UserCancelled:
            return None
