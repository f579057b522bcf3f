# RFX Default Configuration
# Default configuration dict and commented YAML template

from typing import Any

from rfx.config.schema import RfxConfig

DEFAULT_CONFIG: dict[str, Any] = RfxConfig().model_dump(mode="json")


def generate_default_config() -> str:
    """
    Generate the default configuration file content.

    Returns:
        YAML string with comments.
    """
    defaults = DEFAULT_CONFIG["defaults"]
    commit = DEFAULT_CONFIG["commit"]
    output = DEFAULT_CONFIG["output"]

    return f"""# rfx configuration
# Location: ~/.config/rfx/config.yaml (override with RFX_CONFIG)

defaults:
  # Branch used by 'rfx show commits' when --branch is not given
  branch: {defaults["branch"]}
  # Number of commits shown by 'rfx show commits'
  count: {defaults["count"]}
  # Remote preselected by 'rfx push' when the branch has no upstream
  remote: {defaults["remote"]}

commit:
  # Commit messages shorter than this (after trimming) are rejected
  min_message_length: {commit["min_message_length"]}

output:
  colored: {str(output["colored"]).lower()}
  # Print every git command before it runs
  verbose: {str(output["verbose"]).lower()}
  # Column widths for 'rfx show branches'
  max_branch_width: {output["max_branch_width"]}
  max_author_width: {output["max_author_width"]}
  max_message_width: {output["max_message_width"]}
"""
