# RFX Configuration Schema
# Pydantic models for YAML configuration validation

from pydantic import BaseModel, Field


class DefaultsConfig(BaseModel):
    """Defaults for command options."""

    branch: str = Field(default="main", description="Branch shown by 'show commits'")
    count: int = Field(default=10, ge=1, description="Number of commits shown by 'show commits'")
    remote: str = Field(default="origin", description="Preferred remote for push")


class CommitConfig(BaseModel):
    """Commit message rules."""

    min_message_length: int = Field(default=3, ge=1, description="Minimum trimmed commit message length")


class OutputConfig(BaseModel):
    """Output settings."""

    colored: bool = Field(default=True, description="Enable colored output")
    verbose: bool = Field(default=False, description="Show executed git commands")
    max_branch_width: int = Field(default=10, ge=2, description="Truncate branch names in tables")
    max_author_width: int = Field(default=15, ge=2, description="Truncate author names in tables")
    max_message_width: int = Field(default=25, ge=2, description="Truncate commit messages in tables")


class RfxConfig(BaseModel):
    """Root configuration model for rfx."""

    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig, description="Command defaults")
    commit: CommitConfig = Field(default_factory=CommitConfig, description="Commit rules")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")
