"""Progress tracking utilities for CLI."""

from typing import List, Optional

import click


class ProgressTracker:
    """Track progress through the stages of a command.

    Messages go to stderr so that report output on stdout stays clean.

    Attributes:
        stages: List of stage names
        total_stages: Total number of stages
        current_stage: Current stage index (0-based)
        quiet: Suppress all output
    """

    def __init__(self, stages: List[str], quiet: bool = False):
        """Initialize progress tracker with stages.

        Args:
            stages: List of stage names
            quiet: Suppress all output
        """
        self.stages = stages
        self.total_stages = len(stages)
        self.current_stage = 0
        self.quiet = quiet

    def start_stage(self) -> None:
        """Print the current stage header."""
        if not self.quiet:
            click.echo(self.get_current_message(), err=True)

    def advance(self, message: Optional[str] = None) -> None:
        """Advance to the next stage.

        Args:
            message: Optional message to display when advancing
        """
        if message and not self.quiet:
            click.echo(f"  {message}", err=True)
        self.current_stage += 1

    def get_current_message(self) -> str:
        """Get the current stage message with progress indicator."""
        if self.current_stage < self.total_stages:
            stage_name = self.stages[self.current_stage]
            return f"[{self.current_stage + 1}/{self.total_stages}] {stage_name}"
        return f"[{self.total_stages}/{self.total_stages}] Complete"

    def is_complete(self) -> bool:
        """Check if all stages are complete."""
        return self.current_stage >= self.total_stages
