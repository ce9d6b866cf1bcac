"""
Progress tracking and user feedback for the build pipeline.

Provides per-stage progress, timing information and a completion summary
for the command-line deck builder.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Any, Callable
from dataclasses import dataclass, field
from enum import Enum


class ProcessingStage(Enum):
    """Major processing stages for progress tracking."""
    LOADING = "loading"
    CARD_GENERATION = "card_generation"
    PACKAGING = "packaging"
    FINALIZATION = "finalization"


@dataclass
class StageProgress:
    """Progress information for a processing stage."""
    stage: ProcessingStage
    status: str = "pending"  # pending, in_progress, completed, failed
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    progress_percentage: float = 0.0
    current_item: str = ""
    total_items: int = 0
    completed_items: int = 0
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration(self) -> Optional[timedelta]:
        """Get the duration of this stage."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        elif self.start_time:
            return datetime.now() - self.start_time
        return None

    @property
    def is_active(self) -> bool:
        return self.status == "in_progress"

    @property
    def is_completed(self) -> bool:
        return self.status in ["completed", "failed"]


class ProgressTracker:
    """
    Tracks progress across all processing stages.

    Stage transitions are logged; with console output enabled they are also
    printed so the CLI gives feedback without extra logging configuration.
    """

    def __init__(self, enable_console_output: bool = True):
        self.logger = logging.getLogger(__name__)
        self.enable_console_output = enable_console_output

        self.stages: Dict[ProcessingStage, StageProgress] = {
            stage: StageProgress(stage=stage) for stage in ProcessingStage
        }

        self.pipeline_start_time: Optional[datetime] = None
        self.pipeline_end_time: Optional[datetime] = None
        self.current_stage: Optional[ProcessingStage] = None

        self.progress_callbacks: List[Callable[[StageProgress], None]] = []
        self.summary_data: Dict[str, Any] = {}

    def add_progress_callback(self, callback: Callable[[StageProgress], None]) -> None:
        """Add a callback function to be called on progress updates."""
        self.progress_callbacks.append(callback)

    def _notify(self, stage_progress: StageProgress) -> None:
        for callback in self.progress_callbacks:
            callback(stage_progress)

    def start_pipeline(self) -> None:
        """Start tracking the overall pipeline."""
        self.pipeline_start_time = datetime.now()
        self.pipeline_end_time = None
        for stage in ProcessingStage:
            self.stages[stage] = StageProgress(stage=stage)
        self.summary_data = {}
        self.logger.info("Starting package build")
        if self.enable_console_output:
            print("Starting package build")
            print("=" * 50)

    def start_stage(self, stage: ProcessingStage, total_items: int = 0, details: Dict[str, Any] = None) -> None:
        """
        Start a processing stage.

        Args:
            stage: The processing stage to start
            total_items: Total number of items to process in this stage
            details: Additional details about the stage
        """
        stage_progress = self.stages[stage]
        stage_progress.status = "in_progress"
        stage_progress.start_time = datetime.now()
        stage_progress.total_items = total_items
        stage_progress.completed_items = 0
        stage_progress.progress_percentage = 0.0
        stage_progress.details = details or {}

        self.current_stage = stage

        stage_name = stage.value.replace('_', ' ').title()
        self.logger.info(f"Starting stage: {stage_name}")
        if self.enable_console_output:
            print(f"\n{stage_name}")
            if total_items > 0:
                print(f"   Processing {total_items} items...")

        self._notify(stage_progress)

    def update_stage_progress(self, stage: ProcessingStage, completed_items: int = None,
                              current_item: str = "", details: Dict[str, Any] = None) -> None:
        """Update progress for a stage."""
        stage_progress = self.stages[stage]

        if completed_items is not None:
            stage_progress.completed_items = completed_items
            if stage_progress.total_items > 0:
                stage_progress.progress_percentage = (completed_items / stage_progress.total_items) * 100

        if current_item:
            stage_progress.current_item = current_item

        if details:
            stage_progress.details.update(details)

        if stage_progress.total_items > 0:
            self.logger.debug(
                f"{stage.value}: {stage_progress.completed_items}/{stage_progress.total_items} "
                f"({stage_progress.progress_percentage:.1f}%)"
            )

        self._notify(stage_progress)

    def complete_stage(self, stage: ProcessingStage, success: bool = True,
                       details: Dict[str, Any] = None) -> None:
        """Mark a stage as completed."""
        stage_progress = self.stages[stage]
        stage_progress.status = "completed" if success else "failed"
        stage_progress.end_time = datetime.now()
        if success:
            stage_progress.progress_percentage = 100.0
        if details:
            stage_progress.details.update(details)

        stage_name = stage.value.replace('_', ' ').title()
        duration = stage_progress.duration
        duration_str = f" ({duration.total_seconds():.2f}s)" if duration else ""

        if success:
            self.logger.info(f"Completed stage: {stage_name}{duration_str}")
            if self.enable_console_output:
                print(f"   Completed{duration_str}")
        else:
            self.logger.error(f"Failed stage: {stage_name}{duration_str}")
            if self.enable_console_output:
                print(f"   Failed{duration_str}")

        self._notify(stage_progress)

    def update_summary_data(self, **kwargs) -> None:
        """Record counts shown in the completion summary."""
        self.summary_data.update(kwargs)

    def complete_pipeline(self, success: bool = True) -> Dict[str, Any]:
        """Finish the pipeline and return its summary."""
        self.pipeline_end_time = datetime.now()
        summary = self.generate_completion_summary()
        summary['success'] = success

        if success:
            self.logger.info("Package build completed successfully")
        else:
            self.logger.error("Package build failed")

        if self.enable_console_output:
            print("\nPackage build completed successfully!" if success else "\nPackage build failed")
            self._print_completion_summary(summary)
        return summary

    def generate_completion_summary(self) -> Dict[str, Any]:
        completed = [s for s in self.stages.values() if s.status == "completed"]
        failed = [s for s in self.stages.values() if s.status == "failed"]
        duration = None
        if self.pipeline_start_time and self.pipeline_end_time:
            duration = (self.pipeline_end_time - self.pipeline_start_time).total_seconds()

        summary = {
            'total_duration_seconds': duration,
            'stages_completed': len(completed),
            'stages_failed': len(failed),
            'total_stages': len(self.stages),
            'stage_details': {
                s.stage.value: {
                    'status': s.status,
                    'duration_seconds': s.duration.total_seconds() if s.duration else None,
                    'completed_items': s.completed_items,
                    'total_items': s.total_items,
                }
                for s in self.stages.values()
            },
        }
        summary.update(self.summary_data)
        return summary

    def _print_completion_summary(self, summary: Dict[str, Any]) -> None:
        print("\n" + "=" * 50)
        print("BUILD SUMMARY")
        print("=" * 50)

        duration = summary.get('total_duration_seconds')
        if duration is not None:
            print(f"Total Duration: {duration:.1f} seconds")
        print(f"Stages Completed: {summary.get('stages_completed', 0)}/{summary.get('total_stages', 0)}")
        if summary.get('stages_failed'):
            print(f"Stages Failed: {summary['stages_failed']}")

        print(f"   Decks: {summary.get('decks', 0)}")
        print(f"   Notes: {summary.get('notes', 0)}")
        print(f"   Cards: {summary.get('cards', 0)}")
        print(f"   Media Files: {summary.get('media_files', 0)}")
        if summary.get('output_path'):
            print(f"   Output: {summary['output_path']}")
        print("=" * 50)

    def log_warning(self, stage: ProcessingStage, message: str) -> None:
        stage_name = stage.value.replace('_', ' ').title()
        self.logger.warning(f"[{stage_name}] {message}")
        if self.enable_console_output:
            print(f"   Warning: {message}")


# Global progress tracker instance
progress_tracker = ProgressTracker()
