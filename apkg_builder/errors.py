"""
Error handling system for the Anki package builder.

This module provides centralized error definitions and actionable error
messages for every stage between note-type registration and archive writing.
"""

import logging
from enum import Enum
from typing import List, Optional, Dict, Any
from dataclasses import dataclass


class ErrorSeverity(Enum):
    """Error severity levels."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors that can occur while building a package."""
    SCHEMA = "schema"
    TAGS = "tags"
    TEMPLATE = "template"
    RENDERING = "rendering"
    FILE_SYSTEM = "file_system"
    MEDIA = "media"
    DECK_FILE = "deck_file"


@dataclass
class ProcessingError:
    """Represents a processing error with context and guidance."""
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    details: str
    suggested_actions: List[str]
    error_code: str
    context: Dict[str, Any] = None

    def __post_init__(self):
        if self.context is None:
            self.context = {}


class ApkgBuilderError(Exception):
    """Base exception for Anki package builder errors."""

    def __init__(self, processing_error: ProcessingError):
        self.processing_error = processing_error
        super().__init__(processing_error.message)

    @property
    def error_code(self) -> str:
        return self.processing_error.error_code


class SchemaMismatchError(ApkgBuilderError):
    """Raised when a note does not fit its note type."""
    pass


class InvalidTagError(ApkgBuilderError):
    """Raised when a tag contains whitespace."""
    pass


class UninferableTemplateError(ApkgBuilderError):
    """Raised when no governing fields can be found for a question template."""
    pass


class TemplateRenderError(ApkgBuilderError):
    """Raised when template markup cannot be parsed or rendered."""
    pass


class PackageIOError(ApkgBuilderError):
    """Raised when the database, archive or filesystem layer fails."""
    pass


class MediaPathError(ApkgBuilderError):
    """Raised when a media reference cannot be turned into an archive entry."""
    pass


class DeckFileError(ApkgBuilderError):
    """Raised when a deck description file is malformed."""
    pass


class ErrorHandler:
    """
    Centralized error handling and reporting system.

    Builds ProcessingError values for every failure kind and keeps track of
    the errors and warnings reported during a run.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.errors: List[ProcessingError] = []
        self.warnings: List[ProcessingError] = []

    def add_error(self, error: ProcessingError) -> None:
        """Add an error to the collection."""
        if error.severity in [ErrorSeverity.ERROR, ErrorSeverity.CRITICAL]:
            self.errors.append(error)
        elif error.severity == ErrorSeverity.WARNING:
            self.warnings.append(error)

        log_level = {
            ErrorSeverity.INFO: logging.INFO,
            ErrorSeverity.WARNING: logging.WARNING,
            ErrorSeverity.ERROR: logging.ERROR,
            ErrorSeverity.CRITICAL: logging.CRITICAL
        }[error.severity]

        self.logger.log(log_level, f"[{error.error_code}] {error.message}")
        if error.details:
            self.logger.log(log_level, f"Details: {error.details}")

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if any warnings have been recorded."""
        return len(self.warnings) > 0

    def get_error_summary(self) -> Dict[str, Any]:
        """Get a summary of all errors and warnings."""
        return {
            'error_count': len(self.errors),
            'warning_count': len(self.warnings),
            'errors': [self._format_error_for_summary(e) for e in self.errors],
            'warnings': [self._format_error_for_summary(e) for e in self.warnings]
        }

    def _format_error_for_summary(self, error: ProcessingError) -> Dict[str, Any]:
        """Format error for summary display."""
        return {
            'code': error.error_code,
            'category': error.category.value,
            'severity': error.severity.value,
            'message': error.message,
            'suggested_actions': error.suggested_actions
        }

    def clear_errors(self) -> None:
        """Clear all recorded errors and warnings."""
        self.errors.clear()
        self.warnings.clear()

    def field_count_mismatch(self, note_type_name: str, expected: int, actual: int) -> ProcessingError:
        """Describe a note whose field count disagrees with its note type."""
        return ProcessingError(
            category=ErrorCategory.SCHEMA,
            severity=ErrorSeverity.ERROR,
            message="Number of note fields does not match the note type",
            details=(
                f"Note type '{note_type_name}' defines {expected} field(s) "
                f"but the note supplies {actual}"
            ),
            suggested_actions=[
                "Pass exactly one value per note-type field, in field order",
                "Use an empty string for fields that should stay blank"
            ],
            error_code="SCHEMA_001",
            context={'note_type': note_type_name, 'expected': expected, 'actual': actual}
        )

    def duplicate_field_names(self, note_type_name: str, duplicates: List[str]) -> ProcessingError:
        """Describe a note type declaring the same field name twice."""
        return ProcessingError(
            category=ErrorCategory.SCHEMA,
            severity=ErrorSeverity.ERROR,
            message="Field names must be unique within a note type",
            details=f"Note type '{note_type_name}' repeats: {', '.join(duplicates)}",
            suggested_actions=["Rename the repeated fields"],
            error_code="SCHEMA_002",
            context={'note_type': note_type_name, 'duplicates': duplicates}
        )

    def invalid_tag(self, tag: str) -> ProcessingError:
        """Describe a tag that contains whitespace."""
        return ProcessingError(
            category=ErrorCategory.TAGS,
            severity=ErrorSeverity.ERROR,
            message="One of the tags contains whitespace",
            details=f"Tag {tag!r} contains whitespace, which Anki uses as the tag separator",
            suggested_actions=[
                "Replace spaces in tags with underscores",
                "Split multi-word tags into separate tags"
            ],
            error_code="TAG_001",
            context={'tag': tag}
        )

    def uninferable_template(self, note_type_name: str, template_name: str, qfmt: str) -> ProcessingError:
        """Describe a question template with no governing field."""
        return ProcessingError(
            category=ErrorCategory.TEMPLATE,
            severity=ErrorSeverity.ERROR,
            message="Could not compute required fields for this template",
            details=(
                f"Template '{template_name}' of note type '{note_type_name}' never "
                f"renders any field value; check the formatting of qfmt: {qfmt!r}"
            ),
            suggested_actions=[
                "Reference at least one field in the question template, e.g. {{Front}}",
                "Make sure conditional sections wrap a field substitution"
            ],
            error_code="TEMPLATE_001",
            context={'note_type': note_type_name, 'template': template_name}
        )

    def template_render_failure(self, pattern: str, error: Exception) -> ProcessingError:
        """Describe markup the renderer could not parse."""
        return ProcessingError(
            category=ErrorCategory.RENDERING,
            severity=ErrorSeverity.ERROR,
            message="Template markup could not be rendered",
            details=f"Rendering {pattern!r} failed: {error}",
            suggested_actions=[
                "Check that every {{#section}} is closed by a matching {{/section}}",
                "Check for unbalanced braces in the template"
            ],
            error_code="RENDER_001",
            context={'pattern': pattern}
        )

    def invalid_media_path(self, path: Any, reason: str) -> ProcessingError:
        """Describe a media reference that has no usable filename."""
        return ProcessingError(
            category=ErrorCategory.MEDIA,
            severity=ErrorSeverity.ERROR,
            message="Malformed media path",
            details=f"Media reference {path!r} is unusable: {reason}",
            suggested_actions=[
                "Pass a path that points to a file, not a directory",
                "Give in-memory media an explicit filename"
            ],
            error_code="MEDIA_001",
            context={'path': str(path)}
        )

    def handle_io_error(self, error: Exception, context: Dict[str, Any] = None) -> ProcessingError:
        """Handle storage, archive and filesystem errors."""
        error_str = str(error).lower()

        if isinstance(error, FileNotFoundError) or 'no such file' in error_str:
            return ProcessingError(
                category=ErrorCategory.FILE_SYSTEM,
                severity=ErrorSeverity.ERROR,
                message="File not found",
                details=f"A file needed for the package does not exist: {error}",
                suggested_actions=[
                    "Check that every media path is correct",
                    "Use an absolute path if a relative path is not resolving"
                ],
                error_code="IO_001",
                context=context
            )

        if 'permission' in error_str or 'access' in error_str:
            return ProcessingError(
                category=ErrorCategory.FILE_SYSTEM,
                severity=ErrorSeverity.ERROR,
                message="File permission error",
                details=f"Cannot read or write package data: {error}",
                suggested_actions=[
                    "Check write permissions for the output directory",
                    "Ensure the output file is not open in another application"
                ],
                error_code="IO_002",
                context=context
            )

        if 'space' in error_str or 'disk' in error_str:
            return ProcessingError(
                category=ErrorCategory.FILE_SYSTEM,
                severity=ErrorSeverity.ERROR,
                message="Insufficient disk space",
                details=f"Not enough disk space to create package: {error}",
                suggested_actions=[
                    "Free up disk space",
                    "Choose a different output location"
                ],
                error_code="IO_003",
                context=context
            )

        return ProcessingError(
            category=ErrorCategory.FILE_SYSTEM,
            severity=ErrorSeverity.ERROR,
            message="Package I/O failed",
            details=f"Failed to read or write package data: {error}",
            suggested_actions=[
                "Write to a temporary location and rename on success",
                "Try writing the package again"
            ],
            error_code="IO_004",
            context=context
        )

    def invalid_deck_file(self, source: str, problem: str) -> ProcessingError:
        """Describe a deck description file that cannot be loaded."""
        return ProcessingError(
            category=ErrorCategory.DECK_FILE,
            severity=ErrorSeverity.ERROR,
            message="Invalid deck description file",
            details=f"{source}: {problem}",
            suggested_actions=[
                "Check the file against the documented deck file layout",
                "Make sure every note references a declared note type"
            ],
            error_code="DECKFILE_001",
            context={'source': source}
        )


# Global error handler instance
error_handler = ErrorHandler()
