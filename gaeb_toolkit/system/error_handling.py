"""
Standardized error handling for the GAEB Converter application.
Includes user-facing helpers for Streamlit UI.
"""

import html
import logging
import traceback
from datetime import datetime
from typing import Optional, Dict, Any, Callable
from enum import Enum
from dataclasses import dataclass


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for better classification."""
    UNSUPPORTED_INPUT = "unsupported_input"
    XML_PARSING = "xml_parsing"
    NODE_EXTRACTION = "node_extraction"
    DATA_VALIDATION = "data_validation"
    FILE_OPERATION = "file_operation"
    EXPORT_OPERATION = "export_operation"
    UI_RENDERING = "ui_rendering"
    SYSTEM = "system"


@dataclass
class ErrorContext:
    """Context information for errors."""
    operation: str
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    user_data: Optional[Dict[str, Any]] = None


@dataclass
class ParseResult:
    """Result object for parsing operations that can succeed or fail."""
    success: bool
    data: Optional[Any] = None
    errors: Optional[list] = None
    warnings: Optional[list] = None

    @classmethod
    def success_result(cls, data: Any) -> "ParseResult":
        return cls(success=True, data=data)

    @classmethod
    def failure_result(cls, errors: list) -> "ParseResult":
        return cls(success=False, errors=errors or [])

    @classmethod
    def partial_result(cls, data: Any, warnings: list) -> "ParseResult":
        return cls(success=True, data=data, warnings=warnings or [])


class GAEBConverterError(Exception):
    """Base exception class for GAEB Converter application."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
        original_exception: Optional[Exception] = None,
    ):
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context
        self.original_exception = original_exception
        super().__init__(self.message)

    def get_user_friendly_message(self) -> str:
        friendly_messages = {
            ErrorCategory.UNSUPPORTED_INPUT: "This file type is not supported. Please use .gaeb, .d83, .p83, or .x83 files.",
            ErrorCategory.XML_PARSING: "There was an issue processing the GAEB XML file. Please check the file format and try again.",
            ErrorCategory.NODE_EXTRACTION: "Some positions could not be read and were skipped.",
            ErrorCategory.DATA_VALIDATION: "The data contains invalid or unexpected values. Please review your input.",
            ErrorCategory.FILE_OPERATION: "The file could not be read. Please check the file encoding and try again.",
            ErrorCategory.EXPORT_OPERATION: "Export failed. Please try again.",
            ErrorCategory.UI_RENDERING: "There was a display issue. Please refresh the page and try again.",
            ErrorCategory.SYSTEM: "A system error occurred. Please try again or contact support.",
        }
        return friendly_messages.get(self.category, self.message)

    def get_technical_details(self) -> Dict[str, Any]:
        details = {
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
        }

        if self.context:
            details["context"] = {
                "operation": self.context.operation,
                "file_path": self.context.file_path,
                "line_number": self.context.line_number,
            }

        if self.original_exception:
            details["original_exception"] = {
                "type": type(self.original_exception).__name__,
                "message": str(self.original_exception),
                "traceback": "".join(
                    traceback.format_exception(
                        type(self.original_exception),
                        self.original_exception,
                        self.original_exception.__traceback__,
                    )
                ),
            }

        return details


class XMLParsingError(GAEBConverterError):
    """Specific error for XML parsing issues."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, category=ErrorCategory.XML_PARSING, **kwargs)


class DataValidationError(GAEBConverterError):
    """Specific error for data validation issues."""

    def __init__(self, message: str, field_name: str = None, value: Any = None, **kwargs):
        self.field_name = field_name
        self.value = value
        super().__init__(message=message, category=ErrorCategory.DATA_VALIDATION, **kwargs)


class UnsupportedFileError(GAEBConverterError):
    """Raised before parsing when a file extension is not an accepted GAEB dialect."""

    def __init__(self, message: str, file_name: str = None, extension: str = None, **kwargs):
        self.file_name = file_name
        self.extension = extension
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message=message, category=ErrorCategory.UNSUPPORTED_INPUT, **kwargs)

    def get_user_friendly_message(self) -> str:
        return self.message


class FileReadError(GAEBConverterError):
    """Specific error for file reading and decoding issues."""

    def __init__(self, message: str, file_path: str = None, **kwargs):
        self.file_path = file_path
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message=message, category=ErrorCategory.FILE_OPERATION, **kwargs)


class ExportError(GAEBConverterError):
    """Specific error for export operation issues."""

    def __init__(self, message: str, export_type: str = None, **kwargs):
        self.export_type = export_type
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message=message, category=ErrorCategory.EXPORT_OPERATION, **kwargs)


class ErrorHandler:
    """Centralised error handling and logging."""

    def __init__(self, logger_name: str = "gaeb_converter"):
        self.logger = logging.getLogger(logger_name)
        self._setup_logger()
        self._error_count = 0
        self._session_errors = []

    def _setup_logger(self):
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def session_errors(self) -> list:
        return list(self._session_errors)

    def handle_error(self, error: GAEBConverterError) -> None:
        technical_details = error.get_technical_details()
        self._error_count += 1
        self._session_errors.append(
            {"timestamp": datetime.now().isoformat(), "error": error, "details": technical_details}
        )

        summary = {k: v for k, v in technical_details.items() if k != "original_exception"}
        if error.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(f"Critical error: {summary}")
        elif error.severity == ErrorSeverity.HIGH:
            self.logger.error(f"High severity error: {summary}")
        elif error.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(f"Medium severity error: {summary}")
        else:
            self.logger.info(f"Low severity error: {summary}")

    def log_exception(
        self,
        operation: str,
        exception: Exception,
        context: Optional[ErrorContext] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: Optional[ErrorCategory] = None,
    ) -> GAEBConverterError:
        gaeb_error = GAEBConverterError(
            message=f"Error in {operation}: {str(exception)}",
            category=category or self._categorize_exception(exception),
            severity=severity,
            context=context,
            original_exception=exception,
        )
        self.handle_error(gaeb_error)
        return gaeb_error

    def _categorize_exception(self, exception: Exception) -> ErrorCategory:
        exception_type = type(exception).__name__
        exception_module = type(exception).__module__

        if exception_type == "ParseError" and "xml.etree" in exception_module:
            return ErrorCategory.XML_PARSING

        category_map = {
            "FileNotFoundError": ErrorCategory.FILE_OPERATION,
            "PermissionError": ErrorCategory.FILE_OPERATION,
            "OSError": ErrorCategory.FILE_OPERATION,
            "UnicodeDecodeError": ErrorCategory.FILE_OPERATION,
            "UnicodeEncodeError": ErrorCategory.FILE_OPERATION,
            "ValueError": ErrorCategory.DATA_VALIDATION,
            "TypeError": ErrorCategory.DATA_VALIDATION,
            "KeyError": ErrorCategory.DATA_VALIDATION,
            "IndexError": ErrorCategory.DATA_VALIDATION,
            "AttributeError": ErrorCategory.SYSTEM,
            "MemoryError": ErrorCategory.SYSTEM,
        }

        return category_map.get(exception_type, ErrorCategory.SYSTEM)


def create_error_context(
    operation: str,
    file_path: str = None,
    line_number: int = None,
    **kwargs,
) -> ErrorContext:
    """Helper function to create error context."""
    return ErrorContext(
        operation=operation,
        file_path=file_path,
        line_number=line_number,
        user_data=kwargs.get("user_data"),
    )


def handle_file_read_error(file_path: str, exception: Exception) -> FileReadError:
    """Wrap a decoding/reading failure for a single uploaded file."""
    return FileReadError(
        message=f"Failed to read '{file_path}': {str(exception)}",
        file_path=file_path,
        context=create_error_context("read_file", file_path=file_path),
        original_exception=exception,
    )


def handle_export_error(export_type: str, exception: Exception) -> ExportError:
    """Wrap a workbook/CSV construction failure."""
    return ExportError(
        message=f"{export_type} export failed: {str(exception)}",
        export_type=export_type,
        context=create_error_context(f"export_{export_type}"),
        original_exception=exception,
    )


def log_node_extraction_failure(operation: str, exception: Exception) -> GAEBConverterError:
    """Record a skipped category, item or line at warning level; never raises."""
    return ErrorHandler().log_exception(
        operation,
        exception,
        context=create_error_context(operation),
        severity=ErrorSeverity.MEDIUM,
        category=ErrorCategory.NODE_EXTRACTION,
    )


# UI helpers (Streamlit)

def display_error_to_user(error: GAEBConverterError, show_technical_details: bool = False) -> None:
    import streamlit as st
    from .session_state import SessionStateKeys
    from ..ui.theme import info_box, warning_box, error_box

    # Messages can carry uploaded file names and extensions
    user_message = html.escape(error.get_user_friendly_message())

    if error.severity == ErrorSeverity.CRITICAL:
        st.markdown(error_box(f"🚨 **Critical Error:** {user_message}"), unsafe_allow_html=True)
    elif error.severity == ErrorSeverity.HIGH:
        st.markdown(error_box(f"❌ **Error:** {user_message}"), unsafe_allow_html=True)
    elif error.severity == ErrorSeverity.MEDIUM:
        st.markdown(warning_box(f"⚠️ **Warning:** {user_message}"), unsafe_allow_html=True)
    else:
        st.markdown(info_box(f"ℹ️ **Notice:** {user_message}"), unsafe_allow_html=True)

    if show_technical_details and st.session_state.get(SessionStateKeys.DEBUG_MODE, False):
        with st.expander("🔧 Technical Details", expanded=False):
            st.json(error.get_technical_details())


def streamlit_safe_execute(
    operation_name: str,
    func: Callable,
    *args,
    show_error_to_user: bool = True,
    default_return=None,
    **kwargs,
) -> Any:
    import streamlit as st
    from .session_state import SessionStateKeys

    error_handler = ErrorHandler()
    show_technical_details = st.session_state.get(SessionStateKeys.DEBUG_MODE, False)

    try:
        return func(*args, **kwargs)
    except GAEBConverterError as e:
        error_handler.handle_error(e)
        if show_error_to_user:
            display_error_to_user(e, show_technical_details)
        return default_return
    except Exception as e:
        context = create_error_context(operation_name)
        gaeb_error = error_handler.log_exception(operation_name, e, context, severity=ErrorSeverity.HIGH)
        if show_error_to_user:
            display_error_to_user(gaeb_error, show_technical_details)
        return default_return
