"""
Base module interface for wgsimtruth batch modules.

Modules validate their inputs, do their work and hand back a ModuleResult;
``run`` wraps that with timing, logging and error capture.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from wgsimtruth.exceptions import WgsimTruthError
from wgsimtruth.utils.logging import LogTemplates, get_logger


@dataclass
class ModuleResult:
    """Standard result container for all modules."""

    success: bool
    module_name: str
    output_files: dict[str, Path] = field(default_factory=dict)
    metrics: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    error_message: Optional[str] = None
    execution_time: float = 0.0

    def add_output(self, key: str, path: Union[str, Path]) -> None:
        """Add an output file to the result."""
        self.output_files[key] = Path(path)

    def add_metric(self, key: str, value: Any) -> None:
        """Add a metric to the result."""
        self.metrics[key] = value

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)


class ModuleBase(ABC):
    """Base class for all wgsimtruth batch modules."""

    def __init__(
        self,
        name: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the module.

        Args:
            name: Module name (defaults to class name)
            logger: Logger instance (creates new if None)
        """
        self.name = name or self.__class__.__name__
        self.logger = logger or get_logger(self.name)
        self._start_time: Optional[float] = None

    def validate_input_file(self, file_path: Union[str, Path], file_type: str = "input") -> Path:
        """
        Validate that an input file exists.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the path is not a regular file
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"{file_type} file not found: {path}")

        if not path.is_file():
            raise ValueError(f"{file_type} is not a file: {path}")

        if not path.stat().st_size > 0:
            self.logger.warning(f"{file_type} file is empty: {path}")

        return path

    @abstractmethod
    def validate_inputs(self, **kwargs: Any) -> bool:
        """
        Validate all required inputs for the module.

        Raises:
            ValueError: If validation fails
        """
        pass

    @abstractmethod
    def execute(self, **kwargs: Any) -> ModuleResult:
        """Execute the module's main logic."""
        pass

    def run(self, **kwargs: Any) -> ModuleResult:
        """
        Main entry point for running the module.

        Expected failures (missing files, wgsimtruth errors) are captured in
        the result; anything else propagates.
        """
        self._start_time = time.time()
        result = ModuleResult(success=False, module_name=self.name)

        try:
            self.logger.info(LogTemplates.MODULE_START.format(name=self.name))
            self.validate_inputs(**kwargs)

            result = self.execute(**kwargs)
            result.module_name = self.name
            result.execution_time = time.time() - self._start_time

            if result.success:
                self.logger.info(
                    LogTemplates.MODULE_SUCCESS.format(
                        name=self.name, duration=result.execution_time
                    )
                )
            else:
                self.logger.error(f"{self.name} failed: {result.error_message}")

            for warning in result.warnings:
                self.logger.warning(warning)

        except (WgsimTruthError, OSError, ValueError) as e:
            result.success = False
            result.error_message = str(e)
            result.execution_time = time.time() - self._start_time
            self.logger.error(f"{self.name} failed with error: {e}", exc_info=True)

        return result
