"""
TES Thermal Network Simulator - Utilities Module
================================================
Logging and performance tracking.
"""

from .logger import (
    LOGGER_NAME,
    ThermalNetworkLogger,
    ThermalNetworkFormatter,
    PerformanceTracker,
    get_logger,
    initialize_logger,
    timed_function,
    log_section,
)

__all__ = [
    'LOGGER_NAME',
    'ThermalNetworkLogger',
    'ThermalNetworkFormatter',
    'PerformanceTracker',
    'get_logger',
    'initialize_logger',
    'timed_function',
    'log_section',
]
