# -*- coding: utf-8 -*-
"""
Utility functions and constants for painlab_nidaq.

- Logging configuration and management (loguru sinks)
- Default constants for networking, acquisition timing and stimulation output

Examples
--------
Starting a log that goes to the terminal only:
```python
from painlab_nidaq.util import start_device_log
start_device_log(log_to_file=False, log_to_stdout=True, log_level="DEBUG")
```

See Also
--------
painlab_nidaq.util.logging : Logging configuration
painlab_nidaq.util.defaults : Default constants
"""

from .defaults import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_HOST_ADDR,
    DEFAULT_LOGLEVEL,
    DEFAULT_MAX_VOLT,
    DEFAULT_OUTPUT_SAMPLE_RATE,
    DEFAULT_OUTPUT_TIMEOUT_S,
    DEFAULT_PORT,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_SAMPLES_PER_FRAME,
    DEFAULT_SETTLE_DELAY_S,
    DEFAULT_TIMEOUT,
    SINGLE_LINE_ERR_LOG,
    TEST_LOGLEVEL,
    USER_CONFIG_DIR,
)
from .logging import (
    clear_log,
    format_error_response,
    get_log_filename,
    log_default_path_device,
    shutdown_log,
    start_device_log,
)

__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "DEFAULT_HOST_ADDR",
    "DEFAULT_LOGLEVEL",
    "DEFAULT_MAX_VOLT",
    "DEFAULT_OUTPUT_SAMPLE_RATE",
    "DEFAULT_OUTPUT_TIMEOUT_S",
    "DEFAULT_PORT",
    "DEFAULT_SAMPLE_RATE",
    "DEFAULT_SAMPLES_PER_FRAME",
    "DEFAULT_SETTLE_DELAY_S",
    "DEFAULT_TIMEOUT",
    "SINGLE_LINE_ERR_LOG",
    "TEST_LOGLEVEL",
    "USER_CONFIG_DIR",
    "clear_log",
    "format_error_response",
    "get_log_filename",
    "log_default_path_device",
    "shutdown_log",
    "start_device_log",
]
