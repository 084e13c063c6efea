# -*- coding: utf-8 -*-

import pathlib

DEFAULT_HOST_ADDR = "127.0.0.1"
DEFAULT_PORT = 8124
DEFAULT_TIMEOUT = 5  # seconds
DEFAULT_LOGLEVEL = "INFO"
TEST_LOGLEVEL = "TRACE"
SINGLE_LINE_ERR_LOG = False  # reformat tracebacks into a single line for err comms

USER_CONFIG_DIR = pathlib.Path.home() / ".painlab"

# acquisition timing (NI task defaults)
DEFAULT_SAMPLE_RATE = 1000.0  # Hz
DEFAULT_SAMPLES_PER_FRAME = 10
DEFAULT_BUFFER_SIZE = 1000
DEFAULT_MAX_VOLT = 10.0

# stimulation output
DEFAULT_OUTPUT_SAMPLE_RATE = 1000.0  # Hz, one sample per ms of pulse length
DEFAULT_SETTLE_DELAY_S = 0.5  # driver reports done before the output has settled
DEFAULT_OUTPUT_TIMEOUT_S = 10.0
