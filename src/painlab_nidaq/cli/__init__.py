"""
Command-line interface for painlab-nidaq.

Built with Click. Examples
--------
Running against the mock DAQ, logging to the terminal:
```bash
$ painlab-nidaq device --mock --no-log-to-file
```

Inspecting where configuration comes from:
```bash
$ painlab-nidaq config show
```

CLI Tree
--------

```
$ painlab-nidaq --tree
cli
└── config
    └── install
    └── show
└── daq
└── device
```
"""

from .base import cli, tree_option

__all__ = ["cli", "tree_option"]
