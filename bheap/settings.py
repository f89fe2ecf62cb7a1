"""
Runtime configuration for bheap.

Values are plain module-level constants so they can be imported anywhere
without setup. Each one can be overridden through an environment variable:

- ``BHEAP_LOG_LEVEL``          default log level for the CLI (e.g. "DEBUG")
- ``BHEAP_INDEX_CAPACITY``     initial bucket count of a heap's position index
- ``BHEAP_INDEX_LOAD_FACTOR``  load factor that triggers index growth
"""

import os

LOG_LEVEL = os.environ.get("BHEAP_LOG_LEVEL", "WARNING").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

INDEX_INITIAL_CAPACITY = int(os.environ.get("BHEAP_INDEX_CAPACITY", "16"))
INDEX_LOAD_FACTOR = float(os.environ.get("BHEAP_INDEX_LOAD_FACTOR", "0.75"))
