"""Build a Scully static site and publish it to a deploy branch.

The ``scully-publish`` console script is defined in :mod:`scully_publish.cli`;
the publish sequence itself lives in :mod:`scully_publish.publisher`.
"""

__version__ = "1.0.0"
