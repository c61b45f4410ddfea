"""Command-line tools for Leafee.

- ``python -m src.cli.details <species>`` -- resolve one species through
  the same pipeline as the API and print the fact sheet (``--json`` for the
  raw response body).

CLI modules use argparse and defer heavy imports into their run functions
so ``--help`` stays fast.
"""
