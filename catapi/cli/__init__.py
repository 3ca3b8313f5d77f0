"""Command-line tools for catapi.

- ``python -m catapi.cli sync`` -- run one synchronization pass.
- ``python -m catapi.cli tags`` -- list stored tags.
"""
