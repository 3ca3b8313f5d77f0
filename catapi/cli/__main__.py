"""Allow ``python -m catapi.cli`` execution."""

from catapi.cli.sync import main

main()
