"""Run the BotMill CLI with ``python -m botmill``."""

from .main import main

main()
