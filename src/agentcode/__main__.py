"""Entry point for running the agent as a module.

Usage:
    python -m agentcode --root path/to/workspace
"""

from agentcode.cli import main

if __name__ == "__main__":
    main()
