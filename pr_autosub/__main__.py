"""Package entry point for ``python -m pr_autosub``.

WHY: Users run the pipeline as ``python -m pr_autosub`` from the machine
that hosts the editor panel.

HOW: Delegates to the CLI's main() function.
"""

from pr_autosub.cli import main

if __name__ == "__main__":
    main()
