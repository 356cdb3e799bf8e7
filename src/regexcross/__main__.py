"""Allow running the solver with `python -m regexcross`."""

from regexcross import main

main()
