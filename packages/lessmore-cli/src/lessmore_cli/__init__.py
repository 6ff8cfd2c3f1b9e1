"""lessmore-cli: Command-line interface for lessmore.

Commands:
- lessmore parse: Generate the public stylesheet tree
- lessmore clean: Remove generated public stylesheets
- lessmore generate KEY: Print the CSS for one stylesheet
- lessmore exists KEY: Check that a stylesheet can be generated
- lessmore init: Run the startup wiring (parse or clean by environment)
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
