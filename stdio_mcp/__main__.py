"""Allow ``python -m stdio_mcp``."""

from stdio_mcp.cli import main

raise SystemExit(main())
