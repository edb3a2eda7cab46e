from __future__ import annotations

from fpseries.cli import main

raise SystemExit(main())
