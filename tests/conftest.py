from __future__ import annotations

import os

# Telemetry configures itself on import; keep test output free of log lines.
os.environ.setdefault("MODAL_ENGINE_DISABLE_CONSOLE", "1")
