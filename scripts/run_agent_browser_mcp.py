#!/usr/bin/env python3
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

print(
    f"[mcp] provider={os.environ.get('AGENT_BROWSER_PROVIDER') or 'local'} | "
    f"executable={os.environ.get('AGENT_BROWSER_EXECUTABLE_PATH') or 'bundled'} | "
    f"headed={os.environ.get('AGENT_BROWSER_HEADED') or '0'} | "
    f"toolset={os.environ.get('MCP_TOOLSET') or 'full'}",
    file=sys.stderr,
)

from mcp_servers.agent_browser.main import main  # noqa: E402

if __name__ == "__main__":
    main()
