from __future__ import annotations

from xcui_commands.remote.proxy import WdaProxy

__all__ = ["WdaProxy"]
