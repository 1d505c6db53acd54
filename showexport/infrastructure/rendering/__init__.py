"""
Rendering host adapters.
"""
from .subprocess_host import SubprocessRenderingHost

__all__ = ["SubprocessRenderingHost"]
