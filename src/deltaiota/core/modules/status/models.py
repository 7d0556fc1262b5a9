import asyncio
import os
import platform
import socket
import sys

from pydantic import BaseModel, Field


class ServerStatus(BaseModel):
    """Information about the running server process."""

    architecture: str = Field(..., description="Machine architecture")
    hostname: str = Field(..., description="Host name")
    num_cpu: int = Field(..., description="Number of CPUs visible to the process")
    num_tasks: int = Field(..., description="Number of asyncio tasks alive in the event loop")
    pid: int = Field(..., description="Process ID")
    platform: str = Field(..., description="Operating system platform")

    @classmethod
    def collect(cls) -> "ServerStatus":
        """Snapshot the current process. Must be called from inside the event loop."""
        return cls(
            architecture=platform.machine(),
            hostname=socket.gethostname(),
            num_cpu=os.cpu_count() or 1,
            num_tasks=len(asyncio.all_tasks()),
            pid=os.getpid(),
            platform=sys.platform,
        )
