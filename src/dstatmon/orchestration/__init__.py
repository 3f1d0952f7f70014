"""
Orchestration of the dstat input pipeline.

This package contains the components driving a sampler run:

- DstatInput: configures and owns the whole pipeline
- ProcessSupervisor: sampler lifecycle, restart and shutdown
- SamplerProcessManager: spawning, signalling and reaping dstat
- LineProcessor: decoding tailed lines and emitting records
- RotationManager: periodic truncation of the output file
- StalenessMonitor: restart trigger when output stops
"""

from .dstat_input import DstatInput
from .line_processor import LineProcessor
from .process_manager import SamplerProcessManager
from .rotation import RotationManager, TailerOwner
from .staleness import StalenessMonitor
from .supervisor import ProcessSupervisor

__all__ = [
    "DstatInput",
    "LineProcessor",
    "ProcessSupervisor",
    "RotationManager",
    "SamplerProcessManager",
    "StalenessMonitor",
    "TailerOwner",
]
