from .generators import GENERATOR_TOOLS
from .sdk import SdkCommands, run_command

__all__ = ["GENERATOR_TOOLS", "SdkCommands", "run_command"]
