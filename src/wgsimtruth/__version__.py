"""Version information for wgsimtruth."""

__version__ = "0.3.0"
__license__ = "GPL-2.0"
__description__ = "Ground-truth decoding and misalignment checks for WGSim-simulated reads"
