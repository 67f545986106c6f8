"""Windows System Repair — DISM + SFC repair runner"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("winrepair")
except PackageNotFoundError:
    __version__ = "dev"

__author__ = "Windows System Repair"
