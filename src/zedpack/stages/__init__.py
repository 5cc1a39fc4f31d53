"""Pipeline stages, each a leaf operation composed by :mod:`zedpack.pipeline`."""

from .base import BuildArtifact, Compiler, InstalledExtension, OutputArtifact, Provisioner
from .clean import CargoCleaner
from .compiler import CargoCompiler
from .install import install
from .relocate import relocate
from .toolchain import RustupProvisioner

__all__ = [
    "BuildArtifact",
    "CargoCleaner",
    "CargoCompiler",
    "Compiler",
    "InstalledExtension",
    "OutputArtifact",
    "Provisioner",
    "RustupProvisioner",
    "install",
    "relocate",
]
