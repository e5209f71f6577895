"""Tools for preparing self-hosted CI runners: a .NET toolchain verifier and a runner image builder."""

__version__ = "0.1.0"
