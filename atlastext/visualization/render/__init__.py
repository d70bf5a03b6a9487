"""Rendering package entry point. Import concrete submodules directly."""
