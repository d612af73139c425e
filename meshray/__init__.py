"""Ray casting against triangle meshes, with vehicle, tire and orbit-camera parameter models."""

__version__ = "0.1.0"