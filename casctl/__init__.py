"""List and describe container-attached storage pools and volumes through a supplied client."""

__version__ = "0.1.0"